import asyncio
import time

import httpx
import pytest

from conftest import BASE_URL, call, doc_type_payload
from registry.clients.ClientErrors import APIError, ClientError, ConfigurationError, DecodeError, TransportError


def test_bearer_header_sent_when_key_configured(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    call(make_client(handler, api_key="secret"), lambda c: c.do_list_doc_types())

    assert seen["auth"] == "Bearer secret"


def test_no_auth_header_without_key(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["has_auth"] = "Authorization" in request.headers
        return httpx.Response(200, json=[])

    call(make_client(handler), lambda c: c.do_list_doc_types())

    assert seen["has_auth"] is False


def test_base_url_trailing_slash_is_ignored(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[])

    call(make_client(handler, base_url=BASE_URL + "/registry/"), lambda c: c.do_list_doc_types())

    assert seen["url"] == BASE_URL + "/registry/doc-types"


def test_error_payload_becomes_api_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "schema not found"})

    with pytest.raises(APIError) as exc_info:
        call(make_client(handler), lambda c: c.do_get_schema("sch_missing"))

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "schema not found"
    assert str(exc_info.value) == "API error (404): schema not found"


def test_error_details_are_kept(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "validation failed", "details": {"field": "code"}})

    with pytest.raises(APIError) as exc_info:
        call(make_client(handler), lambda c: c.do_get_doc_type("x"))

    assert exc_info.value.details == {"field": "code"}


def test_non_json_error_body_is_used_verbatim(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(APIError) as exc_info:
        call(make_client(handler), lambda c: c.do_health())

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Bad Gateway"


def test_stalled_server_hits_deadline(make_client):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=[])

    started = time.monotonic()
    with pytest.raises(TransportError) as exc_info:
        call(make_client(handler, timeout=1), lambda c: c.do_list_doc_types())
    elapsed = time.monotonic() - started

    assert exc_info.value.timed_out is True
    assert elapsed < 3


def test_connection_failure_becomes_transport_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        call(make_client(handler), lambda c: c.do_health())

    assert exc_info.value.timed_out is False
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_malformed_success_body_becomes_decode_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="{not json")

    with pytest.raises(DecodeError):
        call(make_client(handler), lambda c: c.do_get_doc_type("Invoice"))


def test_unexpected_shape_becomes_decode_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(DecodeError):
        call(make_client(handler), lambda c: c.do_list_doc_types())


def test_empty_body_on_success(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    assert call(make_client(handler), lambda c: c.do_delete_doc_type("Invoice")) is None


def test_request_before_boot_fails(make_client):
    client = make_client(lambda request: httpx.Response(200, json=doc_type_payload()))

    with pytest.raises(ClientError, match="boot"):
        asyncio.run(client.do_get_doc_type("Invoice"))


def test_close_releases_http_client(make_client):
    client = make_client(lambda request: httpx.Response(200, json=[]))

    async def _boot_and_close():
        await client.boot()
        await client.close()

    asyncio.run(_boot_and_close())

    assert client._client is None


def test_header_that_cannot_be_encoded_becomes_configuration_error(make_client):
    client = make_client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ConfigurationError, match="Invalid request to"):
        call(client, lambda c: c.do_request(method="GET", endpoint="/health", additional_headers={"X-Customer": "café"}))


def test_redirect_is_followed_with_the_same_method(make_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.url.path == "/admin/schemas/sch_1":
            return httpx.Response(307, headers={"Location": "/v2/admin/schemas/sch_1"})
        return httpx.Response(204)

    result = call(make_client(handler), lambda c: c.do_delete_schema("sch_1"))

    assert result is None
    assert seen == [("DELETE", "/admin/schemas/sch_1"), ("DELETE", "/v2/admin/schemas/sch_1")]


def test_redirect_target_errors_are_reported(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/doc-types":
            return httpx.Response(308, headers={"Location": BASE_URL + "/v2/doc-types"})
        return httpx.Response(404, json={"error": "gone"})

    with pytest.raises(APIError) as exc_info:
        call(make_client(handler), lambda c: c.do_list_doc_types())

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "gone"
