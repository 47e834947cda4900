import asyncio
import logging

import httpx
import pytest

from registry.clients.registry.docontology.RegistryClientDocOntology import RegistryClientDocOntology
from registry.helper.HelperConfig import HelperConfig

BASE_URL = "https://registry.test"

ENV_KEYS = (
    "SCHEMACTL_API_URL",
    "SCHEMACTL_API_KEY",
    "SCHEMACTL_TIMEOUT",
    "SCHEMACTL_LOG_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logging.getLogger("schemactl-tests"))


@pytest.fixture
def make_client(helper_config):
    """Builds a DocOntology client whose requests are answered by the given handler."""

    def _make(handler, **kwargs) -> RegistryClientDocOntology:
        kwargs.setdefault("base_url", BASE_URL)
        return RegistryClientDocOntology(
            helper_config=helper_config,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make


def call(client, operation):
    """Boots the client, awaits one operation and closes the client again."""

    async def _run():
        async with client:
            return await operation(client)

    return asyncio.run(_run())


def doc_type_payload(code: str = "Invoice", **overrides) -> dict:
    payload = {
        "code": code,
        "name": f"{code} Document",
        "description": None,
        "isActive": True,
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-02T11:30:00Z",
    }
    payload.update(overrides)
    return payload


def country_payload(code: str = "PT", **overrides) -> dict:
    payload = {
        "code": code,
        "name": "Portugal",
        "isActive": True,
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    payload.update(overrides)
    return payload


def schema_payload(public_id: str = "sch_abc123", **overrides) -> dict:
    payload = {
        "publicId": public_id,
        "publicVersionId": "schv_def456",
        "name": "Invoice PT",
        "description": "Portuguese invoices",
        "version": 1,
        "content": {"type": "object", "properties": {"Total": {"type": "number"}}},
        "schemaType": "standard",
        "status": "draft",
        "customerId": None,
        "visibility": "private",
        "docTypeCode": "Invoice",
        "countryCode": "PT",
        "validFrom": None,
        "validTo": None,
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    payload.update(overrides)
    return payload
