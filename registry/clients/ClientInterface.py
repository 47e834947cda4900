import asyncio
from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes, RequestData, RequestFiles
from pydantic import ValidationError

from registry.clients.ClientErrors import APIError, ClientError, ConfigurationError, DecodeError, TransportError
from registry.helper.HelperConfig import HelperConfig
from registry.models.config import ClientConfig, EnvConfig
from registry.models.error import ErrorResponse


class ClientInterface(ABC):
    def __init__(
        self,
        helper_config: HelperConfig,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config

        # explicit overrides win over env, env wins over built-in defaults
        self.validate_full_configuration()
        self.config: ClientConfig = (
            self._load_client_config()
            .with_base_url(base_url)
            .with_api_key(api_key)
            .with_timeout(timeout)
        )
        self.validate_client_config()
        self.timeout = self.config.timeout

        # client and transport (transport is only injected by tests)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Validates that all required configuration values for the client are set and parseable.

        Raises:
            ConfigurationError: If any required configuration value is missing or invalid.
        """
        req_config = self._get_required_config()
        for config in req_config:
            _ = self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def validate_client_config(self) -> None:
        """
        Validates the resolved client configuration, after all overrides were applied.

        Raises:
            ConfigurationError: If the base URL is empty, the timeout is not positive
                or the API key cannot be sent in an HTTP header.
        """
        if not self.config.base_url.strip():
            raise ConfigurationError(
                f"API URL is required. Set {self._get_config_key_name('API_URL')} or use --api-url flag"
            )
        if self.config.timeout <= 0:
            raise ConfigurationError(f"Timeout must be a positive number of seconds, got {self.config.timeout}.")
        if not self.config.api_key.isascii():
            raise ConfigurationError(
                f"API key must contain only ASCII characters. Check {self._get_config_key_name('API_KEY')} or the --api-key flag"
            )

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """
        Returns the type of the client in lowercase. E.g. "registry"
        """
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "registry"
        """
        pass

    def get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "docontology"
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "DocOntology"
        """
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns all required configurations for the client.

        Returns:
            list[EnvConfig]: A list containing the details of each required configuration key.
        """
        pass

    @abstractmethod
    def _load_client_config(self) -> ClientConfig:
        """
        Builds the connection settings of the client from env variables and built-in defaults.

        Returns:
            ClientConfig: The settings before any explicit override is applied.

        Raises:
            ConfigurationError: If an env value is set but cannot be parsed.
        """
        pass

    def _get_config_key_prefix(self) -> str:
        """
        Returns:
            str: The prefix of all env keys of the client. E.g. "REGISTRY_DOCONTOLOGY"
        """
        return f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}"

    def _get_config_key_name(self, raw_key: str) -> str:
        """
        Returns:
            str: The full configuration key name for the client. E.g. "SCHEMACTL_API_KEY"
        """
        return f"{self._get_config_key_prefix()}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Retrieves the value of a configuration key for the client.

        Args:
            raw_key (str): The raw configuration key name
            default (Any): The default value to return if the configuration key is not set
            val_type (str): The type of the configuration value ("string", "number")
        """
        key = self._get_config_key_name(raw_key)
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        elif val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        else:
            raise ConfigurationError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} client '{self.get_engine_name()}'.")

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the authentication header for the client backend server, if an API key is set.

        Returns:
            dict: A dictionary containing the auth data
        """
        pass

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        """
        Returns the base URL of the client backend server, without trailing slash.
        """
        return self.config.base_url.rstrip("/")

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns the endpoint path for healthcheck requests.

        Returns:
            str: The endpoint path for healthcheck requests (e.g. "/health")

        Raises:
            NotImplementedError: If the method is not implemented in a subclass.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Check if the client backend is reachable by sending a test request.

        Returns:
            httpx.Response: The response from the healthcheck request.
        """
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        """Initialise the HTTP client and any other resources needed for making requests."""
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport, follow_redirects=True)

    async def close(self) -> None:
        """Close the HTTP client and any other resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ClientInterface":
        await self.boot()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def do_request(
        self,
        method: str = "GET",
        data: RequestData | None = None,
        files: RequestFiles | None = None,
        json: Any = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
    ) -> httpx.Response:
        """Send an HTTP request to the client backend.

        The configured timeout is applied as a hard deadline over the whole
        exchange, including reading the response body.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE, …).
            data: Form fields, sent next to files as multipart.
            files: Multipart file upload.
            json: JSON-serialisable body.
            params: URL query parameters.
            endpoint: Path to append to the base URL (leading slash optional).
            additional_headers: Extra headers that override the defaults.

        Returns:
            The raw httpx.Response, whatever its status code.

        Raises:
            ClientError: If the client is not initialised.
            TransportError: If the server could not be reached or the deadline expired.
        """
        if self._client is None:
            raise ClientError("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""

        # Do NOT set a default Content-Type here: httpx sets the multipart boundary itself.
        headers: dict = {}
        headers.update(self._get_auth_header())
        if additional_headers:
            headers.update(additional_headers)

        url = f"{self._get_base_url()}{endpoint}"
        kwargs: dict = {
            "url": url,
            "headers": headers,
            "params": params,
        }
        if files is not None:
            kwargs["files"] = files
            if data is not None:
                kwargs["data"] = data
        elif data is not None:
            kwargs["data"] = data
        elif json is not None:
            kwargs["json"] = json

        self.logging.debug("%s %s", method, url)
        try:
            response = await asyncio.wait_for(self._client.request(method, **kwargs), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            self.logging.error("Request %s %s timed out after %ss", method, url, self.timeout)
            raise TransportError(f"Request to {url} timed out after {self.timeout}s", url=url, timed_out=True) from e
        except httpx.TransportError as e:
            self.logging.error("Request %s %s failed: %s", method, url, e)
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            # the request could not be built from the local settings
            self.logging.error("Request %s %s could not be built: %s", method, url, e)
            raise ConfigurationError(f"Invalid request to {url}: {e}") from e

        self.logging.debug("%s %s -> %d", method, url, response.status_code)
        return response

    async def do_json_request(
        self,
        method: str = "GET",
        json: Any = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
    ) -> Any:
        """Send a JSON request and decode the JSON answer.

        Returns:
            Any: The decoded JSON body, or None if the server sent an empty body.

        Raises:
            TransportError: If the server could not be reached or the deadline expired.
            APIError: If the server answered with a status >= 400.
            DecodeError: If the body of a successful answer is not valid JSON.
        """
        headers = {"Content-Type": "application/json"}
        if additional_headers:
            headers.update(additional_headers)
        response = await self.do_request(method=method, json=json, params=params, endpoint=endpoint, additional_headers=headers)
        self._raise_for_status(response)
        return self._decode_body(response)

    async def do_multipart_request(
        self,
        method: str = "POST",
        data: dict | None = None,
        files: RequestFiles | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
    ) -> Any:
        """Send a multipart/form-data request (files plus sibling text fields) and decode the JSON answer.

        Raises:
            TransportError: If the server could not be reached or the deadline expired.
            APIError: If the server answered with a status >= 400.
            DecodeError: If the body of a successful answer is not valid JSON.
        """
        response = await self.do_request(method=method, data=data, files=files, endpoint=endpoint, additional_headers=additional_headers)
        self._raise_for_status(response)
        return self._decode_body(response)

    ##########################################
    ########### RESPONSE HANDLING ############
    ##########################################

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        Maps a response with status >= 400 to an APIError. Uses the message of the
        error payload if there is one, the raw body otherwise.

        Raises:
            APIError: If the status code is >= 400.
        """
        if response.status_code < 400:
            return

        message = response.text
        details = None
        try:
            error_response = ErrorResponse.model_validate(response.json())
            if error_response.error:
                message = error_response.error
                details = error_response.details
        except (ValueError, ValidationError):
            pass  # not an error payload, keep the raw body

        self.logging.error(
            "Request to %s failed with status %d: %s",
            response.request.url,
            response.status_code,
            message,
        )
        raise APIError(status_code=response.status_code, message=message, details=details)

    def _decode_body(self, response: httpx.Response) -> Any:
        """
        Decodes the JSON body of a successful response.

        Returns:
            Any: The decoded body, or None for an empty body.

        Raises:
            DecodeError: If the body is not valid JSON.
        """
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Failed to decode response from {response.request.url}: {e}") from e
