"""Error taxonomy shared by all HTTP clients.

ClientError
  ConfigurationError : bad or missing local configuration, never retried.
  TransportError     : the request never reached the server or never came back (network failure, timeout).
  APIError           : the server answered with a status >= 400.
  DecodeError        : the server answered, but the body could not be decoded.
"""

from typing import Any


class ClientError(Exception):
    """Base class for every error raised by a client."""


class ConfigurationError(ClientError, ValueError):
    """Raised when the local configuration is missing or invalid."""


class TransportError(ClientError):
    """Raised when the request could not be delivered or the response never arrived.

    Attributes:
        url (str | None): The URL that was requested.
        timed_out (bool): True if the configured deadline expired.
    """

    def __init__(self, message: str, url: str | None = None, timed_out: bool = False):
        super().__init__(message)
        self.url = url
        self.timed_out = timed_out


class APIError(ClientError):
    """Raised when the server responded with a status code >= 400.

    Attributes:
        status_code (int): HTTP status code of the response.
        message (str): The decoded error message, or the raw body if it could not be decoded.
        details (dict | None): Structured details sent by the server, if any.
    """

    def __init__(self, status_code: int, message: str, details: dict[str, Any] | None = None):
        super().__init__(f"API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


class DecodeError(ClientError):
    """Raised when a successful response body is not valid JSON or does not match the expected model."""
