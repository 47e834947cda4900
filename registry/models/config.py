from pydantic import BaseModel, ConfigDict


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The key/name of the environment variable to read.
        val_type (str): The expected type of the environment variable's value. Supported types are "string" and "number".
        default (str | int | float | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | float | None = None


class ClientConfig(BaseModel):
    """
    Resolved connection settings of a client. Immutable once built.

    The with_* methods return an updated copy and never touch the original,
    so a config loaded from the environment can be overridden per invocation.

    Attributes:
        base_url (str): Base URL of the backend server (without trailing slash).
        api_key (str): API key sent as bearer token. Empty means unauthenticated.
        timeout (float): Hard deadline for a single request, in seconds.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str = ""
    timeout: float = 30.0

    def with_base_url(self, base_url: str | None) -> "ClientConfig":
        if not base_url:
            return self
        return self.model_copy(update={"base_url": base_url})

    def with_api_key(self, api_key: str | None) -> "ClientConfig":
        if not api_key:
            return self
        return self.model_copy(update={"api_key": api_key})

    def with_timeout(self, timeout: float | None) -> "ClientConfig":
        if timeout is None:
            return self
        return self.model_copy(update={"timeout": timeout})
