from urllib.parse import quote

import httpx

from registry.clients.registry.RegistryClientInterface import RegistryClientInterface
from registry.helper.HelperConfig import HelperConfig
from registry.models.config import ClientConfig, EnvConfig

DEFAULT_API_URL = "https://api.docdigitizer.com/registry"
DEFAULT_TIMEOUT = 30


class RegistryClientDocOntology(RegistryClientInterface):
    def __init__(
        self,
        helper_config: HelperConfig,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            helper_config=helper_config,
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            transport=transport,
        )

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "DocOntology"

    ################ CONFIG ##################
    def _get_config_key_prefix(self) -> str:
        return "SCHEMACTL"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_URL", val_type="string", default=DEFAULT_API_URL),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="TIMEOUT", val_type="number", default=DEFAULT_TIMEOUT),
        ]

    def _load_client_config(self) -> ClientConfig:
        return ClientConfig(
            base_url=self.get_config_val("API_URL", default=DEFAULT_API_URL, val_type="string"),
            api_key=self.get_config_val("API_KEY", default="", val_type="string"),
            timeout=self.get_config_val("TIMEOUT", default=DEFAULT_TIMEOUT, val_type="number"),
        )

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self.config.api_key:
            return {"Authorization": f"Bearer {self.config.api_key}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_endpoint_healthcheck(self) -> str:
        return "/health"

    def _get_endpoint_reference_data(self) -> str:
        return "/reference-data"

    def _get_endpoint_doc_types(self, include_inactive: bool = False) -> str:
        return "/admin/doc-types" if include_inactive else "/doc-types"

    def _get_endpoint_doc_type_details(self, code: str) -> str:
        return f"/admin/doc-types/{_segment(code)}"

    def _get_endpoint_countries(self, include_inactive: bool = False) -> str:
        return "/admin/countries" if include_inactive else "/countries"

    def _get_endpoint_country_details(self, code: str) -> str:
        return f"/admin/countries/{_segment(code)}"

    def _get_endpoint_schemas(self) -> str:
        return "/admin/schemas"

    def _get_endpoint_schema_details(self, schema_id: str) -> str:
        return f"/admin/schemas/{_segment(schema_id)}"

    def _get_endpoint_schema_version(self, version_id: str) -> str:
        return f"/admin/schemas/versions/{_segment(version_id)}"

    def _get_endpoint_schema_versions(self, schema_id: str) -> str:
        return f"/admin/schemas/{_segment(schema_id)}/versions"

    def _get_endpoint_schema_transition(self, schema_id: str, transition: str) -> str:
        return f"/admin/schemas/{_segment(schema_id)}/{transition}"

    def _get_endpoint_find_best(self) -> str:
        return "/schemas/find-best"

    def _get_endpoint_match(self) -> str:
        return "/schemas/extract"

    def _get_endpoint_generate(self) -> str:
        return "/schemas/generate"


def _segment(value: str) -> str:
    # ids are user input, "/" and "?" must not leak into the route
    return quote(value, safe="")
