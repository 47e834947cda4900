import os
from abc import abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from registry.clients.ClientErrors import ConfigurationError, DecodeError
from registry.clients.ClientInterface import ClientInterface
from registry.clients.registry.models.Country import CountryDetails, CreateCountryRequest, UpdateCountryRequest
from registry.clients.registry.models.DocType import CreateDocTypeRequest, DocTypeDetails, UpdateDocTypeRequest
from registry.clients.registry.models.Extraction import ExtractResponse, GenerateResponse, GenerateSchemaRequest
from registry.clients.registry.models.FindBest import FindBestRequest, FindBestResponse
from registry.clients.registry.models.Schema import (
    CreateSchemaRequest,
    ListSchemasOptions,
    PaginatedSchemaList,
    SchemaWithRelations,
    UpdateSchemaRequest,
)
from registry.clients.registry.models.System import HealthResponse, ReferenceDataResponse

T = TypeVar("T", bound=BaseModel)


class RegistryClientInterface(ClientInterface):
    """
    Operations of a schema registry. Every operation is exactly one request;
    nothing is cached and nothing is validated locally that the server validates
    (lifecycle transitions, schema selection priority).
    """

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "registry"
        """
        return "registry"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_reference_data(self) -> str:
        """Returns the endpoint path for the combined doc type and country listing (e.g. "/reference-data")."""
        pass

    @abstractmethod
    def _get_endpoint_doc_types(self, include_inactive: bool = False) -> str:
        """
        Returns the endpoint path for doc type listing and creation.

        Args:
            include_inactive (bool): If True, the admin listing that also contains inactive doc types is returned.
        """
        pass

    @abstractmethod
    def _get_endpoint_doc_type_details(self, code: str) -> str:
        """Returns the endpoint path of a single doc type (e.g. "/admin/doc-types/{code}")."""
        pass

    @abstractmethod
    def _get_endpoint_countries(self, include_inactive: bool = False) -> str:
        """
        Returns the endpoint path for country listing and creation.

        Args:
            include_inactive (bool): If True, the admin listing that also contains inactive countries is returned.
        """
        pass

    @abstractmethod
    def _get_endpoint_country_details(self, code: str) -> str:
        """Returns the endpoint path of a single country (e.g. "/admin/countries/{code}")."""
        pass

    @abstractmethod
    def _get_endpoint_schemas(self) -> str:
        """Returns the endpoint path for schema listing and creation (e.g. "/admin/schemas")."""
        pass

    @abstractmethod
    def _get_endpoint_schema_details(self, schema_id: str) -> str:
        """Returns the endpoint path of a single schema, by publicId or publicVersionId."""
        pass

    @abstractmethod
    def _get_endpoint_schema_version(self, version_id: str) -> str:
        """Returns the endpoint path of a single schema version."""
        pass

    @abstractmethod
    def _get_endpoint_schema_versions(self, schema_id: str) -> str:
        """Returns the endpoint path listing all versions of a schema."""
        pass

    @abstractmethod
    def _get_endpoint_schema_transition(self, schema_id: str, transition: str) -> str:
        """
        Returns the endpoint path of a lifecycle transition.

        Args:
            schema_id (str): The schema to transition.
            transition (str): "activate" or "deprecate".
        """
        pass

    @abstractmethod
    def _get_endpoint_find_best(self) -> str:
        """Returns the endpoint path of the best-schema lookup (e.g. "/schemas/find-best")."""
        pass

    @abstractmethod
    def _get_endpoint_match(self) -> str:
        """Returns the endpoint path of the upload-and-match endpoint (e.g. "/schemas/extract")."""
        pass

    @abstractmethod
    def _get_endpoint_generate(self) -> str:
        """Returns the endpoint path of the schema generation endpoint (e.g. "/schemas/generate")."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    ############# SYSTEM REQUESTS ##############
    async def do_health(self) -> HealthResponse | None:
        """
        Fetches the health status of the registry and its database.
        """
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_healthcheck())
        return self._parse_model(HealthResponse, payload)

    async def do_fetch_reference_data(self) -> ReferenceDataResponse | None:
        """
        Fetches all active doc types and countries in a single request.
        """
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_reference_data())
        return self._parse_model(ReferenceDataResponse, payload)

    ############# DOC TYPE REQUESTS ##############
    async def do_list_doc_types(self, include_inactive: bool = False) -> list[DocTypeDetails]:
        """
        Lists doc types.

        Args:
            include_inactive (bool): Also return soft-deleted doc types (admin listing).
        """
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_doc_types(include_inactive))
        return self._parse_model_list(DocTypeDetails, payload)

    async def do_get_doc_type(self, code: str) -> DocTypeDetails | None:
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_doc_type_details(code))
        return self._parse_model(DocTypeDetails, payload)

    async def do_create_doc_type(self, request: CreateDocTypeRequest) -> DocTypeDetails | None:
        # creation only exists on the admin route
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_doc_types(include_inactive=True), json=request.to_payload())
        return self._parse_model(DocTypeDetails, payload)

    async def do_update_doc_type(self, code: str, request: UpdateDocTypeRequest) -> DocTypeDetails | None:
        payload = await self.do_json_request(method="PATCH", endpoint=self._get_endpoint_doc_type_details(code), json=request.to_payload(only_set=True))
        return self._parse_model(DocTypeDetails, payload)

    async def do_delete_doc_type(self, code: str) -> None:
        """
        Soft deletes a doc type (the server sets isActive to false).
        """
        await self.do_json_request(method="DELETE", endpoint=self._get_endpoint_doc_type_details(code))

    ############# COUNTRY REQUESTS ##############
    async def do_list_countries(self, include_inactive: bool = False) -> list[CountryDetails]:
        """
        Lists countries.

        Args:
            include_inactive (bool): Also return soft-deleted countries (admin listing).
        """
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_countries(include_inactive))
        return self._parse_model_list(CountryDetails, payload)

    async def do_get_country(self, code: str) -> CountryDetails | None:
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_country_details(code))
        return self._parse_model(CountryDetails, payload)

    async def do_create_country(self, request: CreateCountryRequest) -> CountryDetails | None:
        # creation only exists on the admin route
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_countries(include_inactive=True), json=request.to_payload())
        return self._parse_model(CountryDetails, payload)

    async def do_update_country(self, code: str, request: UpdateCountryRequest) -> CountryDetails | None:
        payload = await self.do_json_request(method="PATCH", endpoint=self._get_endpoint_country_details(code), json=request.to_payload(only_set=True))
        return self._parse_model(CountryDetails, payload)

    async def do_delete_country(self, code: str) -> None:
        """
        Soft deletes a country (the server sets isActive to false).
        """
        await self.do_json_request(method="DELETE", endpoint=self._get_endpoint_country_details(code))

    ############# SCHEMA REQUESTS ##############
    async def do_list_schemas(self, options: ListSchemasOptions | None = None) -> PaginatedSchemaList | None:
        """
        Lists one page of schemas.

        Args:
            options (ListSchemasOptions | None): Filters and paging. Unset filters are not sent.
        """
        params = options.to_query_params() if options else {}
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_schemas(), params=params)
        return self._parse_model(PaginatedSchemaList, payload)

    async def do_get_schema(self, schema_id: str) -> SchemaWithRelations | None:
        """
        Fetches a schema by publicId (sch_xxx) or publicVersionId (schv_xxx).
        """
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_schema_details(schema_id))
        return self._parse_model(SchemaWithRelations, payload)

    async def do_get_schema_version(self, version_id: str) -> SchemaWithRelations | None:
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_schema_version(version_id))
        return self._parse_model(SchemaWithRelations, payload)

    async def do_list_schema_versions(self, schema_id: str) -> list[SchemaWithRelations]:
        payload = await self.do_json_request(method="GET", endpoint=self._get_endpoint_schema_versions(schema_id))
        return self._parse_model_list(SchemaWithRelations, payload)

    async def do_create_schema(self, request: CreateSchemaRequest) -> SchemaWithRelations | None:
        """
        Creates a new schema in draft status.
        """
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_schemas(), json=request.to_payload())
        return self._parse_model(SchemaWithRelations, payload)

    async def do_update_schema(self, schema_id: str, request: UpdateSchemaRequest) -> SchemaWithRelations | None:
        """
        Sends only the fields set on the request. If the schema is active, the server creates a new version.
        """
        payload = await self.do_json_request(method="PATCH", endpoint=self._get_endpoint_schema_details(schema_id), json=request.to_payload(only_set=True))
        return self._parse_model(SchemaWithRelations, payload)

    async def do_activate_schema(self, schema_id: str) -> SchemaWithRelations | None:
        """
        Transitions a draft schema to active. The server rejects invalid transitions.
        """
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_schema_transition(schema_id, "activate"))
        return self._parse_model(SchemaWithRelations, payload)

    async def do_deprecate_schema(self, schema_id: str) -> SchemaWithRelations | None:
        """
        Transitions an active schema to deprecated. The server rejects invalid transitions.
        """
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_schema_transition(schema_id, "deprecate"))
        return self._parse_model(SchemaWithRelations, payload)

    async def do_delete_schema(self, schema_id: str) -> None:
        """
        Deletes a draft schema. Active schemas must be deprecated first.
        """
        await self.do_json_request(method="DELETE", endpoint=self._get_endpoint_schema_details(schema_id))

    async def do_find_best_schema(self, request: FindBestRequest) -> FindBestResponse | None:
        """
        Asks the server for the most specific schema for a doc type, country and customer.
        """
        payload = await self.do_json_request(method="POST", endpoint=self._get_endpoint_find_best(), json=request.to_payload())
        return self._parse_model(FindBestResponse, payload)

    ############# UPLOAD REQUESTS ##############
    async def do_match_schema(self, file_path: str, customer_id: str | None = None) -> ExtractResponse | None:
        """
        Uploads a PDF or JPEG file to classify it and find the matching schema.

        Args:
            file_path (str): Path of the file to upload.
            customer_id (str | None): Customer whose private schemas may match, sent as X-Customer-Id header.

        Raises:
            ConfigurationError: If the file cannot be opened.
        """
        headers = {"X-Customer-Id": customer_id} if customer_id else None
        with self._open_upload(file_path) as file_handle:
            payload = await self.do_multipart_request(
                method="POST",
                endpoint=self._get_endpoint_match(),
                files={"file": (os.path.basename(file_path), file_handle)},
                additional_headers=headers,
            )
        return self._parse_model(ExtractResponse, payload)

    async def do_generate_schema(self, request: GenerateSchemaRequest) -> GenerateResponse | None:
        """
        Generates a JSON schema from a document file or raw text.

        Raises:
            ConfigurationError: If the file cannot be opened.
        """
        data = {
            "docTypeCode": request.doc_type_code,
            "countryCode": request.country_code,
        }
        if request.file_path:
            data["useOCR"] = "true" if request.use_ocr else "false"
            with self._open_upload(request.file_path) as file_handle:
                payload = await self.do_multipart_request(
                    method="POST",
                    endpoint=self._get_endpoint_generate(),
                    data=data,
                    files={"file": (os.path.basename(request.file_path), file_handle)},
                )
        else:
            # text goes as a plain form part so the body stays multipart
            payload = await self.do_multipart_request(
                method="POST",
                endpoint=self._get_endpoint_generate(),
                data=data,
                files={"text": (None, request.text)},
            )
        return self._parse_model(GenerateResponse, payload)

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _open_upload(self, file_path: str):
        try:
            return open(file_path, "rb")
        except OSError as e:
            raise ConfigurationError(f"Failed to open file '{file_path}': {e}") from e

    def _parse_model(self, model: type[T], payload: Any) -> T | None:
        """
        Parses a decoded JSON body into a model.

        Returns:
            T | None: The parsed model, or None if the server sent an empty body.

        Raises:
            DecodeError: If the body does not match the model.
        """
        if payload is None:
            return None
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"Unexpected {model.__name__} payload from {self.get_engine_name()}: {e}") from e

    def _parse_model_list(self, model: type[T], payload: Any) -> list[T]:
        """
        Parses a decoded JSON array into a list of models. An empty body is an empty list.

        Raises:
            DecodeError: If the body is not an array or an item does not match the model.
        """
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise DecodeError(f"Expected a list of {model.__name__} from {self.get_engine_name()}, got {type(payload).__name__}")
        return [self._parse_model(model, item) for item in payload]
