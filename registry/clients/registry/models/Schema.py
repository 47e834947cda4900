"""Schema models of the schema registry.

Hierarchy:
  SchemaDetails       : one version of a JSON schema.
  SchemaWithRelations : SchemaDetails plus the doc type and country resolved by the server.
  PaginatedSchemaList : one page of schemas plus pagination info.
"""

from datetime import datetime
from typing import Any

from pydantic import model_validator

from registry.clients.registry.models.Country import CountryDetails
from registry.clients.registry.models.DocType import DocTypeDetails
from registry.clients.registry.models.RegistryModel import RegistryModel, SchemaStatus, SchemaType, Visibility


class SchemaDetails(RegistryModel):
    """
    Represents a single schema version, as returned by the registry.

    Attributes:
        public_id (str): Stable id of the schema lineage (sch_xxx).
        public_version_id (str): Id of this version (schv_xxx).
        version (int): Version number, increasing within a lineage.
        content (dict): The JSON schema document itself.
    """
    public_id: str
    public_version_id: str
    name: str
    description: str | None = None
    version: int
    content: dict[str, Any]
    schema_type: SchemaType
    status: SchemaStatus
    customer_id: str | None = None
    visibility: Visibility
    doc_type_code: str
    country_code: str | None = None
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    created_at: datetime
    updated_at: datetime


class SchemaWithRelations(SchemaDetails):
    doc_type: DocTypeDetails | None = None
    country: CountryDetails | None = None


class Pagination(RegistryModel):
    total: int
    limit: int
    offset: int
    has_more: bool | None = None


class PaginatedSchemaList(RegistryModel):
    """
    Represents one page of a schema listing.
    """
    data: list[SchemaWithRelations] = []
    pagination: Pagination

    @model_validator(mode="after")
    def _derive_has_more(self) -> "PaginatedSchemaList":
        if self.pagination.has_more is None:
            self.pagination.has_more = self.pagination.offset + len(self.data) < self.pagination.total
        return self


class ListSchemasOptions(RegistryModel):
    """
    Filters of a schema listing. Unset or empty filters are not sent at all.
    """
    status: SchemaStatus | None = None
    doc_type_code: str | None = None
    country_code: str | None = None
    visibility: Visibility | None = None
    customer_id: str | None = None
    limit: int = 0
    offset: int = 0

    def to_query_params(self) -> dict[str, str]:
        """
        Returns:
            dict[str, str]: The query parameters, keyed by their camelCase wire name.
        """
        params: dict[str, str] = {}
        for key, value in self.model_dump(mode="json", by_alias=True).items():
            if value is None or value == "" or value == 0:
                continue
            params[key] = str(value)
        return params


class CreateSchemaRequest(RegistryModel):
    name: str
    content: dict[str, Any]
    doc_type_code: str
    description: str | None = None
    country_code: str | None = None
    visibility: Visibility | None = None
    schema_type: SchemaType | None = None
    customer_id: str | None = None


class UpdateSchemaRequest(RegistryModel):
    """
    Partial update of a schema. Only the fields passed to the constructor are sent:
    UpdateSchemaRequest(description=None) clears the description, UpdateSchemaRequest() changes nothing.
    Updating an active schema creates a new version on the server.
    """
    name: str | None = None
    description: str | None = None
    content: dict[str, Any] | None = None
    doc_type_code: str | None = None
    country_code: str | None = None
    visibility: Visibility | None = None
    schema_type: SchemaType | None = None
