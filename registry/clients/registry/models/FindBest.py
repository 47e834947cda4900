from pydantic import Field

from registry.clients.registry.models.RegistryModel import RegistryModel
from registry.clients.registry.models.Schema import SchemaWithRelations


class FindBestRequest(RegistryModel):
    doc_type_code: str
    country_code: str | None = None
    customer_id: str | None = None


class FindBestResponse(RegistryModel):
    """
    Answer of the find-best endpoint. The server picks the most specific schema
    (customer-private, exact country, generic fallback); matched_schema is None if nothing applies.
    """
    matched_schema: SchemaWithRelations | None = Field(default=None, alias="schema")
    match_type: str | None = None
