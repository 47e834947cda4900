"""Document type models of the schema registry."""

from datetime import datetime

from registry.clients.registry.models.RegistryModel import RegistryModel


class DocTypeDetails(RegistryModel):
    """
    Represents a single document type (e.g. "Invoice"), as returned by the registry.
    """
    code: str
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CreateDocTypeRequest(RegistryModel):
    code: str
    name: str
    description: str | None = None


class UpdateDocTypeRequest(RegistryModel):
    """
    Partial update of a document type. Only the fields passed to the constructor are sent;
    passing description=None clears the description on the server.
    """
    name: str | None = None
    description: str | None = None
    is_active: bool | None = None
