"""Country models of the schema registry (ISO 3166-1 alpha-2 codes)."""

from datetime import datetime

from registry.clients.registry.models.RegistryModel import RegistryModel


class CountryDetails(RegistryModel):
    code: str
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CreateCountryRequest(RegistryModel):
    code: str
    name: str


class UpdateCountryRequest(RegistryModel):
    name: str | None = None
    is_active: bool | None = None
