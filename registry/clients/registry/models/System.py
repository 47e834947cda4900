from datetime import datetime

from registry.clients.registry.models.Country import CountryDetails
from registry.clients.registry.models.DocType import DocTypeDetails
from registry.clients.registry.models.RegistryModel import RegistryModel


class HealthResponse(RegistryModel):
    status: str
    database: str
    timestamp: datetime


class ReferenceDataResponse(RegistryModel):
    """
    All active doc types and countries, fetched in a single request.
    """
    doc_types: list[DocTypeDetails] = []
    countries: list[CountryDetails] = []
