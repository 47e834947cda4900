"""Base model of all schema registry payloads.

The registry speaks camelCase JSON. Some endpoints still answer with legacy
PascalCase keys ("PublicId" instead of "publicId"), so every model accepts
both casings plus the Python field names, and always dumps camelCase.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class RegistryModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_key_casing(cls, data: Any) -> Any:
        # only the keys of this level; nested models normalize themselves, free-form dicts stay untouched
        if not isinstance(data, dict):
            return data
        return {_lower_first(key) if isinstance(key, str) else key: value for key, value in data.items()}

    def to_payload(self, only_set: bool = False) -> dict[str, Any]:
        """
        Serializes the model into a JSON request body with camelCase keys.

        Args:
            only_set (bool): If True, only the fields that were explicitly set are sent (PATCH semantics),
                including fields explicitly set to None. If False, fields that are None are omitted.
        """
        if only_set:
            return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _lower_first(key: str) -> str:
    if key and key[0].isupper():
        return key[0].lower() + key[1:]
    return key


class SchemaStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    DEPRECATED = "deprecated"


class Visibility(str, Enum):
    PUBLIC = "public"
    COMMUNITY = "community"
    PRIVATE = "private"


class SchemaType(str, Enum):
    STANDARD = "standard"
    REGEX = "regex"
