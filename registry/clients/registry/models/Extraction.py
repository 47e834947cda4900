"""Models of the upload endpoints: classify a document and match a schema, or generate a schema from it."""

from typing import Any

from pydantic import Field, model_validator

from registry.clients.registry.models.RegistryModel import RegistryModel, SchemaType


class Classification(RegistryModel):
    doc_type: str = Field(alias="doctype")
    country: str
    pages: list[int] = []


class MatchedSchema(RegistryModel):
    public_id: str
    public_version_id: str
    name: str
    schema_type: SchemaType
    content: dict[str, Any]


class ExtractResponse(RegistryModel):
    classification: Classification
    matched_schema: MatchedSchema | None = Field(default=None, alias="schema")


class GenerateSchemaRequest(RegistryModel):
    """
    Input of a schema generation. Exactly one of file_path or text must be given.

    Attributes:
        file_path (str | None): Path to a PDF or JPEG file.
        text (str | None): Raw text content of the document.
        use_ocr (bool): Run OCR on the file (False uses vision mode). Ignored for text.
    """
    doc_type_code: str
    country_code: str
    file_path: str | None = None
    text: str | None = None
    use_ocr: bool = True

    @model_validator(mode="after")
    def _check_single_source(self) -> "GenerateSchemaRequest":
        if not self.file_path and not self.text:
            raise ValueError("either file_path or text must be provided")
        if self.file_path and self.text:
            raise ValueError("only one of file_path or text can be provided")
        return self


class GeneratedSchema(RegistryModel):
    content: dict[str, Any]
    generated: bool


class GenerateResponse(RegistryModel):
    doc_type: str
    country: str
    generated_schema: GeneratedSchema = Field(alias="schema")
