from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    Error payload sent by the backend on failed requests, e.g. {"error": "schema not found"}.
    """
    error: str = ""
    details: dict[str, Any] | None = None
