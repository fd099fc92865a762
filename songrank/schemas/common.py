"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error detail.

    Codes: UNKNOWN_SONG, VALIDATION_ERROR, INTERNAL_ERROR.
    """

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope: { "error": { "code", "message", "detail" } }."""

    error: ErrorDetail
