"""
Pydantic schema for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        400: {"error": "invalid_input", "message": "No files given"}
        404: {"error": "not_found", "message": "File not found: thumb_1.jpg"}
        415: {"error": "unsupported_type", "message": "..."}
        502: {"error": "storage_error", "message": "...", "details": {"backend": "s3"}}
    """

    error: str = Field(
        ...,
        description="Error code string",
        examples=["invalid_input", "configuration_error", "storage_error"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
