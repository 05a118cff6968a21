"""
Error bodies returned by the exception handlers.

Every module error is rendered as ``ErrorResponse``; request bodies that
fail schema validation are rendered as ``ValidationErrorResponse``.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body for every ``SprintDeskError``."""

    error: str = Field(..., description="HTTP reason phrase, e.g. 'Unauthorized'")
    detail: Optional[str] = Field(None, description="Fixed, client-safe message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


class ValidationErrorResponse(BaseModel):
    """Body for 422 responses; ``detail`` lists the failing fields."""

    error: str = "Validation Error"
    detail: list[dict[str, Any]]
