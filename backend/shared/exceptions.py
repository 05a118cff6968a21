"""
Base exception classes for the SprintDesk backend.

Each module defines its own exceptions that inherit from these bases.
The base class decides the HTTP status the API layer maps an error to,
so module code never deals in status codes.
"""

from typing import Optional, Any


class SprintDeskError(Exception):
    """
    Base exception for all SprintDesk errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(SprintDeskError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(SprintDeskError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(SprintDeskError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class NotFoundError(SprintDeskError):
    """Resource not found."""

    status_code = 404


class ConflictError(SprintDeskError):
    """Resource already exists or would collide with existing state."""

    status_code = 409


class RateLimitError(SprintDeskError):
    """Too many attempts for the requested operation."""

    status_code = 429


class ExternalServiceError(SprintDeskError):
    """Error communicating with an external service."""

    status_code = 503

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
