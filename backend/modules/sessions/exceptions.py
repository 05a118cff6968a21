"""
Session module exceptions.

Every failure mode of a token check maps to exactly one of these two
errors with a fixed message, whatever the underlying reason was.
"""

from shared.exceptions import AuthenticationError


class UnauthenticatedError(AuthenticationError):
    """Raised when an access token is missing, invalid or expired."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHENTICATED")


class RefreshInvalidError(AuthenticationError):
    """Raised when a refresh token is missing, expired, revoked or unknown."""

    def __init__(self, message: str = "Refresh token invalid"):
        super().__init__(message, code="REFRESH_INVALID")
