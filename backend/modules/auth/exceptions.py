"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses. Credential
failures share one message so a caller cannot tell which half of a
credential was wrong.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match a user."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class IdentityTokenInvalidError(AuthenticationError):
    """Raised when an OAuth identity token cannot be verified."""

    def __init__(self, message: str = "Invalid identity token"):
        super().__init__(message, code="IDENTITY_TOKEN_INVALID")


class IdentityConflictError(ConflictError):
    """Raised when an email is already linked to a different external identity."""

    def __init__(self, email: str):
        super().__init__(
            "Email is linked to a different Google account",
            code="IDENTITY_CONFLICT",
            details={"email": email},
        )


class EmailInUseError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            "Email already in use",
            code="EMAIL_IN_USE",
            details={"email": email},
        )


class InvalidPasswordError(ValidationError):
    """Raised when a new password does not meet the length rules."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_PASSWORD")


class DemoDisabledError(AuthorizationError):
    """Raised when demo login is attempted while demo mode is off."""

    def __init__(self, message: str = "Demo mode is disabled"):
        super().__init__(message, code="DEMO_DISABLED")


class UserNotFoundError(NotFoundError):
    """Raised when a user ID from a valid token has no user record."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )
