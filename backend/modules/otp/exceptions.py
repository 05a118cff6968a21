"""
One-time code module exceptions.
"""

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    RateLimitError,
)


class ChallengeNotFoundError(AuthenticationError):
    """Raised when no challenge exists for an email."""

    def __init__(self, email: str):
        super().__init__(
            "Invalid or expired code",
            code="CHALLENGE_NOT_FOUND",
            details={"email": email},
        )


class ChallengeExpiredError(AuthenticationError):
    """Raised when the challenge for an email is past its expiry."""

    def __init__(self, email: str):
        super().__init__(
            "Invalid or expired code",
            code="CHALLENGE_EXPIRED",
            details={"email": email},
        )


class CodeMismatchError(AuthenticationError):
    """Raised when a submitted code does not match the challenge."""

    def __init__(self, email: str, attempts: int):
        super().__init__(
            "Invalid or expired code",
            code="CODE_MISMATCH",
            details={"email": email, "attempts": attempts},
        )


class TooManyAttemptsError(RateLimitError):
    """Raised when a challenge has used up its verification attempts."""

    def __init__(self, email: str):
        super().__init__(
            "Too many attempts",
            code="TOO_MANY_ATTEMPTS",
            details={"email": email},
        )


class DeliveryUnavailableError(ExternalServiceError):
    """Raised when a code could not be handed to the delivery transport."""

    def __init__(self, message: str = "OTP delivery unavailable"):
        super().__init__(message, service="email", code="DELIVERY_UNAVAILABLE")
