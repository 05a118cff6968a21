"""
One-time code module.

Short-lived, attempt-limited numeric login codes delivered by email.

Public API:
- IOtpService: Interface for requesting and verifying codes
- OtpService: Default implementation
- IOtpTransport: Delivery collaborator (SMTP or development logging)
- OTP exceptions: ChallengeNotFoundError, ChallengeExpiredError, etc.
"""

from .interfaces import IOtpService, IOtpChallengeRepository, IOtpTransport
from .models import OtpChallenge, OtpRequest, OtpVerifyRequest
from .exceptions import (
    ChallengeNotFoundError,
    ChallengeExpiredError,
    CodeMismatchError,
    TooManyAttemptsError,
    DeliveryUnavailableError,
)
from .delivery import (
    SmtpOtpTransport,
    LoggingOtpTransport,
    UnavailableOtpTransport,
    build_otp_transport,
)
from .repository import InMemoryOtpChallengeRepository, SupabaseOtpChallengeRepository
from .service import OtpService, generate_code, normalize_email

__all__ = [
    # Interfaces
    "IOtpService",
    "IOtpChallengeRepository",
    "IOtpTransport",
    # Models
    "OtpChallenge",
    "OtpRequest",
    "OtpVerifyRequest",
    # Exceptions
    "ChallengeNotFoundError",
    "ChallengeExpiredError",
    "CodeMismatchError",
    "TooManyAttemptsError",
    "DeliveryUnavailableError",
    # Transports
    "SmtpOtpTransport",
    "LoggingOtpTransport",
    "UnavailableOtpTransport",
    "build_otp_transport",
    # Repositories
    "InMemoryOtpChallengeRepository",
    "SupabaseOtpChallengeRepository",
    # Service
    "OtpService",
    "generate_code",
    "normalize_email",
]
