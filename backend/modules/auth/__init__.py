"""
Authentication module.

Resolves credential proofs (password, Google identity token, one-time
code, demo) to a single user record and issues sessions for it.

Public API:
- IAuthService: Interface for auth operations
- AuthService: Default implementation
- IdentityResolver: Credential proof dispatcher
- User: Canonical user record
- Auth exceptions: InvalidCredentialsError, IdentityConflictError, etc.
"""

from .interfaces import IAuthService, IUserRepository, IIdentityTokenVerifier
from .models import (
    AuthProvider,
    AuthResult,
    CredentialProof,
    DemoAccount,
    DemoProof,
    IdentityTokenProof,
    OtpProof,
    PasswordProof,
    SessionResponse,
    User,
    UserResponse,
    VerifiedIdentity,
)
from .exceptions import (
    InvalidCredentialsError,
    IdentityTokenInvalidError,
    IdentityConflictError,
    EmailInUseError,
    InvalidPasswordError,
    DemoDisabledError,
    UserNotFoundError,
)
from .repository import InMemoryUserRepository, SupabaseUserRepository
from .google import GoogleIdentityTokenVerifier
from .demo import DemoSeeder, DEMO_ACCOUNTS
from .service import AuthService, IdentityResolver

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserRepository",
    "IIdentityTokenVerifier",
    # Models
    "AuthProvider",
    "AuthResult",
    "CredentialProof",
    "DemoAccount",
    "DemoProof",
    "IdentityTokenProof",
    "OtpProof",
    "PasswordProof",
    "SessionResponse",
    "User",
    "UserResponse",
    "VerifiedIdentity",
    # Exceptions
    "InvalidCredentialsError",
    "IdentityTokenInvalidError",
    "IdentityConflictError",
    "EmailInUseError",
    "InvalidPasswordError",
    "DemoDisabledError",
    "UserNotFoundError",
    # Implementations
    "InMemoryUserRepository",
    "SupabaseUserRepository",
    "GoogleIdentityTokenVerifier",
    "DemoSeeder",
    "DEMO_ACCOUNTS",
    "AuthService",
    "IdentityResolver",
]
