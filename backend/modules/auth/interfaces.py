"""
Authentication module interfaces.

Other modules should depend on IAuthService and IUserRepository, not the
concrete implementations. This enables testing with mocks and keeps the
storage backend swappable.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import AuthResult, CredentialProof, User, VerifiedIdentity


@runtime_checkable
class IUserRepository(Protocol):
    """Storage contract for user records. Emails are stored lowercased."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_emails(self, emails: list[str]) -> list[User]:
        """Bulk lookup used by mention resolution."""
        ...

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        ...

    def create(self, user: User) -> User:
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        ...


@runtime_checkable
class IIdentityTokenVerifier(Protocol):
    """Verifies an OAuth identity token for a given audience."""

    def verify(self, token: str, audience: str) -> VerifiedIdentity:
        """
        Check signature, audience, issuer and expiry.

        Raises:
            IdentityTokenInvalidError: If any check fails
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    Every successful sign-in path ends with a freshly issued session.
    """

    async def register(self, email: str, name: str, password: str) -> AuthResult:
        """
        Create a local account and sign it in.

        Raises:
            EmailInUseError: If the email already has an account
            InvalidPasswordError: If the password is too short or too long
        """
        ...

    async def authenticate(self, proof: CredentialProof) -> AuthResult:
        """
        Resolve a credential proof to a user and issue a session.

        Raises:
            AuthenticationError: If the proof does not verify
        """
        ...

    async def request_otp(self, email: str) -> None:
        """Send a one-time code to an email address."""
        ...

    async def refresh(self, raw_refresh_token: Optional[str]) -> AuthResult:
        """
        Rotate a refresh token.

        Raises:
            RefreshInvalidError: If the token is not active
        """
        ...

    async def logout(self, raw_refresh_token: Optional[str]) -> None:
        """Revoke a refresh token (idempotent)."""
        ...

    async def get_user(self, user_id: str) -> User:
        """
        Load a user by ID.

        Raises:
            UserNotFoundError: If no such user exists
        """
        ...

    async def update_profile(self, user_id: str, fields: dict[str, Any]) -> User:
        """
        Update display fields (``name``, ``avatar_url``, ``contact``).

        Raises:
            UserNotFoundError: If no such user exists
        """
        ...
