"""
Session module interfaces.

Other modules depend on ITokenService; storage is hidden behind
IRefreshTokenRepository so the rotation guarantee can be provided by
whatever backend is configured.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import IssuedSession, RefreshTokenRecord


@runtime_checkable
class IRefreshTokenRepository(Protocol):
    """Storage contract for refresh token records."""

    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> RefreshTokenRecord:
        """Persist a new active record."""
        ...

    def get_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        """Look up a record regardless of its state."""
        ...

    def revoke_active(self, token_hash: str, now: datetime) -> Optional[RefreshTokenRecord]:
        """
        Revoke the matching active record in one atomic operation.

        The match requires ``revoked_at IS NULL`` and ``expires_at > now``.
        Exactly one of any number of concurrent callers gets the record
        back; everyone else gets None.

        Returns:
            The record as it was revoked, or None if nothing active matched
        """
        ...


@runtime_checkable
class ITokenService(Protocol):
    """Interface for the session token lifecycle."""

    async def issue_session(self, user_id: str) -> IssuedSession:
        """
        Mint an access token and a new refresh token for a user.

        Raises:
            Nothing beyond storage failures
        """
        ...

    def verify_access(self, token: Optional[str]) -> str:
        """
        Verify an access token without touching storage.

        Returns:
            The user ID the token was issued to

        Raises:
            UnauthenticatedError: On any verification failure
        """
        ...

    async def rotate(self, raw_refresh_token: Optional[str]) -> IssuedSession:
        """
        Redeem a refresh token for a brand-new session.

        Raises:
            RefreshInvalidError: If the token is not active
        """
        ...

    async def revoke(self, raw_refresh_token: Optional[str]) -> None:
        """Revoke a refresh token. Unknown or inactive tokens are ignored."""
        ...
