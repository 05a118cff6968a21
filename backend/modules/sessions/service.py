"""
Token lifecycle service.

Issues short-lived signed access tokens and long-lived opaque refresh
tokens, and rotates/revokes refresh tokens. Access token checks are
stateless; refresh token checks always go through the repository.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from shared.config import Settings, get_settings

from .interfaces import IRefreshTokenRepository, ITokenService
from .models import AccessTokenClaims, IssuedSession
from .exceptions import RefreshInvalidError, UnauthenticatedError
from .repository import hash_token

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_refresh_token() -> str:
    """Generate a new raw refresh secret."""
    return secrets.token_hex(32)


class TokenService(ITokenService):
    """
    Session token manager.

    Session state machine:
        Issued -> (Redeemed -> successor Issued) -> Revoked | Expired
    """

    def __init__(
        self,
        repository: IRefreshTokenRepository,
        settings: Optional[Settings] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings()

    def create_access_token(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Sign an access token for a user."""
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(minutes=self._settings.access_token_ttl_minutes)
        payload = {
            "sub": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "type": ACCESS_TOKEN_TYPE,
        }
        return jwt.encode(payload, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm)

    async def issue_session(self, user_id: str) -> IssuedSession:
        """Mint an access token and persist a new refresh token hash."""
        now = datetime.now(timezone.utc)
        refresh_token = create_refresh_token()
        refresh_expires_at = now + timedelta(days=self._settings.refresh_token_ttl_days)

        self._repository.create(user_id, hash_token(refresh_token), refresh_expires_at)
        logger.info("Issued session for user %s", user_id)

        return IssuedSession(
            user_id=user_id,
            access_token=self.create_access_token(user_id, now),
            refresh_token=refresh_token,
            refresh_expires_at=refresh_expires_at,
        )

    def verify_access(self, token: Optional[str]) -> str:
        """Verify signature, expiry and type of an access token."""
        if not token:
            raise UnauthenticatedError()

        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
                options={"require": ["exp", "iat", "sub", "type"]},
            )
            claims = AccessTokenClaims(**payload)
        except (jwt.PyJWTError, ValueError):
            raise UnauthenticatedError()

        if claims.type != ACCESS_TOKEN_TYPE or not claims.sub:
            raise UnauthenticatedError()

        return claims.sub

    async def rotate(self, raw_refresh_token: Optional[str]) -> IssuedSession:
        """Atomically revoke the presented refresh token and issue its successor."""
        if not raw_refresh_token:
            raise RefreshInvalidError()

        token_hash = hash_token(raw_refresh_token)
        now = datetime.now(timezone.utc)
        redeemed = self._repository.revoke_active(token_hash, now)

        if redeemed is None:
            existing = self._repository.get_by_hash(token_hash)
            if existing is not None and existing.revoked_at is not None:
                # Rotated tokens are never presented twice by an honest client
                logger.warning(
                    "Revoked refresh token presented again for user %s; possible replay",
                    existing.user_id,
                )
            raise RefreshInvalidError()

        return await self.issue_session(redeemed.user_id)

    async def revoke(self, raw_refresh_token: Optional[str]) -> None:
        """Logout: revoke the token if it is still active."""
        if not raw_refresh_token:
            return

        revoked = self._repository.revoke_active(
            hash_token(raw_refresh_token),
            datetime.now(timezone.utc),
        )
        if revoked is not None:
            logger.info("Revoked refresh token for user %s", revoked.user_id)
