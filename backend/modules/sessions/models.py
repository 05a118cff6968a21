"""
Session module data models.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RefreshTokenRecord(BaseModel):
    """
    Persisted half of a refresh token.

    Only the SHA-256 hash of the secret is stored. Records are never
    deleted; ``revoked_at`` is the only field that ever changes.
    """

    id: str = Field(..., description="Record ID (UUID)")
    user_id: str = Field(..., description="Owning user ID")
    token_hash: str = Field(..., description="SHA-256 hex digest of the raw token")
    expires_at: datetime = Field(..., description="Hard expiry")
    revoked_at: Optional[datetime] = Field(None, description="Set on rotation or logout")
    created_at: datetime = Field(..., description="Issue time")

    def is_active(self, now: datetime) -> bool:
        return self.revoked_at is None and self.expires_at > now


class IssuedSession(BaseModel):
    """A freshly minted access/refresh token pair."""

    user_id: str
    access_token: str
    refresh_token: str = Field(..., description="Raw refresh secret, for the cookie only")
    refresh_expires_at: datetime


class AccessTokenClaims(BaseModel):
    """Decoded access token payload."""

    sub: str = Field(..., description="Subject (user ID)")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    type: str = Field(..., description="Token type marker")
