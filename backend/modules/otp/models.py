"""
One-time code module data models.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class OtpChallenge(BaseModel):
    """
    The single live challenge for an email address.

    A new request replaces the previous challenge entirely.
    """

    email: str = Field(..., description="Lowercased email (primary key)")
    code_hash: str = Field(..., description="bcrypt hash of the code")
    expires_at: datetime = Field(..., description="Wall-clock expiry")
    attempts: int = Field(default=0, ge=0, description="Failed verification attempts")
    created_at: datetime = Field(..., description="First request time for this email")
    last_sent_at: datetime = Field(..., description="Time the current code was sent")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now


class OtpRequest(BaseModel):
    """Request body for ``POST /auth/otp/request``."""

    email: EmailStr


class OtpVerifyRequest(BaseModel):
    """Request body for ``POST /auth/otp/verify``."""

    email: EmailStr
    code: str = Field(..., pattern=r"^\d{4,10}$")
