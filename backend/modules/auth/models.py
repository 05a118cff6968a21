"""
Authentication module data models.

These models define the user record, the credential proofs accepted by
the identity resolver, and the request/response bodies of the auth routes.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from modules.sessions.models import IssuedSession


class AuthProvider(str, Enum):
    """How a user last proved their identity (strongest strategy wins)."""

    LOCAL = "local"
    GOOGLE = "google"
    OTP = "otp"
    DEMO = "demo"


class DemoAccount(str, Enum):
    """Seeded demo identities."""

    OWNER = "owner"
    MEMBER = "member"


class User(BaseModel):
    """
    A person who can sign in.

    Users are never deleted by the core. ``password_hash`` is opaque: either
    a bcrypt hash or an unusable marker for accounts created through an
    identity provider.
    """

    id: str = Field(..., description="User ID (UUID)")
    email: str = Field(..., description="Lowercased, unique email")
    name: str = Field(..., description="Display name")
    password_hash: str = Field(..., description="bcrypt hash or unusable marker")
    provider: AuthProvider = Field(default=AuthProvider.LOCAL)
    google_id: Optional[str] = Field(None, description="External identity subject")
    avatar_url: Optional[str] = None
    contact: Optional[str] = None
    created_at: datetime


# Credential proofs, dispatched on ``kind``


class PasswordProof(BaseModel):
    kind: Literal["password"] = "password"
    email: str
    password: str


class IdentityTokenProof(BaseModel):
    kind: Literal["identity_token"] = "identity_token"
    token: str


class OtpProof(BaseModel):
    kind: Literal["otp"] = "otp"
    email: str
    code: str


class DemoProof(BaseModel):
    kind: Literal["demo"] = "demo"
    account: DemoAccount


CredentialProof = Annotated[
    Union[PasswordProof, IdentityTokenProof, OtpProof, DemoProof],
    Field(discriminator="kind"),
]


class VerifiedIdentity(BaseModel):
    """Claims extracted from a verified OAuth identity token."""

    subject: str
    email: str
    email_verified: bool = False
    name: Optional[str] = None
    picture: Optional[str] = None


class AuthResult(BaseModel):
    """A resolved user together with the session issued for them."""

    user: User
    session: IssuedSession


# Request bodies


class RegisterRequest(BaseModel):
    """Request body for ``POST /auth/register``."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    """Request body for ``POST /auth/login``."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class GoogleLoginRequest(BaseModel):
    """Request body for ``POST /auth/google``."""

    credential: str = Field(..., min_length=1, description="Google ID token")


class DemoLoginRequest(BaseModel):
    """Request body for ``POST /auth/demo``."""

    type: DemoAccount = DemoAccount.OWNER


# Response bodies


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
    contact: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            contact=user.contact,
        )


class SessionResponse(BaseModel):
    """Body returned by every route that issues a session."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    user: UserResponse

    @classmethod
    def from_result(cls, result: AuthResult) -> "SessionResponse":
        return cls(
            access_token=result.session.access_token,
            user=UserResponse.from_user(result.user),
        )


class OkResponse(BaseModel):
    ok: bool = True
