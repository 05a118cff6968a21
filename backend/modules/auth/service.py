"""
Authentication service implementation.

``IdentityResolver`` turns one credential proof into the canonical user
record; ``AuthService`` wraps it with registration, session issuance,
refresh and logout.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.hashing import (
    BCRYPT_MAX_BYTES,
    burn_password_check,
    hash_password,
    make_unusable_password,
    verify_password,
)
from shared.redaction import redact_email
from modules.otp.interfaces import IOtpService
from modules.sessions.interfaces import ITokenService

from .demo import DemoSeeder
from .interfaces import IAuthService, IIdentityTokenVerifier, IUserRepository
from .models import (
    AuthProvider,
    AuthResult,
    CredentialProof,
    DemoProof,
    IdentityTokenProof,
    OtpProof,
    PasswordProof,
    User,
    VerifiedIdentity,
)
from .exceptions import (
    DemoDisabledError,
    EmailInUseError,
    IdentityConflictError,
    IdentityTokenInvalidError,
    InvalidCredentialsError,
    InvalidPasswordError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Strategies an OTP login may overwrite; stronger tags are preserved
OTP_UPGRADABLE_PROVIDERS = {AuthProvider.LOCAL}

PROFILE_FIELDS = {"name", "avatar_url", "contact"}


def validate_password(password: str) -> None:
    """Enforce the length rules for a new password."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidPasswordError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidPasswordError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes"
        )


class IdentityResolver:
    """
    Resolve a credential proof to a User.

    Each strategy either returns an existing user, links the proof to an
    email-matched user, or creates a new user. The result never depends
    on which strategy created the account first.
    """

    def __init__(
        self,
        users: IUserRepository,
        otp: IOtpService,
        verifier: IIdentityTokenVerifier,
        demo: DemoSeeder,
        settings: Optional[Settings] = None,
    ):
        self._users = users
        self._otp = otp
        self._verifier = verifier
        self._demo = demo
        self._settings = settings or get_settings()

    async def resolve(self, proof: CredentialProof) -> User:
        if isinstance(proof, PasswordProof):
            return await self._resolve_password(proof)
        if isinstance(proof, IdentityTokenProof):
            return await self._resolve_identity_token(proof)
        if isinstance(proof, OtpProof):
            return await self._resolve_otp(proof)
        if isinstance(proof, DemoProof):
            return await self._resolve_demo(proof)
        raise TypeError(f"Unsupported credential proof: {type(proof).__name__}")

    async def _resolve_password(self, proof: PasswordProof) -> User:
        user = self._users.get_by_email(proof.email.lower())
        if user is None:
            # Same bcrypt cost as a real comparison
            await asyncio.to_thread(burn_password_check, proof.password)
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(verify_password, proof.password, user.password_hash):
            raise InvalidCredentialsError()

        return user

    async def _resolve_identity_token(self, proof: IdentityTokenProof) -> User:
        audience = self._settings.google_client_id
        if not audience:
            raise IdentityTokenInvalidError("Google login is not configured")

        identity = await asyncio.to_thread(self._verifier.verify, proof.token, audience)

        user = self._find_google_user(identity)
        if user is not None:
            return user

        try:
            return self._users.create(
                User(
                    id=str(uuid.uuid4()),
                    email=identity.email,
                    name=identity.name or identity.email.split("@")[0],
                    password_hash=make_unusable_password(),
                    provider=AuthProvider.GOOGLE,
                    google_id=identity.subject,
                    avatar_url=identity.picture,
                    created_at=datetime.now(timezone.utc),
                )
            )
        except EmailInUseError:
            # A concurrent first login won the insert
            user = self._find_google_user(identity)
            if user is None:
                raise
            return user

    def _find_google_user(self, identity: VerifiedIdentity) -> Optional[User]:
        """Existing account for a Google identity, linking it by email if needed."""
        user = self._users.get_by_google_id(identity.subject)
        if user is not None:
            return user

        user = self._users.get_by_email(identity.email)
        if user is None:
            return None

        if user.google_id and user.google_id != identity.subject:
            logger.warning(
                "Google identity conflict for %s", redact_email(identity.email)
            )
            raise IdentityConflictError(identity.email)

        updates: dict = {"google_id": identity.subject}
        if user.provider == AuthProvider.LOCAL:
            updates["provider"] = AuthProvider.GOOGLE
        if not user.avatar_url and identity.picture:
            updates["avatar_url"] = identity.picture
        logger.info("Linked Google identity to %s", redact_email(identity.email))
        return self._users.update(user.id, updates)

    async def _resolve_otp(self, proof: OtpProof) -> User:
        email = await self._otp.verify(proof.email, proof.code)

        user = self._users.get_by_email(email)
        if user is None:
            try:
                return self._users.create(
                    User(
                        id=str(uuid.uuid4()),
                        email=email,
                        name=email.split("@")[0],
                        password_hash=make_unusable_password(),
                        provider=AuthProvider.OTP,
                        created_at=datetime.now(timezone.utc),
                    )
                )
            except EmailInUseError:
                user = self._users.get_by_email(email)
                if user is None:
                    raise

        if user.provider in OTP_UPGRADABLE_PROVIDERS:
            return self._users.update(user.id, {"provider": AuthProvider.OTP})
        return user

    async def _resolve_demo(self, proof: DemoProof) -> User:
        if not self._settings.demo_mode:
            raise DemoDisabledError()
        seeded = await self._demo.seed()
        return seeded[proof.account]


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Every successful path ends with ``ITokenService.issue_session``.
    """

    def __init__(
        self,
        users: IUserRepository,
        resolver: IdentityResolver,
        tokens: ITokenService,
        otp: IOtpService,
    ):
        self._users = users
        self._resolver = resolver
        self._tokens = tokens
        self._otp = otp

    async def register(self, email: str, name: str, password: str) -> AuthResult:
        email = email.strip().lower()
        validate_password(password)

        if self._users.get_by_email(email) is not None:
            raise EmailInUseError(email)

        password_hash = await asyncio.to_thread(hash_password, password)
        user = self._users.create(
            User(
                id=str(uuid.uuid4()),
                email=email,
                name=name.strip(),
                password_hash=password_hash,
                provider=AuthProvider.LOCAL,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Registered user %s", user.id)
        return await self._sign_in(user)

    async def authenticate(self, proof: CredentialProof) -> AuthResult:
        user = await self._resolver.resolve(proof)
        return await self._sign_in(user)

    async def request_otp(self, email: str) -> None:
        await self._otp.request(email)

    async def refresh(self, raw_refresh_token: Optional[str]) -> AuthResult:
        session = await self._tokens.rotate(raw_refresh_token)
        user = await self.get_user(session.user_id)
        return AuthResult(user=user, session=session)

    async def logout(self, raw_refresh_token: Optional[str]) -> None:
        await self._tokens.revoke(raw_refresh_token)

    async def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def update_profile(self, user_id: str, fields: dict[str, Any]) -> User:
        await self.get_user(user_id)
        updates = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if "name" in updates:
            name = (updates.pop("name") or "").strip()
            if name:
                updates["name"] = name
        if not updates:
            return await self.get_user(user_id)
        return self._users.update(user_id, updates)

    async def _sign_in(self, user: User) -> AuthResult:
        session = await self._tokens.issue_session(user.id)
        return AuthResult(user=user, session=session)
