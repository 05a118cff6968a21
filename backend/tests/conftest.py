"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Every service is wired against in-memory repositories.
"""

import os

# Must be set before any settings are loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from datetime import datetime, timezone
from typing import Any

from api.dependencies import reset_container
from shared.config import Settings, get_settings
from shared.hashing import hash_password
from modules.auth.demo import DemoSeeder
from modules.auth.models import AuthProvider, User, VerifiedIdentity
from modules.auth.exceptions import IdentityTokenInvalidError
from modules.auth.repository import InMemoryUserRepository
from modules.auth.service import AuthService, IdentityResolver
from modules.otp.repository import InMemoryOtpChallengeRepository
from modules.otp.service import OtpService
from modules.sessions.repository import InMemoryRefreshTokenRepository
from modules.sessions.service import TokenService
from modules.workspaces.authorization import WorkspaceAuthorizer
from modules.workspaces.repository import InMemoryWorkspaceRepository
from modules.workspaces.service import WorkspaceService
from modules.realtime.broadcaster import EventBroadcaster
from modules.realtime.registry import ConnectionRegistry
from modules.notifications.repository import InMemoryNotificationRepository
from modules.notifications.service import NotificationService


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"


class RecordingTransport:
    """OTP transport that keeps the codes it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, int]] = []

    def send_code(self, email: str, code: str, ttl_minutes: int) -> None:
        self.sent.append((email, code, ttl_minutes))

    def last_code(self, email: str) -> str:
        return [code for to, code, _ in self.sent if to == email][-1]


class FakeIdentityVerifier:
    """Identity token verifier backed by a token -> identity table."""

    def __init__(self) -> None:
        self.identities: dict[str, VerifiedIdentity] = {}

    def add(self, token: str, subject: str, email: str, **extra: Any) -> None:
        self.identities[token] = VerifiedIdentity(
            subject=subject, email=email, email_verified=True, **extra
        )

    def verify(self, token: str, audience: str) -> VerifiedIdentity:
        if token not in self.identities:
            raise IdentityTokenInvalidError()
        return self.identities[token]


class FakeConnection:
    """Stand-in for a WebSocket: records what it was sent."""

    def __init__(self, fail: bool = False) -> None:
        self.messages: list[dict] = []
        self.fail = fail

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.messages.append(data)


def make_user(
    users: InMemoryUserRepository,
    email: str,
    password: str = "password123",
    name: str = "Test User",
    **fields: Any,
) -> User:
    """Insert a user directly into a repository."""
    return users.create(
        User(
            id=fields.pop("id", f"user-{email.split('@')[0]}"),
            email=email.lower(),
            name=name,
            password_hash=hash_password(password),
            provider=fields.pop("provider", AuthProvider.LOCAL),
            created_at=datetime.now(timezone.utc),
            **fields,
        )
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        google_client_id=TEST_GOOGLE_CLIENT_ID,
        demo_mode=True,
        environment="test",
        storage_backend="memory",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def refresh_repository() -> InMemoryRefreshTokenRepository:
    return InMemoryRefreshTokenRepository()


@pytest.fixture
def token_service(refresh_repository, settings) -> TokenService:
    return TokenService(refresh_repository, settings)


@pytest.fixture
def otp_repository() -> InMemoryOtpChallengeRepository:
    return InMemoryOtpChallengeRepository()


@pytest.fixture
def otp_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def otp_service(otp_repository, otp_transport, settings) -> OtpService:
    return OtpService(otp_repository, otp_transport, settings)


@pytest.fixture
def identity_verifier() -> FakeIdentityVerifier:
    return FakeIdentityVerifier()


@pytest.fixture
def workspace_repository() -> InMemoryWorkspaceRepository:
    return InMemoryWorkspaceRepository()


@pytest.fixture
def workspace_authorizer(workspace_repository) -> WorkspaceAuthorizer:
    return WorkspaceAuthorizer(workspace_repository)


@pytest.fixture
def workspace_service(
    workspace_repository, workspace_authorizer, user_repository, settings
) -> WorkspaceService:
    return WorkspaceService(
        repository=workspace_repository,
        authorizer=workspace_authorizer,
        users=user_repository,
        settings=settings,
    )


@pytest.fixture
def identity_resolver(
    user_repository, otp_service, identity_verifier, workspace_service, settings
) -> IdentityResolver:
    return IdentityResolver(
        users=user_repository,
        otp=otp_service,
        verifier=identity_verifier,
        demo=DemoSeeder(user_repository, workspace_service),
        settings=settings,
    )


@pytest.fixture
def auth_service(user_repository, identity_resolver, token_service, otp_service) -> AuthService:
    return AuthService(
        users=user_repository,
        resolver=identity_resolver,
        tokens=token_service,
        otp=otp_service,
    )


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry) -> EventBroadcaster:
    return EventBroadcaster(registry)


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def notification_service(
    notification_repository, user_repository, workspace_repository, broadcaster
) -> NotificationService:
    return NotificationService(
        repository=notification_repository,
        users=user_repository,
        workspaces=workspace_repository,
        broadcaster=broadcaster,
    )
