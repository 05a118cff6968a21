"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Repositories are in-memory or Supabase-backed depending on
``settings.storage_backend``; everything above them is identical.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.interfaces import IAuthService, IUserRepository, IIdentityTokenVerifier
    from modules.auth.demo import DemoSeeder
    from modules.auth.service import IdentityResolver
    from modules.sessions.interfaces import ITokenService, IRefreshTokenRepository
    from modules.otp.interfaces import IOtpService, IOtpChallengeRepository, IOtpTransport
    from modules.workspaces.interfaces import (
        IWorkspaceAuthorizer,
        IWorkspaceRepository,
        IWorkspaceService,
    )
    from modules.realtime.broadcaster import EventBroadcaster
    from modules.notifications.interfaces import INotificationRepository, INotificationService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._instances: dict[str, object] = {}

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def uses_supabase(self) -> bool:
        return self.settings.storage_backend == "supabase"

    def _get(self, name: str, factory):
        if name not in self._instances:
            self._instances[name] = factory()
        return self._instances[name]

    # Storage

    @property
    def db(self) -> "Client":
        """Get the Supabase client (only when storage_backend=supabase)."""
        from shared.database import get_supabase_client
        return self._get("db", get_supabase_client)

    @property
    def user_repository(self) -> "IUserRepository":
        def build():
            from modules.auth.repository import InMemoryUserRepository, SupabaseUserRepository
            if self.uses_supabase:
                return SupabaseUserRepository(self.db)
            return InMemoryUserRepository()
        return self._get("user_repository", build)

    @property
    def refresh_token_repository(self) -> "IRefreshTokenRepository":
        def build():
            from modules.sessions.repository import (
                InMemoryRefreshTokenRepository,
                SupabaseRefreshTokenRepository,
            )
            if self.uses_supabase:
                return SupabaseRefreshTokenRepository(self.db)
            return InMemoryRefreshTokenRepository()
        return self._get("refresh_token_repository", build)

    @property
    def otp_repository(self) -> "IOtpChallengeRepository":
        def build():
            from modules.otp.repository import (
                InMemoryOtpChallengeRepository,
                SupabaseOtpChallengeRepository,
            )
            if self.uses_supabase:
                return SupabaseOtpChallengeRepository(self.db)
            return InMemoryOtpChallengeRepository()
        return self._get("otp_repository", build)

    @property
    def workspace_repository(self) -> "IWorkspaceRepository":
        def build():
            from modules.workspaces.repository import (
                InMemoryWorkspaceRepository,
                SupabaseWorkspaceRepository,
            )
            if self.uses_supabase:
                return SupabaseWorkspaceRepository(self.db)
            return InMemoryWorkspaceRepository()
        return self._get("workspace_repository", build)

    @property
    def notification_repository(self) -> "INotificationRepository":
        def build():
            from modules.notifications.repository import (
                InMemoryNotificationRepository,
                SupabaseNotificationRepository,
            )
            if self.uses_supabase:
                return SupabaseNotificationRepository(self.db)
            return InMemoryNotificationRepository()
        return self._get("notification_repository", build)

    # Services

    @property
    def tokens(self) -> "ITokenService":
        """Get the token lifecycle service instance."""
        def build():
            from modules.sessions.service import TokenService
            return TokenService(self.refresh_token_repository, self.settings)
        return self._get("tokens", build)

    @property
    def otp_transport(self) -> "IOtpTransport":
        def build():
            from modules.otp.delivery import build_otp_transport
            return build_otp_transport(self.settings)
        return self._get("otp_transport", build)

    @property
    def otp(self) -> "IOtpService":
        """Get the one-time code service instance."""
        def build():
            from modules.otp.service import OtpService
            return OtpService(self.otp_repository, self.otp_transport, self.settings)
        return self._get("otp", build)

    @property
    def identity_verifier(self) -> "IIdentityTokenVerifier":
        def build():
            from modules.auth.google import GoogleIdentityTokenVerifier
            return GoogleIdentityTokenVerifier()
        return self._get("identity_verifier", build)

    @property
    def workspace_authorizer(self) -> "IWorkspaceAuthorizer":
        def build():
            from modules.workspaces.authorization import WorkspaceAuthorizer
            return WorkspaceAuthorizer(self.workspace_repository)
        return self._get("workspace_authorizer", build)

    @property
    def workspaces(self) -> "IWorkspaceService":
        """Get the workspace service instance."""
        def build():
            from modules.workspaces.service import WorkspaceService
            return WorkspaceService(
                repository=self.workspace_repository,
                authorizer=self.workspace_authorizer,
                users=self.user_repository,
                settings=self.settings,
            )
        return self._get("workspaces", build)

    @property
    def demo_seeder(self) -> "DemoSeeder":
        def build():
            from modules.auth.demo import DemoSeeder
            return DemoSeeder(self.user_repository, self.workspaces)
        return self._get("demo_seeder", build)

    @property
    def identity_resolver(self) -> "IdentityResolver":
        def build():
            from modules.auth.service import IdentityResolver
            return IdentityResolver(
                users=self.user_repository,
                otp=self.otp,
                verifier=self.identity_verifier,
                demo=self.demo_seeder,
                settings=self.settings,
            )
        return self._get("identity_resolver", build)

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        def build():
            from modules.auth.service import AuthService
            return AuthService(
                users=self.user_repository,
                resolver=self.identity_resolver,
                tokens=self.tokens,
                otp=self.otp,
            )
        return self._get("auth", build)

    @property
    def broadcaster(self) -> "EventBroadcaster":
        """Get the realtime event broadcaster (owns the connection registry)."""
        def build():
            from modules.realtime.broadcaster import EventBroadcaster
            from modules.realtime.registry import ConnectionRegistry
            return EventBroadcaster(ConnectionRegistry())
        return self._get("broadcaster", build)

    @property
    def notifications(self) -> "INotificationService":
        """Get the notification service instance."""
        def build():
            from modules.notifications.service import NotificationService
            return NotificationService(
                repository=self.notification_repository,
                users=self.user_repository,
                workspaces=self.workspace_repository,
                broadcaster=self.broadcaster,
            )
        return self._get("notifications", build)

    def override(self, name: str, instance: object) -> None:
        """Replace a component before first use (tests)."""
        self._instances[name] = instance

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._instances.clear()


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_token_service() -> "ITokenService":
    """FastAPI dependency for the token lifecycle service."""
    return get_container().tokens


def get_otp_service() -> "IOtpService":
    """FastAPI dependency for the one-time code service."""
    return get_container().otp


def get_workspace_service() -> "IWorkspaceService":
    """FastAPI dependency for workspace service."""
    return get_container().workspaces


def get_workspace_authorizer() -> "IWorkspaceAuthorizer":
    """FastAPI dependency for the workspace authorization gate."""
    return get_container().workspace_authorizer


def get_event_broadcaster() -> "EventBroadcaster":
    """FastAPI dependency for the realtime broadcaster."""
    return get_container().broadcaster


def get_notification_service() -> "INotificationService":
    """FastAPI dependency for notification service."""
    return get_container().notifications
