"""
Sessions module.

Token lifecycle: stateless access tokens plus rotating, revocable
refresh tokens.

Public API:
- ITokenService: Interface for session operations
- TokenService: Default implementation
- IRefreshTokenRepository: Storage contract with atomic revoke-on-redeem
- Session exceptions: UnauthenticatedError, RefreshInvalidError
"""

from .interfaces import ITokenService, IRefreshTokenRepository
from .models import IssuedSession, RefreshTokenRecord, AccessTokenClaims
from .exceptions import UnauthenticatedError, RefreshInvalidError
from .repository import (
    InMemoryRefreshTokenRepository,
    SupabaseRefreshTokenRepository,
    hash_token,
)
from .service import TokenService, create_refresh_token

__all__ = [
    # Interfaces
    "ITokenService",
    "IRefreshTokenRepository",
    # Models
    "IssuedSession",
    "RefreshTokenRecord",
    "AccessTokenClaims",
    # Exceptions
    "UnauthenticatedError",
    "RefreshInvalidError",
    # Repositories
    "InMemoryRefreshTokenRepository",
    "SupabaseRefreshTokenRepository",
    "hash_token",
    # Service
    "TokenService",
    "create_refresh_token",
]
