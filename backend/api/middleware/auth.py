"""
Bearer token authentication dependency.

Access tokens are verified statelessly by the token lifecycle service;
every failure surfaces as ``UnauthenticatedError`` (401). Route handlers
only ever see the user id carried in the token subject.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.sessions.interfaces import ITokenService

from ..dependencies import get_token_service

# Missing credentials are rejected by verify_access, not by HTTPBearer
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: ITokenService = Depends(get_token_service),
) -> str:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user_id)):
            return {"user_id": user_id}
    """
    return tokens.verify_access(credentials.credentials if credentials else None)
