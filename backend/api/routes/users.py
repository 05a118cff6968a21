"""
User-related endpoints.

Provides endpoints for the current user's profile.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from modules.auth.interfaces import IAuthService
from modules.auth.models import UserResponse
from ..dependencies import get_auth_service
from ..middleware.auth import get_current_user_id

router = APIRouter()


class UpdateProfileRequest(BaseModel):
    """Profile fields a user may change. Omitted fields stay as they are."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(None, alias="avatarUrl", max_length=2048)
    contact: Optional[str] = Field(None, max_length=200)


class UserEnvelope(BaseModel):
    user: UserResponse


@router.get("/me", response_model=UserEnvelope)
async def get_current_user_profile(
    user_id: str = Depends(get_current_user_id),
    service: IAuthService = Depends(get_auth_service),
) -> UserEnvelope:
    """
    Get the current user's profile.

    Requires authentication.
    """
    user = await service.get_user(user_id)
    return UserEnvelope(user=UserResponse.from_user(user))


@router.patch("/me", response_model=UserEnvelope)
async def update_current_user_profile(
    body: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    service: IAuthService = Depends(get_auth_service),
) -> UserEnvelope:
    user = await service.update_profile(user_id, body.model_dump(exclude_unset=True))
    return UserEnvelope(user=UserResponse.from_user(user))
