"""
Notification API endpoints.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_notification_service
from api.middleware.auth import get_current_user_id

from .interfaces import INotificationService
from .models import (
    NotificationEnvelope,
    NotificationListResponse,
    NotificationResponse,
    ReadAllResponse,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread: bool = Query(default=False, description="Only unread notifications"),
    user_id: str = Depends(get_current_user_id),
    service: INotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """The caller's 50 most recent notifications, newest first."""
    notifications = await service.list_notifications(user_id, unread_only=unread)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_notification(n) for n in notifications]
    )


@router.patch("/read-all", response_model=ReadAllResponse)
async def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    service: INotificationService = Depends(get_notification_service),
) -> ReadAllResponse:
    return ReadAllResponse(updated=await service.mark_all_read(user_id))


@router.patch("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    service: INotificationService = Depends(get_notification_service),
) -> NotificationEnvelope:
    notification = await service.mark_read(user_id, notification_id)
    return NotificationEnvelope(notification=NotificationResponse.from_notification(notification))
