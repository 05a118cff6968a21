"""
Notification module interfaces.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import CommentRef, IssueRef, Notification


@runtime_checkable
class INotificationRepository(Protocol):
    """Storage contract for notifications."""

    def create(self, notification: Notification) -> Notification:
        ...

    def list_for_user(self, user_id: str, unread_only: bool, limit: int) -> list[Notification]:
        """Newest first."""
        ...

    def mark_read(self, user_id: str, notification_id: str, now: datetime) -> Optional[Notification]:
        """
        Set ``read_at`` on a notification owned by ``user_id``.

        Returns:
            The updated notification, or None if it is not the user's
        """
        ...

    def mark_all_read(self, user_id: str, now: datetime) -> int:
        """Mark every unread notification of a user read; returns how many changed."""
        ...


@runtime_checkable
class INotificationService(Protocol):
    """
    Interface for the notification pipeline.

    The ``notify_*`` hooks are called by issue and comment handlers after
    their own write succeeded; they log failures instead of raising.
    """

    async def notify_mentions(self, comment: CommentRef) -> list[Notification]:
        ...

    async def notify_assignment(
        self, issue: IssueRef, previous_assignee_id: Optional[str]
    ) -> Optional[Notification]:
        ...

    async def list_notifications(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        ...

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """
        Raises:
            NotificationNotFoundError: If the notification is not the user's
        """
        ...

    async def mark_all_read(self, user_id: str) -> int:
        ...
