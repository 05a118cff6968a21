"""
Notification pipeline.

Turns mentions and assignments into persisted notifications and pushes a
``notification_created`` event to each recipient's user channel. These
hooks run after the triggering write has succeeded, so their failures
are logged and swallowed rather than failing that write.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from modules.auth.interfaces import IUserRepository
from modules.realtime.interfaces import IEventBroadcaster
from modules.realtime.models import EventType, notification_created_payload
from modules.workspaces.interfaces import IWorkspaceRepository

from .interfaces import INotificationRepository, INotificationService
from .mentions import extract_mentions
from .models import (
    CommentRef,
    IssueRef,
    Notification,
    NotificationType,
    assignment_message,
    mention_message,
)
from .exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)

LIST_LIMIT = 50


class NotificationService(INotificationService):
    """Default notification service."""

    def __init__(
        self,
        repository: INotificationRepository,
        users: IUserRepository,
        workspaces: IWorkspaceRepository,
        broadcaster: IEventBroadcaster,
    ):
        self._repository = repository
        self._users = users
        self._workspaces = workspaces
        self._broadcaster = broadcaster

    async def notify_mentions(self, comment: CommentRef) -> list[Notification]:
        """
        Notify workspace members mentioned as ``@email`` in a comment.

        The author and non-members are skipped; each recipient gets one
        notification no matter how often they are mentioned.
        """
        try:
            emails = extract_mentions(comment.body)
            if not emails:
                return []

            recipients = [
                user for user in self._users.get_by_emails(emails)
                if user.id != comment.author_id
                and self._workspaces.get_membership(comment.workspace_id, user.id) is not None
            ]

            message = mention_message(comment.issue_title)
            return [
                self._create_and_push(
                    user_id=user.id,
                    workspace_id=comment.workspace_id,
                    issue_id=comment.issue_id,
                    notification_type=NotificationType.MENTION,
                    message=message,
                )
                for user in recipients
            ]
        except Exception:
            logger.exception("Failed to create mention notifications for comment %s", comment.id)
            return []

    async def notify_assignment(
        self, issue: IssueRef, previous_assignee_id: Optional[str]
    ) -> Optional[Notification]:
        """Notify a new assignee unless they assigned themselves or nothing changed."""
        assignee_id = issue.assignee_id
        if not assignee_id or assignee_id == previous_assignee_id or assignee_id == issue.actor_id:
            return None

        try:
            return self._create_and_push(
                user_id=assignee_id,
                workspace_id=issue.workspace_id,
                issue_id=issue.id,
                notification_type=NotificationType.ASSIGNED,
                message=assignment_message(issue.title),
            )
        except Exception:
            logger.exception("Failed to create assignment notification for issue %s", issue.id)
            return None

    async def list_notifications(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        return self._repository.list_for_user(user_id, unread_only, LIST_LIMIT)

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self._repository.mark_read(
            user_id, notification_id, datetime.now(timezone.utc)
        )
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        return self._repository.mark_all_read(user_id, datetime.now(timezone.utc))

    def _create_and_push(
        self,
        *,
        user_id: str,
        workspace_id: str,
        issue_id: str,
        notification_type: NotificationType,
        message: str,
    ) -> Notification:
        notification = self._repository.create(
            Notification(
                id=str(uuid.uuid4()),
                user_id=user_id,
                workspace_id=workspace_id,
                issue_id=issue_id,
                type=notification_type,
                message=message,
                created_at=datetime.now(timezone.utc),
            )
        )
        self._broadcaster.emit_user_event(
            user_id,
            EventType.NOTIFICATION_CREATED,
            notification_created_payload(notification.id, notification.message),
        )
        logger.debug("Created %s notification %s for user %s", notification_type.value, notification.id, user_id)
        return notification
