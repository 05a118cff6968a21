"""
Notifications module.

Mention and assignment notifications, with live push to the recipient.

Public API:
- INotificationService: Interface for the notification hooks and inbox
- NotificationService: Default implementation
- extract_mentions: ``@email`` parser used for comments
"""

from .interfaces import INotificationService, INotificationRepository
from .models import (
    CommentRef,
    IssueRef,
    Notification,
    NotificationType,
    assignment_message,
    mention_message,
)
from .exceptions import NotificationNotFoundError
from .mentions import extract_mentions, MENTION_PATTERN
from .repository import InMemoryNotificationRepository, SupabaseNotificationRepository
from .service import NotificationService

__all__ = [
    # Interfaces
    "INotificationService",
    "INotificationRepository",
    # Models
    "CommentRef",
    "IssueRef",
    "Notification",
    "NotificationType",
    "assignment_message",
    "mention_message",
    # Exceptions
    "NotificationNotFoundError",
    # Mentions
    "extract_mentions",
    "MENTION_PATTERN",
    # Implementations
    "InMemoryNotificationRepository",
    "SupabaseNotificationRepository",
    "NotificationService",
]
