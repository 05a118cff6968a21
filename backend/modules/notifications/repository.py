"""
Notification repositories.
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import BaseRepository, InMemoryRepository, parse_timestamp

from .models import Notification, NotificationType


TABLE = "notifications"


class InMemoryNotificationRepository(InMemoryRepository[Notification]):
    """Notification storage for development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._notifications: dict[str, Notification] = {}

    def create(self, notification: Notification) -> Notification:
        with self._lock:
            self._notifications[notification.id] = notification
        return notification

    def list_for_user(self, user_id: str, unread_only: bool, limit: int) -> list[Notification]:
        with self._lock:
            items = [
                n for n in self._notifications.values()
                if n.user_id == user_id and (not unread_only or n.read_at is None)
            ]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[:limit]

    def mark_read(self, user_id: str, notification_id: str, now: datetime) -> Optional[Notification]:
        with self._lock:
            current = self._notifications.get(notification_id)
            if current is None or current.user_id != user_id:
                return None
            updated = current.model_copy(update={"read_at": now})
            self._notifications[notification_id] = updated
            return updated

    def mark_all_read(self, user_id: str, now: datetime) -> int:
        count = 0
        with self._lock:
            for notification_id, n in self._notifications.items():
                if n.user_id == user_id and n.read_at is None:
                    self._notifications[notification_id] = n.model_copy(update={"read_at": now})
                    count += 1
        return count


class SupabaseNotificationRepository(BaseRepository[Notification]):
    """Notification storage in the ``notifications`` table."""

    def create(self, notification: Notification) -> Notification:
        result = self._db.table(TABLE).insert({
            "id": notification.id,
            "user_id": notification.user_id,
            "workspace_id": notification.workspace_id,
            "issue_id": notification.issue_id,
            "type": notification.type.value,
            "message": notification.message,
            "read_at": None,
            "created_at": notification.created_at.isoformat(),
        }).execute()
        return self._map_to_notification(result.data[0])

    def list_for_user(self, user_id: str, unread_only: bool, limit: int) -> list[Notification]:
        query = self._db.table(TABLE).select("*").eq("user_id", user_id)
        if unread_only:
            query = query.is_("read_at", "null")
        result = query.order("created_at", desc=True).limit(limit).execute()
        return [self._map_to_notification(row) for row in result.data or []]

    def mark_read(self, user_id: str, notification_id: str, now: datetime) -> Optional[Notification]:
        result = (
            self._db.table(TABLE)
            .update({"read_at": now.isoformat()})
            .eq("id", notification_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_notification(result.data[0])

    def mark_all_read(self, user_id: str, now: datetime) -> int:
        result = (
            self._db.table(TABLE)
            .update({"read_at": now.isoformat()})
            .eq("user_id", user_id)
            .is_("read_at", "null")
            .execute()
        )
        return len(result.data or [])

    def _map_to_notification(self, data: dict[str, Any]) -> Notification:
        return Notification(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            workspace_id=str(data["workspace_id"]),
            issue_id=str(data["issue_id"]),
            type=NotificationType(data["type"]),
            message=data["message"],
            read_at=parse_timestamp(data.get("read_at")),
            created_at=parse_timestamp(data["created_at"]),
        )
