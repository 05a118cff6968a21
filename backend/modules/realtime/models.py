"""
Realtime module data models.

Events travel as ``{"type": ..., "payload": {...}}`` on channels named
``workspace:<id>`` and ``user:<id>``.
"""

import re
from enum import Enum
from typing import Any, Literal
from pydantic import BaseModel, Field

from .exceptions import InvalidChannelError

WORKSPACE_CHANNEL_PREFIX = "workspace"
USER_CHANNEL_PREFIX = "user"

CHANNEL_PATTERN = re.compile(r"^(workspace|user):([A-Za-z0-9_-]{1,64})$")


class EventType(str, Enum):
    """Server-to-client event types."""

    ISSUE_CREATED = "issue_created"
    ISSUE_UPDATED = "issue_updated"
    COMMENT_ADDED = "comment_added"
    NOTIFICATION_CREATED = "notification_created"


class RealtimeEvent(BaseModel):
    """One event as delivered to every subscriber of a channel."""

    type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ChannelRef(BaseModel):
    kind: Literal["workspace", "user"]
    id: str


class SubscriptionMessage(BaseModel):
    """Client-to-server control message."""

    action: Literal["subscribe", "unsubscribe"]
    channel: str


def workspace_channel(workspace_id: str) -> str:
    return f"{WORKSPACE_CHANNEL_PREFIX}:{workspace_id}"


def user_channel(user_id: str) -> str:
    return f"{USER_CHANNEL_PREFIX}:{user_id}"


def parse_channel(channel: str) -> ChannelRef:
    match = CHANNEL_PATTERN.match(channel or "")
    if not match:
        raise InvalidChannelError(channel)
    return ChannelRef(kind=match.group(1), id=match.group(2))


# Payload builders for the events handlers publish


def issue_created_payload(issue_id: str, title: str, actor_id: str) -> dict[str, Any]:
    return {"issueId": issue_id, "title": title, "actorId": actor_id}


def issue_updated_payload(issue_id: str, fields: list[str], actor_id: str) -> dict[str, Any]:
    return {"issueId": issue_id, "fields": list(fields), "actorId": actor_id}


def comment_added_payload(issue_id: str, comment_id: str, actor_id: str) -> dict[str, Any]:
    return {"issueId": issue_id, "commentId": comment_id, "actorId": actor_id}


def notification_created_payload(notification_id: str, message: str) -> dict[str, Any]:
    return {"notificationId": notification_id, "message": message}
