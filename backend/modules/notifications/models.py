"""
Notification module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotificationType(str, Enum):
    ASSIGNED = "assigned"
    MENTION = "mention"


class Notification(BaseModel):
    """A persisted, per-recipient notification."""

    id: str
    user_id: str = Field(..., description="Recipient")
    workspace_id: str
    issue_id: str
    type: NotificationType
    message: str
    read_at: Optional[datetime] = None
    created_at: datetime


class IssueRef(BaseModel):
    """The slice of an issue the assignment hook needs."""

    id: str
    workspace_id: str
    title: str
    assignee_id: Optional[str] = None
    actor_id: str = Field(..., description="User who made the change")


class CommentRef(BaseModel):
    """The slice of a new comment the mention hook needs."""

    id: str
    workspace_id: str
    issue_id: str
    issue_title: str
    author_id: str
    body: str


def mention_message(issue_title: str) -> str:
    return f'You were mentioned in issue "{issue_title}"'


def assignment_message(issue_title: str) -> str:
    return f'You were assigned to issue "{issue_title}"'


# API bodies


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationResponse(_CamelModel):
    id: str
    user_id: str
    workspace_id: str
    issue_id: str
    type: NotificationType
    message: str
    read_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(**notification.model_dump())


class NotificationListResponse(_CamelModel):
    notifications: list[NotificationResponse]


class NotificationEnvelope(_CamelModel):
    notification: NotificationResponse


class ReadAllResponse(_CamelModel):
    updated: int
