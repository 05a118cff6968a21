"""
Realtime module.

Best-effort live delivery of workspace and user events over WebSockets.

Public API:
- IEventBroadcaster: Interface used by handlers to publish events
- EventBroadcaster: Background-task fan-out over a ConnectionRegistry
- ConnectionRegistry: Live connections keyed by channel
- EventType / RealtimeEvent: The event envelope
"""

from .interfaces import IEventBroadcaster, IConnection
from .models import (
    ChannelRef,
    EventType,
    RealtimeEvent,
    SubscriptionMessage,
    comment_added_payload,
    issue_created_payload,
    issue_updated_payload,
    notification_created_payload,
    parse_channel,
    user_channel,
    workspace_channel,
)
from .exceptions import InvalidChannelError, ChannelForbiddenError
from .registry import ConnectionRegistry
from .broadcaster import EventBroadcaster

__all__ = [
    # Interfaces
    "IEventBroadcaster",
    "IConnection",
    # Models
    "ChannelRef",
    "EventType",
    "RealtimeEvent",
    "SubscriptionMessage",
    "comment_added_payload",
    "issue_created_payload",
    "issue_updated_payload",
    "notification_created_payload",
    "parse_channel",
    "user_channel",
    "workspace_channel",
    # Exceptions
    "InvalidChannelError",
    "ChannelForbiddenError",
    # Implementations
    "ConnectionRegistry",
    "EventBroadcaster",
]
