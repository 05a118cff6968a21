"""
Realtime module interfaces.

Handlers that mutate workspace data publish through IEventBroadcaster;
they never touch connections.
"""

from typing import Any, Protocol, runtime_checkable

from .models import EventType


@runtime_checkable
class IConnection(Protocol):
    """The part of a WebSocket the fan-out needs."""

    async def send_json(self, data: Any) -> None:
        ...


@runtime_checkable
class IEventBroadcaster(Protocol):
    """Fire-and-forget publication of realtime events."""

    def emit_workspace_event(
        self, workspace_id: str, event_type: EventType, payload: dict[str, Any]
    ) -> None:
        """Schedule delivery to every subscriber of ``workspace:<id>``."""
        ...

    def emit_user_event(
        self, user_id: str, event_type: EventType, payload: dict[str, Any]
    ) -> None:
        """Schedule delivery to every subscriber of ``user:<id>``."""
        ...

    async def flush(self) -> None:
        """Wait for all scheduled deliveries to finish."""
        ...
