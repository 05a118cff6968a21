"""
Event fan-out.

Emitting never blocks the caller and never raises: delivery runs as a
background task, and a connection that fails to receive is logged and
dropped from the registry. No live subscribers is not an error.
"""

import asyncio
import logging
from typing import Any

from .interfaces import IEventBroadcaster
from .models import EventType, RealtimeEvent, user_channel, workspace_channel
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class EventBroadcaster(IEventBroadcaster):
    """Publishes events to the connections registered for a channel."""

    def __init__(self, registry: ConnectionRegistry):
        self._registry = registry
        self._pending: set[asyncio.Task] = set()

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def emit_workspace_event(
        self, workspace_id: str, event_type: EventType, payload: dict[str, Any]
    ) -> None:
        self._schedule(workspace_channel(workspace_id), RealtimeEvent(type=event_type, payload=payload))

    def emit_user_event(
        self, user_id: str, event_type: EventType, payload: dict[str, Any]
    ) -> None:
        self._schedule(user_channel(user_id), RealtimeEvent(type=event_type, payload=payload))

    async def flush(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, channel: str, event: RealtimeEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; dropping %s for %s", event.type.value, channel)
            return

        task = loop.create_task(self._deliver(channel, event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, channel: str, event: RealtimeEvent) -> None:
        connections = self._registry.connections(channel)
        if not connections:
            logger.debug("No subscribers on %s for %s", channel, event.type.value)
            return

        message = event.to_message()
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning("Dropping connection on %s after failed send: %s", channel, e)
                self._registry.disconnect(connection)

        logger.debug("Delivered %s to %d connection(s) on %s", event.type.value, len(connections), channel)
