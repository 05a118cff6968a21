"""
Registry of live connections keyed by channel.

All mutation happens on the event loop thread, so no locking is needed.
Subscriptions do not survive a disconnect; clients re-subscribe after
reconnecting.
"""

from .interfaces import IConnection


class ConnectionRegistry:
    """
    Channel -> connections, plus the reverse index used for teardown.

    Connections are tracked by identity; WebSocket objects are not
    required to be hashable.
    """

    def __init__(self) -> None:
        self._channels: dict[str, dict[int, IConnection]] = {}
        self._subscriptions: dict[int, set[str]] = {}

    def subscribe(self, channel: str, connection: IConnection) -> None:
        self._channels.setdefault(channel, {})[id(connection)] = connection
        self._subscriptions.setdefault(id(connection), set()).add(channel)

    def unsubscribe(self, channel: str, connection: IConnection) -> None:
        key = id(connection)
        members = self._channels.get(channel)
        if members is not None:
            members.pop(key, None)
            if not members:
                del self._channels[channel]
        channels = self._subscriptions.get(key)
        if channels is not None:
            channels.discard(channel)
            if not channels:
                del self._subscriptions[key]

    def disconnect(self, connection: IConnection) -> None:
        """Drop every subscription held by a connection."""
        for channel in list(self._subscriptions.get(id(connection), ())):
            self.unsubscribe(channel, connection)

    def connections(self, channel: str) -> list[IConnection]:
        """Snapshot of the subscribers of a channel."""
        return list(self._channels.get(channel, {}).values())

    def channels_for(self, connection: IConnection) -> set[str]:
        return set(self._subscriptions.get(id(connection), ()))

    def __len__(self) -> int:
        return len(self._subscriptions)
