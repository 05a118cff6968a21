from modules.realtime.registry import ConnectionRegistry
from tests.conftest import FakeConnection


class TestConnectionRegistry:
    def test_subscribe_and_lookup(self, registry):
        conn = FakeConnection()
        registry.subscribe("workspace:ws-1", conn)

        assert registry.connections("workspace:ws-1") == [conn]
        assert registry.channels_for(conn) == {"workspace:ws-1"}
        assert len(registry) == 1

    def test_subscribe_twice_is_one_subscription(self, registry):
        conn = FakeConnection()
        registry.subscribe("workspace:ws-1", conn)
        registry.subscribe("workspace:ws-1", conn)
        assert registry.connections("workspace:ws-1") == [conn]

    def test_unsubscribe(self, registry):
        conn = FakeConnection()
        registry.subscribe("workspace:ws-1", conn)
        registry.subscribe("user:u-1", conn)

        registry.unsubscribe("workspace:ws-1", conn)

        assert registry.connections("workspace:ws-1") == []
        assert registry.channels_for(conn) == {"user:u-1"}

    def test_unsubscribe_unknown_is_noop(self, registry):
        registry.unsubscribe("workspace:ws-1", FakeConnection())
        assert len(registry) == 0

    def test_disconnect_drops_everything(self, registry):
        conn, other = FakeConnection(), FakeConnection()
        registry.subscribe("workspace:ws-1", conn)
        registry.subscribe("user:u-1", conn)
        registry.subscribe("workspace:ws-1", other)

        registry.disconnect(conn)

        assert registry.channels_for(conn) == set()
        assert registry.connections("workspace:ws-1") == [other]
        assert registry.connections("user:u-1") == []

    def test_connections_is_a_snapshot(self):
        registry = ConnectionRegistry()
        conn = FakeConnection()
        registry.subscribe("user:u-1", conn)

        snapshot = registry.connections("user:u-1")
        registry.disconnect(conn)

        assert snapshot == [conn]
