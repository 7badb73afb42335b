"""Tests for ConnectionRegistry."""

from drawparty.session.connections import ConnectionRegistry, Role
from drawparty.tests.mocks import MockConnection


def _registry_with(*connection_ids: str) -> tuple[ConnectionRegistry, list[MockConnection]]:
    registry = ConnectionRegistry()
    connections = [MockConnection(cid) for cid in connection_ids]
    for connection in connections:
        registry.register(connection)
    return registry, connections


class TestConnectionRegistry:
    def test_register_starts_unassigned(self):
        registry, _ = _registry_with("c1")
        assert "c1" in registry
        assert len(registry) == 1
        assert registry.role_of("c1") == Role.UNASSIGNED
        assert registry.player_id_of("c1") is None

    def test_unknown_connection_is_unassigned(self):
        registry = ConnectionRegistry()
        assert registry.role_of("nope") == Role.UNASSIGNED
        assert registry.player_id_of("nope") is None

    def test_bind_host(self):
        registry, (conn,) = _registry_with("c1")
        registry.bind_host("c1")
        assert registry.host is conn
        assert registry.host_id == "c1"
        assert registry.role_of("c1") == Role.HOST

    def test_bind_host_demotes_previous(self):
        registry, (first, second) = _registry_with("c1", "c2")
        registry.bind_host("c1")
        registry.bind_host("c2")
        assert registry.host is second
        assert registry.role_of("c1") == Role.UNASSIGNED

    def test_rebinding_same_host_is_noop(self):
        registry, (conn,) = _registry_with("c1")
        registry.bind_host("c1")
        registry.bind_host("c1")
        assert registry.host is conn

    def test_bind_unknown_connection_ignored(self):
        registry = ConnectionRegistry()
        registry.bind_host("ghost")
        registry.bind_player("ghost", 1)
        assert registry.host is None
        assert "ghost" not in registry

    def test_bind_player(self):
        registry, _ = _registry_with("c1")
        registry.bind_player("c1", 7)
        assert registry.role_of("c1") == Role.PLAYER
        assert registry.player_id_of("c1") == 7

    def test_unregister_returns_entry(self):
        registry, (conn,) = _registry_with("c1")
        registry.bind_player("c1", 3)
        entry = registry.unregister("c1")
        assert entry is not None
        assert entry.connection is conn
        assert entry.player_id == 3
        assert "c1" not in registry

    def test_unregister_unknown_returns_none(self):
        registry = ConnectionRegistry()
        assert registry.unregister("unknown") is None

    def test_unregister_host_clears_host(self):
        registry, _ = _registry_with("c1")
        registry.bind_host("c1")
        registry.unregister("c1")
        assert registry.host is None
        assert registry.host_id is None

    def test_connections_in_registration_order(self):
        registry, conns = _registry_with("a", "b", "c")
        assert registry.connections() == conns
