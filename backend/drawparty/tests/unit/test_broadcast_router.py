from drawparty.messaging.types import GameResetMessage, TimeUpdatedMessage
from drawparty.session.broadcast import BroadcastRouter
from drawparty.session.connections import ConnectionRegistry
from drawparty.session.models import Room
from drawparty.tests.mocks import MockConnection


def _setup() -> tuple[BroadcastRouter, ConnectionRegistry, Room]:
    registry = ConnectionRegistry()
    room = Room(room_code="ABCD")
    return BroadcastRouter(registry, room), registry, room


def _seat(registry: ConnectionRegistry, room: Room, connection: MockConnection) -> None:
    registry.register(connection)
    player = room.seat_player(connection.connection_id, room.next_free_icon(), connection)
    registry.bind_player(connection.connection_id, player.id)


class TestBroadcastRouter:
    async def test_to_host_without_host(self):
        broadcast, _, _ = _setup()
        assert await broadcast.to_host(GameResetMessage()) is False

    async def test_to_host(self):
        broadcast, registry, _ = _setup()
        host = MockConnection("host")
        registry.register(host)
        registry.bind_host("host")

        assert await broadcast.to_host(GameResetMessage()) is True
        assert host.sent_messages == [{"type": "GAME_RESET"}]

    async def test_to_players_skips_host_and_unassigned(self):
        broadcast, registry, room = _setup()
        host = MockConnection("host")
        watcher = MockConnection("watcher")
        registry.register(host)
        registry.bind_host("host")
        registry.register(watcher)
        alice = MockConnection("alice")
        bob = MockConnection("bob")
        _seat(registry, room, alice)
        _seat(registry, room, bob)

        await broadcast.to_players(TimeUpdatedMessage(time_remaining=10))

        expected = [{"type": "TIME_UPDATE", "timeRemaining": 10}]
        assert alice.sent_messages == expected
        assert bob.sent_messages == expected
        assert host.sent_messages == []
        assert watcher.sent_messages == []

    async def test_to_everyone(self):
        broadcast, registry, room = _setup()
        host = MockConnection("host")
        watcher = MockConnection("watcher")
        registry.register(host)
        registry.bind_host("host")
        registry.register(watcher)
        alice = MockConnection("alice")
        _seat(registry, room, alice)

        await broadcast.to_everyone(GameResetMessage())

        for conn in (host, watcher, alice):
            assert conn.sent_messages == [{"type": "GAME_RESET"}]

    async def test_closed_channel_is_skipped(self):
        broadcast, registry, room = _setup()
        alice = MockConnection("alice")
        bob = MockConnection("bob")
        _seat(registry, room, alice)
        _seat(registry, room, bob)
        alice.drop()

        await broadcast.to_players(GameResetMessage())

        assert alice.sent_messages == []
        assert bob.sent_messages == [{"type": "GAME_RESET"}]
        assert room.player_count == 2

    async def test_send_failure_does_not_stop_fanout(self):
        broadcast, registry, room = _setup()
        broken = MockConnection("broken", fail_sends=True)
        bob = MockConnection("bob")
        _seat(registry, room, broken)
        _seat(registry, room, bob)

        await broadcast.to_players(GameResetMessage())

        assert bob.sent_messages == [{"type": "GAME_RESET"}]

    async def test_to_connection_reports_failure(self):
        broadcast, _, _ = _setup()
        broken = MockConnection("broken", fail_sends=True)
        assert await broadcast.to_connection(broken, GameResetMessage()) is False
