import logging
from unittest.mock import AsyncMock, patch

from drawparty.messaging.router import MessageRouter
from drawparty.session.models import Phase
from drawparty.tests.helpers import connect, join_player, send


class TestMessageRouter:
    async def test_malformed_frame_is_dropped(self, router, session, host):
        alice = await join_player(router, "Alice")
        alice.clear()
        host.clear()

        await router.handle_message(alice, "{not json")
        await router.handle_message(alice, '{"type": "NOT_A_COMMAND"}')
        await router.handle_message(alice, '{"type": "JOIN_GAME"}')

        assert alice.sent_messages == []
        assert host.sent_messages == []
        assert alice.is_open
        assert session.room.player_count == 1

    async def test_malformed_frame_is_logged(self, router, caplog):
        conn = await connect(router, "noisy")
        with caplog.at_level(logging.WARNING):
            await router.handle_message(conn, "garbage")
        assert "invalid message dropped" in caplog.text

    async def test_channel_keeps_working_after_bad_frame(self, router, session):
        conn = await connect(router, "c1")
        await router.handle_message(conn, "garbage")

        await send(router, conn, {"type": "HOST_CONNECT"})

        assert conn.messages_of_type("HOST_CONNECTED")

    async def test_oversized_frame_dropped(self, session):
        small_router = MessageRouter(session, max_message_bytes=1024)
        conn = await connect(small_router, "c1")

        await send(small_router, conn, {"type": "HOST_CONNECT", "padding": "x" * 2048})

        assert conn.sent_messages == []
        assert session.registry.host is None

    async def test_handler_error_is_contained(self, router, session, host, caplog):
        with (
            patch.object(session.processor, "process", AsyncMock(side_effect=RuntimeError("boom"))),
            caplog.at_level(logging.ERROR),
        ):
            await send(router, host, {"type": "START_GAME"})

        assert "error while handling message" in caplog.text

        await send(router, host, {"type": "START_DRAWING_PHASE", "category": "c", "prompt": "p", "timeRemaining": 5})
        assert session.room.phase == Phase.DRAWING

    async def test_frames_processed_in_send_order(self, router, session):
        """Frames queued on one channel are applied in the order they were sent."""
        host = await connect(router, "host")
        host.feed({"type": "HOST_CONNECT"})
        host.feed({"type": "START_GAME"})
        host.feed({"type": "START_DRAWING_PHASE", "category": "c", "prompt": "p", "timeRemaining": 5})
        host.feed({"type": "TIME_UPDATE", "timeRemaining": 4})

        for _ in range(4):
            await router.handle_message(host, await host.receive_text())

        assert session.room.started is True
        assert session.room.phase == Phase.DRAWING
        assert session.room.time_remaining == 4

    async def test_handle_connect_registers(self, router, session):
        await connect(router, "c1")
        assert "c1" in session.registry
