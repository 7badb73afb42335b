"""Explicit per-room context threaded through the message router."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from drawparty.session.broadcast import BroadcastRouter
from drawparty.session.connections import ConnectionRegistry
from drawparty.session.disconnect import DisconnectHandler
from drawparty.session.models import MAX_PLAYERS, Room
from drawparty.session.processor import CommandProcessor

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol
    from drawparty.messaging.types import ClientMessage

logger = structlog.get_logger()


class RoomSession:
    """Owns one Room together with its connection registry and collaborators.

    Commands and disconnects for the room are serialised by a single lock so
    every handler runs validate -> mutate -> broadcast to completion before
    the next one starts, even though sends yield to the event loop.
    """

    def __init__(self, room_code: str, max_players: int = MAX_PLAYERS) -> None:
        self.room = Room(room_code=room_code, max_players=max_players)
        self.registry = ConnectionRegistry()
        self.broadcast = BroadcastRouter(self.registry, self.room)
        self.processor = CommandProcessor(self.room, self.registry, self.broadcast)
        self._disconnects = DisconnectHandler(self.room, self.registry, self.broadcast)
        self._lock = asyncio.Lock()

    def connect(self, connection: ConnectionProtocol) -> None:
        self.registry.register(connection)

    async def handle(self, connection: ConnectionProtocol, message: ClientMessage) -> bool:
        async with self._lock:
            return await self.processor.process(connection, message)

    async def disconnect(self, connection: ConnectionProtocol) -> None:
        async with self._lock:
            await self._disconnects.handle(connection)

    def snapshot(self) -> dict[str, Any]:
        """Read-only summary for the status endpoint."""
        room = self.room
        return {
            "room_code": room.room_code,
            "phase": room.phase.value,
            "started": room.started,
            "player_count": room.player_count,
            "max_players": room.max_players,
            "submission_count": len(room.submissions),
            "connection_count": len(self.registry),
            "host_connected": self.registry.host is not None,
        }
