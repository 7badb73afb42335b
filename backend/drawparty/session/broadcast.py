"""Fan-out of server messages to the host, the seated players, or every channel."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol
    from drawparty.messaging.wire import WireModel
    from drawparty.session.connections import ConnectionRegistry
    from drawparty.session.models import Room

logger = structlog.get_logger()


async def _deliver(connection: ConnectionProtocol, payload: dict) -> bool:
    """Best-effort send. Closed channels are skipped, not pruned."""
    if not connection.is_open:
        return False
    try:
        await connection.send_message(payload)
    except (RuntimeError, OSError):
        logger.debug("send failed", connection_id=connection.connection_id)
        return False
    return True


class BroadcastRouter:
    def __init__(self, registry: ConnectionRegistry, room: Room) -> None:
        self._registry = registry
        self._room = room

    async def to_connection(self, connection: ConnectionProtocol, message: WireModel) -> bool:
        return await _deliver(connection, message.to_wire())

    async def to_host(self, message: WireModel) -> bool:
        host = self._registry.host
        if host is None:
            return False
        return await _deliver(host, message.to_wire())

    async def to_players(self, message: WireModel) -> None:
        """Send to every seated player.

        Snapshot the roster via list() so a disconnect handled while we yield
        on a send cannot mutate the dict under iteration.
        """
        payload = message.to_wire()
        for player in list(self._room.players.values()):
            await _deliver(player.connection, payload)

    async def to_everyone(self, message: WireModel) -> None:
        """Send to every registered channel, including the host and unassigned ones."""
        payload = message.to_wire()
        for connection in self._registry.connections():
            await _deliver(connection, payload)
