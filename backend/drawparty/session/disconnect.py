"""React to channel closure: free a player's seat or tear down after host loss."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from drawparty.messaging.types import PlayersUpdatedMessage
from drawparty.session.connections import Role

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol
    from drawparty.session.broadcast import BroadcastRouter
    from drawparty.session.connections import ConnectionRegistry
    from drawparty.session.models import Room

logger = structlog.get_logger()


class DisconnectHandler:
    """Deregister a closed channel and repair room state around it.

    A departing player loses their seat and the host gets one roster update.
    A departing host takes the roster and the started flag with it. The
    phase is left alone until the next RESET_GAME.
    """

    def __init__(self, room: Room, registry: ConnectionRegistry, broadcast: BroadcastRouter) -> None:
        self._room = room
        self._registry = registry
        self._broadcast = broadcast

    async def handle(self, connection: ConnectionProtocol) -> None:
        connection_id = connection.connection_id
        was_host = self._registry.host_id == connection_id
        entry = self._registry.unregister(connection_id)
        if entry is None:
            return

        if was_host:
            self._room.clear_roster()
            logger.info("host disconnected, roster cleared", phase=self._room.phase)
            return

        if entry.role != Role.PLAYER or entry.player_id is None:
            return

        player = self._room.players.get(entry.player_id)
        if player is None or player.connection_id != connection_id:
            return

        self._room.remove_player(player.id)
        logger.info(
            "player left",
            player_id=player.id,
            username=player.name,
            player_count=self._room.player_count,
        )
        await self._broadcast.to_host(PlayersUpdatedMessage(players=self._room.get_player_info()))
