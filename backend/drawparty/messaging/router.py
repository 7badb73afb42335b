from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from drawparty.messaging.types import DEFAULT_MAX_MESSAGE_BYTES, parse_client_message

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol
    from drawparty.session.context import RoomSession

logger = structlog.get_logger()


class MessageRouter:
    """
    Decodes raw frames at the channel boundary and hands typed messages to the room.

    This class contains pure business logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session: RoomSession, *, max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES) -> None:
        self._session = session
        self._max_message_bytes = max_message_bytes

    async def handle_message(self, connection: ConnectionProtocol, raw: str) -> None:
        try:
            message = parse_client_message(raw, self._max_message_bytes)
        except (ValidationError, ValueError) as e:
            # Malformed frames are dropped: the sender is neither notified nor closed.
            logger.warning(
                "invalid message dropped",
                connection_id=connection.connection_id,
                error=str(e).splitlines()[0],
            )
            return

        try:
            await self._session.handle(connection, message)
        except Exception:
            logger.exception("error while handling message", connection_id=connection.connection_id, type=message.type)

    async def handle_connect(self, connection: ConnectionProtocol) -> None:
        self._session.connect(connection)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._session.disconnect(connection)
