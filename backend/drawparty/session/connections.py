"""Connection registry: every open channel and the role it plays in the room."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from drawparty.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()


class Role(StrEnum):
    HOST = "host"
    PLAYER = "player"
    UNASSIGNED = "unassigned"


@dataclass
class ConnectionEntry:
    connection: ConnectionProtocol
    role: Role = Role.UNASSIGNED
    player_id: int | None = None


class ConnectionRegistry:
    """Track channels by connection id.

    At most one channel holds the host role. Binding a new host quietly
    demotes the previous one to unassigned. The player role is permanent
    for the life of a channel, even after its seat is cleared.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ConnectionEntry] = {}
        self._host_id: str | None = None

    def register(self, connection: ConnectionProtocol) -> None:
        self._entries[connection.connection_id] = ConnectionEntry(connection=connection)

    def unregister(self, connection_id: str) -> ConnectionEntry | None:
        """Remove a channel and return its entry, or None if it was unknown."""
        entry = self._entries.pop(connection_id, None)
        if connection_id == self._host_id:
            self._host_id = None
        return entry

    def role_of(self, connection_id: str) -> Role:
        entry = self._entries.get(connection_id)
        return entry.role if entry is not None else Role.UNASSIGNED

    def player_id_of(self, connection_id: str) -> int | None:
        entry = self._entries.get(connection_id)
        return entry.player_id if entry is not None else None

    @property
    def host(self) -> ConnectionProtocol | None:
        if self._host_id is None:
            return None
        entry = self._entries.get(self._host_id)
        return entry.connection if entry is not None else None

    @property
    def host_id(self) -> str | None:
        return self._host_id

    def bind_host(self, connection_id: str) -> None:
        entry = self._entries.get(connection_id)
        if entry is None:
            return
        previous = self._host_id
        if previous is not None and previous != connection_id:
            old_entry = self._entries.get(previous)
            if old_entry is not None:
                old_entry.role = Role.UNASSIGNED
            logger.info("host replaced", previous_connection_id=previous, connection_id=connection_id)
        entry.role = Role.HOST
        self._host_id = connection_id

    def bind_player(self, connection_id: str, player_id: int) -> None:
        entry = self._entries.get(connection_id)
        if entry is None:
            return
        entry.role = Role.PLAYER
        entry.player_id = player_id

    def connections(self) -> list[ConnectionProtocol]:
        return [entry.connection for entry in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._entries
