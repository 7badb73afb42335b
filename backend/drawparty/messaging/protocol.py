"""Channel abstraction shared by the WebSocket adapter and the test double."""

import json
from abc import ABC, abstractmethod
from typing import Any


class ConnectionProtocol(ABC):
    """
    One participant's bidirectional channel carrying JSON text frames.

    The room state machine only talks to this interface, so it runs the same
    against a Starlette WebSocket and an in-memory mock.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Stable id for the life of the channel; keys the connection registry."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """False once the peer has gone; broadcasts skip closed channels."""

    @abstractmethod
    async def send_text(self, data: str) -> None: ...

    @abstractmethod
    async def receive_text(self) -> str:
        """Wait for the next frame. Raises ConnectionError when the peer disconnects."""

    async def send_message(self, data: dict[str, Any]) -> None:
        await self.send_text(json.dumps(data))
