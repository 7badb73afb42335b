"""Shared helpers for driving a room through the message router in tests."""

import json
from typing import Any

from drawparty.messaging.router import MessageRouter
from drawparty.tests.mocks import MockConnection

ROOM_CODE = "ABCD"


async def send(router: MessageRouter, connection: MockConnection, payload: dict[str, Any]) -> None:
    """Deliver one client message through the router as a raw JSON frame."""
    await router.handle_message(connection, json.dumps(payload))


async def connect(router: MessageRouter, connection_id: str | None = None) -> MockConnection:
    connection = MockConnection(connection_id)
    await router.handle_connect(connection)
    return connection


async def connect_host(router: MessageRouter, connection_id: str = "host") -> MockConnection:
    host = await connect(router, connection_id)
    await send(router, host, {"type": "HOST_CONNECT"})
    host.clear()
    return host


async def join_player(router: MessageRouter, name: str, room_code: str = ROOM_CODE) -> MockConnection:
    connection = await connect(router, f"conn-{name}")
    await send(router, connection, {"type": "JOIN_GAME", "roomCode": room_code, "username": name})
    return connection


async def start_drawing(
    router: MessageRouter,
    host: MockConnection,
    category: str = "Breakfast",
    prompt: str = "Pancakes",
    time_remaining: int = 60,
) -> None:
    await send(
        router,
        host,
        {"type": "START_DRAWING_PHASE", "category": category, "prompt": prompt, "timeRemaining": time_remaining},
    )
