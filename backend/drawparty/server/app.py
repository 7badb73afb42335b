from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from drawparty.messaging.router import MessageRouter
from drawparty.server.settings import PartyServerSettings
from drawparty.server.websocket import websocket_endpoint
from drawparty.session.context import RoomSession
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


async def status(request: Request) -> JSONResponse:
    session: RoomSession = request.app.state.session
    return JSONResponse({"status": "ok", "version": APP_VERSION, "room": session.snapshot()})


def create_app(
    settings: PartyServerSettings | None = None,
    session: RoomSession | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = PartyServerSettings()

    if session is None:
        session = RoomSession(settings.room_code, max_players=settings.max_players)

    if message_router is None:
        message_router = MessageRouter(session, max_message_bytes=settings.max_message_bytes)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, message_router)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        WebSocketRoute("/ws", ws_endpoint),
        # Existing web clients connect to the bare server URL.
        WebSocketRoute("/", ws_endpoint),
    ]

    app = Starlette(routes=routes)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.session = session

    logger.info("party server ready", room_code=session.room.room_code, max_players=session.room.max_players)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = PartyServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
