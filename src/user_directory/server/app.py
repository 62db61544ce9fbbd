"""Starlette ASGI application serving the live user directory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import AsyncIterator, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse
from starlette.routing import Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..client import UserDirectoryClient
from ..config import DirectoryConfig
from ..notifications import NotificationBus
from .session import LiveSession

logger = logging.getLogger(__name__)

_PKG_DIR = Path(__file__).parent
_STATIC_DIR = _PKG_DIR / "static"
_TEMPLATE_DIR = _PKG_DIR / "templates"

# Cache template HTML at import time
_TEMPLATE_HTML: str | None = None


def _get_html() -> str:
    """Load the shell HTML template (cached after first read)."""
    global _TEMPLATE_HTML  # noqa: PLW0603
    if _TEMPLATE_HTML is None:
        _TEMPLATE_HTML = (_TEMPLATE_DIR / "index.html").read_text(encoding="utf-8")
    return _TEMPLATE_HTML


def create_app(
    config: Optional[DirectoryConfig] = None,
    client: Optional[UserDirectoryClient] = None,
    bus: Optional[NotificationBus] = None,
) -> Starlette:
    """Build the Starlette application.

    Args:
        config: Settings; defaults are used when omitted
        client: Remote client to share across sessions. When omitted one is
            built from *config* and closed on shutdown.
        bus: Notification bus; a fresh one per app when omitted
    """
    config = config or DirectoryConfig()
    owns_client = client is None
    if client is None:
        client = UserDirectoryClient(config.api_base_url, timeout=config.request_timeout_seconds)
    if bus is None:
        bus = NotificationBus(default_duration=config.toast_duration_seconds)
    sessions: set[LiveSession] = set()
    shell = _get_html().replace(
        "__TOAST_DURATION_MS__", str(int(config.toast_duration_seconds * 1000))
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.debug("Serving user directory backed by %s", client.base_url)
        try:
            yield
        finally:
            for session in list(sessions):
                session.close()
            sessions.clear()
            if owns_client:
                await client.aclose()

    async def shell_page(request: Request) -> HTMLResponse:
        return HTMLResponse(shell)

    async def healthz(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "sessions": len(sessions)})

    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        session = LiveSession(client, bus)
        sessions.add(session)
        session.open()
        sender = asyncio.create_task(_pump(websocket, session))
        try:
            while True:
                try:
                    message = await websocket.receive_json()
                    session.handle(message)
                except (ValueError, KeyError) as exc:
                    # KeyError: a binary frame has no text payload
                    logger.info("Ignoring malformed message on session %s: %s", session.id, exc)
        except WebSocketDisconnect:
            logger.debug("Session %s disconnected", session.id)
        finally:
            sender.cancel()
            session.close()
            sessions.discard(session)

    async def _pump(websocket: WebSocket, session: LiveSession) -> None:
        """Forward the session's outbox to the socket."""
        try:
            while True:
                message = await session.outbox.get()
                await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.debug("Stopped sending to session %s: %s", session.id, exc)

    routes = [
        Route("/", shell_page),
        Route("/create", shell_page),
        Route("/edit/{user_id}", shell_page),
        Route("/user/{user_id}", shell_page),
        Route("/healthz", healthz),
        WebSocketRoute("/ws", websocket_endpoint),
        Mount("/static", app=StaticFiles(directory=str(_STATIC_DIR)), name="static"),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.config = config
    app.state.client = client
    app.state.bus = bus
    app.state.sessions = sessions
    return app
