"""Live web server: Starlette app, WebSocket sessions, static shell."""

from .app import create_app
from .session import LiveSession

__all__ = ["create_app", "LiveSession"]
