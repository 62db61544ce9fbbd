"""One live browser view: routes intents to the mounted page controller."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Optional

from ..client import UserDirectoryClient
from ..models import CreateUserData
from ..notifications import NotificationBus
from ..pages import (
    CreatePageController,
    EditPageController,
    ListPageController,
    PageController,
    build_controller,
)
from ..routing import match_route
from ..views import render_page

logger = logging.getLogger(__name__)


class LiveSession:
    """Server side of one WebSocket connection.

    The session hosts at most one page controller at a time. Navigating
    unmounts the current controller (discarding its in-flight work) and
    mounts the next one. Everything the browser should see is put on
    :attr:`outbox`: ``render`` and ``location`` messages from here, ``toast``
    messages from the notification bus, which delivers to this session's
    channel.
    """

    def __init__(
        self,
        client: UserDirectoryClient,
        bus: NotificationBus,
        session_id: Optional[str] = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex[:12]
        self.client = client
        self.bus = bus
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.controller: Optional[PageController] = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if self._open:
            return
        self.bus.subscribe(self.outbox, channel=self.id)
        self._open = True
        logger.debug("Session %s opened", self.id)

    def close(self) -> None:
        """Unmount the current page and stop receiving toasts. Idempotent."""
        if self.controller is not None:
            self.controller.unmount()
            self.controller = None
        if self._open:
            self.bus.unsubscribe(self.outbox)
            self._open = False
            logger.debug("Session %s closed", self.id)

    # ── Navigation ──────────────────────────────────────────────────

    def navigate(self, path: str) -> PageController:
        """Replace the mounted page with the one for *path*."""
        previous = self.controller
        if previous is not None:
            previous.unmount()

        controller = build_controller(
            match_route(path),
            path,
            client=self.client,
            bus=self.bus,
            channel=self.id,
            navigate=self.navigate,
        )
        controller.add_listener(self._render)
        self.controller = controller
        logger.debug("Session %s → %s (%s)", self.id, path, type(controller).__name__)

        self._send({"type": "location", "path": controller.path})
        self._render(controller)
        controller.lifetime.spawn(controller.mount(), name=f"{self.id}:mount")
        return controller

    # ── Intents ─────────────────────────────────────────────────────

    def handle(self, message: Any) -> None:
        """Dispatch one client message.

        Raises:
            ValueError: The message is not a well-formed intent.
        """
        if not isinstance(message, dict):
            raise ValueError("message must be an object")
        kind = message.get("type")
        if kind == "navigate":
            path = message.get("path")
            if not isinstance(path, str) or not path.startswith("/"):
                raise ValueError(f"navigate needs an absolute path, got {path!r}")
            self.navigate(path)
            return

        handler = self._intents.get(kind) if isinstance(kind, str) else None
        if handler is None:
            raise ValueError(f"unknown message type {kind!r}")
        if self.controller is None:
            logger.debug("Session %s: %s before any navigation, ignored", self.id, kind)
            return
        handler(self, self.controller, message)

    def _on_search(self, controller: PageController, message: dict[str, Any]) -> None:
        term = message.get("term", "")
        if not isinstance(term, str):
            raise ValueError("search term must be a string")
        if isinstance(controller, ListPageController):
            controller.search(term)

    def _on_retry(self, controller: PageController, message: dict[str, Any]) -> None:
        retry = getattr(controller, "retry", None)
        if retry is not None:
            controller.lifetime.spawn(retry(), name=f"{self.id}:retry")

    def _on_refresh(self, controller: PageController, message: dict[str, Any]) -> None:
        refresh = getattr(controller, "refresh", None)
        if refresh is not None:
            controller.lifetime.spawn(refresh(), name=f"{self.id}:refresh")

    def _on_delete(self, controller: PageController, message: dict[str, Any]) -> None:
        user_id = message.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise ValueError(f"delete needs an integer id, got {user_id!r}")
        confirmed = bool(message.get("confirmed", False))
        if not isinstance(controller, ListPageController):
            logger.debug("Session %s: delete outside the list page, ignored", self.id)
            return
        # The browser already asked; replay its answer to the confirmation gate
        controller.lifetime.spawn(
            controller.request_delete(user_id, lambda _message: confirmed),
            name=f"{self.id}:delete:{user_id}",
        )

    def _on_submit(self, controller: PageController, message: dict[str, Any]) -> None:
        form = message.get("form")
        if not isinstance(form, dict):
            raise ValueError("submit needs a form object")
        if not isinstance(controller, (CreatePageController, EditPageController)):
            logger.debug("Session %s: submit outside a form page, ignored", self.id)
            return
        data = CreateUserData.from_form(form)
        controller.lifetime.spawn(controller.submit(data), name=f"{self.id}:submit")

    _intents = {
        "search": _on_search,
        "retry": _on_retry,
        "refresh": _on_refresh,
        "delete": _on_delete,
        "submit": _on_submit,
    }

    # ── Output ──────────────────────────────────────────────────────

    def _render(self, controller: PageController) -> None:
        if controller is not self.controller:
            return
        html = render_page(controller.path, controller.render())
        self._send({"type": "render", "path": controller.path, "html": html})

    def _send(self, message: dict[str, Any]) -> None:
        self.outbox.put_nowait(message)
