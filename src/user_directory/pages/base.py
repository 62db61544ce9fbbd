"""Base class for page controllers."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..client import UserDirectoryClient
from ..exceptions import RemoteOperationError
from ..notifications import NotificationBus
from .lifetime import PageLifetime, PageUnmounted
from .state import PageState, PageStatus

T = TypeVar("T")

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]


class PageController(Generic[T]):
    """Owns one route's fetch/mutate state machine.

    Subclasses implement :meth:`mount` and :meth:`render`. Every state
    change calls the registered listeners, which re-render the view.
    Rendering is delegated to the stateless functions in ``views``.
    """

    def __init__(
        self,
        client: UserDirectoryClient,
        bus: NotificationBus,
        channel: Optional[str] = None,
        navigate: Optional[Navigate] = None,
    ) -> None:
        self.client = client
        self.bus = bus
        self.channel = channel
        self.state: PageState[T] = PageState()
        self.lifetime = PageLifetime(type(self).__name__)
        self._navigate = navigate
        self._listeners: list[Callable[[PageController[Any]], None]] = []
        self._load_seq = 0

    @property
    def path(self) -> str:
        raise NotImplementedError

    @property
    def mounted(self) -> bool:
        return not self.lifetime.cancelled

    def add_listener(self, listener: Callable[[PageController[Any]], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[PageController[Any]], None]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def mount(self) -> None:
        raise NotImplementedError

    def unmount(self) -> None:
        self.lifetime.cancel()
        self._listeners.clear()

    def render(self) -> str:
        raise NotImplementedError

    def navigate(self, path: str) -> None:
        if self._navigate is not None:
            self._navigate(path)

    def _changed(self) -> None:
        if self.lifetime.cancelled:
            return
        for listener in list(self._listeners):
            listener(self)

    async def _load(self, fetch: Callable[[], Awaitable[T]], error_message: str) -> None:
        """Run one fetch through loading → ready | error.

        A load that is superseded by a newer one, or that finishes after
        unmount, leaves the state untouched.
        """
        self._load_seq += 1
        seq = self._load_seq
        self.state.status = PageStatus.LOADING
        self.state.error = None
        self._changed()

        try:
            data = await self.lifetime.guard(fetch())
        except PageUnmounted:
            return
        except RemoteOperationError as exc:
            if seq != self._load_seq:
                return
            logger.info("%s load failed: %s", type(self).__name__, exc)
            self.state.status = PageStatus.ERROR
            self.state.error = error_message
            self._changed()
            return

        if seq != self._load_seq:
            logger.debug("Discarding superseded load for %s", type(self).__name__)
            return
        self.state.data = data
        self.state.status = PageStatus.READY
        self._loaded(data)
        self._changed()

    def _loaded(self, data: T) -> None:
        """Hook called with freshly loaded data before listeners run."""
