"""Cancellation token tying asynchronous page work to the page's lifetime."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Coroutine, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PageUnmounted(Exception):
    """An awaited result arrived after its page was unmounted."""


class PageLifetime:
    """Tracks whether a page is still mounted and owns its background tasks.

    ``guard`` wraps every remote call a page makes: once :meth:`cancel` has
    run, results (and failures) are discarded by raising
    :class:`PageUnmounted` instead of being applied to stale state.
    """

    def __init__(self, name: str = "page") -> None:
        self.name = name
        self._cancelled = False
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def cancel(self) -> None:
        """Mark the page unmounted and cancel its tasks. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            logger.debug("Cancelled %d task(s) for %s", len(tasks), self.name)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        if self._cancelled:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise PageUnmounted(self.name)
        try:
            result = await awaitable
        except Exception as exc:
            if self._cancelled:
                logger.debug("Discarding failure for unmounted %s: %s", self.name, exc)
                raise PageUnmounted(self.name) from exc
            raise
        if self._cancelled:
            logger.debug("Discarding stale result for unmounted %s", self.name)
            raise PageUnmounted(self.name)
        return result

    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task[Any]:
        """Run *coro* as a task that is cancelled when the page unmounts."""
        if self._cancelled:
            coro.close()
            raise PageUnmounted(self.name)
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    async def join(self) -> None:
        """Wait until every task spawned so far (and any they spawn) finishes."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and not isinstance(exc, PageUnmounted):
            logger.error("Task for %s failed", self.name, exc_info=exc)
