"""Process-wide notification bus for transient toasts.

One bus is created per application and handed to everything that needs it;
there is no module-level instance. A view subscribes a queue when it mounts
and unsubscribes it when it unmounts. Notifications are addressed to a
channel (one per live view); wildcard subscribers see every channel.
"""

from __future__ import annotations

import asyncio
import logging
import queue as queue_module
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Notification:
    """One toast. A later notification with the same id replaces it."""

    kind: NotificationKind
    message: str
    id: str = field(default_factory=_new_id)
    duration: Optional[float] = None

    def to_message(self) -> dict[str, Any]:
        return {
            "type": "toast",
            "id": self.id,
            "kind": self.kind.value,
            "message": self.message,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class TrackMessages:
    """Texts for the loading → success | error lifecycle of one operation."""

    loading: str
    success: str
    error: str
    # Shown when the operation is cancelled mid-flight; falls back to error
    cancelled: Optional[str] = None


class NotificationBus:
    """Fan-out of notifications to subscriber queues.

    Thread-safe: subscriptions may change while another thread publishes.
    Subscriber queues only need ``put_nowait`` (``asyncio.Queue`` in the
    server, ``queue.Queue`` works too).
    """

    def __init__(self, default_duration: float = 4.0) -> None:
        self.default_duration = default_duration
        self._lock = threading.RLock()
        self._subscribers: list[tuple[Optional[str], Any]] = []

    # ── Subscription lifecycle ──────────────────────────────────────

    def subscribe(self, queue: Any, channel: Optional[str] = None) -> None:
        """Register *queue* for *channel*, or for every channel if None."""
        with self._lock:
            self._subscribers.append((channel, queue))

    def unsubscribe(self, queue: Any) -> None:
        """Remove every subscription held by *queue*."""
        with self._lock:
            self._subscribers = [(c, q) for c, q in self._subscribers if q is not queue]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # ── Publishing ──────────────────────────────────────────────────

    def publish(self, notification: Notification, channel: Optional[str] = None) -> int:
        """Deliver *notification*; return how many queues accepted it."""
        with self._lock:
            targets = [
                q for c, q in self._subscribers if c is None or channel is None or c == channel
            ]
        msg = notification.to_message()
        return sum(1 for queue in targets if self._send_to_queue(queue, msg))

    def _send_to_queue(self, queue: Any, msg: dict[str, Any]) -> bool:
        try:
            queue.put_nowait(msg)
            return True
        except (asyncio.QueueFull, queue_module.Full) as exc:
            # Toasts are informational; a stalled view just misses one
            logger.debug("Dropping notification for a full subscriber: %s", exc)
            return False

    def loading(self, message: str, channel: Optional[str] = None) -> Notification:
        note = Notification(NotificationKind.LOADING, message)
        self.publish(note, channel)
        return note

    def success(
        self, message: str, channel: Optional[str] = None, replaces: Optional[str] = None
    ) -> Notification:
        return self._finish(NotificationKind.SUCCESS, message, channel, replaces)

    def error(
        self, message: str, channel: Optional[str] = None, replaces: Optional[str] = None
    ) -> Notification:
        return self._finish(NotificationKind.ERROR, message, channel, replaces)

    def _finish(
        self,
        kind: NotificationKind,
        message: str,
        channel: Optional[str],
        replaces: Optional[str],
    ) -> Notification:
        note = Notification(
            kind, message, id=replaces or _new_id(), duration=self.default_duration
        )
        self.publish(note, channel)
        return note

    async def track(
        self,
        awaitable: Awaitable[T],
        messages: TrackMessages,
        channel: Optional[str] = None,
    ) -> T:
        """Show a loading toast while *awaitable* runs, then its outcome.

        The outcome toast reuses the loading toast's id so the view swaps it
        in place. Exceptions and cancellation are reported and re-raised, so
        a loading toast never outlives its operation.
        """
        pending = self.loading(messages.loading, channel)
        try:
            result = await awaitable
        except asyncio.CancelledError:
            self.error(messages.cancelled or messages.error, channel, replaces=pending.id)
            raise
        except Exception:
            self.error(messages.error, channel, replaces=pending.id)
            raise
        self.success(messages.success, channel, replaces=pending.id)
        return result
