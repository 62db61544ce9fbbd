"""Confirmation gate for destructive actions."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from .exceptions import RemoteOperationError
from .models import User
from .notifications import NotificationBus, TrackMessages

logger = logging.getLogger(__name__)

DELETE_MESSAGES = TrackMessages(
    loading="Deleting user...",
    success="User deleted successfully!",
    error="Failed to delete user. Please try again.",
    cancelled="Delete interrupted. Refresh the list to check whether the user was removed.",
)


class ConfirmOutcome(str, Enum):
    DECLINED = "declined"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def delete_confirmation_message(user: User) -> str:
    return f"Are you sure you want to delete {user.name}? This action cannot be undone."


async def confirm_and_run(
    prompt: Callable[[str], bool],
    message: str,
    action: Callable[[], Awaitable[object]],
    bus: NotificationBus,
    channel: Optional[str] = None,
    messages: TrackMessages = DELETE_MESSAGES,
) -> ConfirmOutcome:
    """Ask *prompt* to confirm *message*, then run *action* with toasts.

    The prompt is synchronous and must answer before anything happens. A
    remote failure is reported through the bus and returned as FAILED;
    anything else propagates.
    """
    if not prompt(message):
        logger.debug("Declined: %s", message)
        return ConfirmOutcome.DECLINED
    try:
        await bus.track(action(), messages, channel)
    except RemoteOperationError as exc:
        logger.info("Confirmed action failed: %s", exc)
        return ConfirmOutcome.FAILED
    return ConfirmOutcome.SUCCEEDED
