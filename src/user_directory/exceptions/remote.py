"""Remote service exceptions.

Every failure talking to the user service collapses into one kind. Network
errors, 4xx and 5xx responses and unreadable bodies are not told apart: the
caller only learns which action failed.
"""

from typing import Optional

from .base import UserDirectoryError


class RemoteOperationError(UserDirectoryError):
    """Raised when a call to the remote user service fails."""

    def __init__(self, action: str, reason: Optional[str] = None):
        details = {"reason": reason} if reason else None
        super().__init__(f"Failed to {action}", details=details)
        self.action = action
        self.reason = reason
