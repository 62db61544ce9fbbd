"""Exception hierarchy for the user directory console."""

from .base import UserDirectoryError
from .config import ConfigurationError, InvalidConfigError
from .remote import RemoteOperationError

__all__ = [
    "UserDirectoryError",
    "RemoteOperationError",
    "ConfigurationError",
    "InvalidConfigError",
]
