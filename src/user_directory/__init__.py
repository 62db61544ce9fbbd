"""
User Directory - a live web console over a remote user REST API.

Lists, searches, views, creates, edits and deletes user records held by a
jsonplaceholder-style service. Pages run server-side and stream rendered
HTML and toasts to the browser over a WebSocket.
"""

__version__ = "0.1.0"

from .client import UserDirectoryClient
from .config import DirectoryConfig, load_config
from .models import Address, Company, CreateUserData, Geo, User
from .notifications import Notification, NotificationBus

__all__ = [
    "UserDirectoryClient",
    "DirectoryConfig",
    "load_config",
    "User",
    "Address",
    "Company",
    "Geo",
    "CreateUserData",
    "Notification",
    "NotificationBus",
]
