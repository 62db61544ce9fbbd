"""Page controllers, one per route."""

from __future__ import annotations

from typing import Optional

from ..client import UserDirectoryClient
from ..notifications import NotificationBus
from ..routing import RouteMatch
from .base import Navigate, PageController
from .detail_page import DetailPageController, RecordPageController
from .form_pages import CreatePageController, EditPageController
from .lifetime import PageLifetime, PageUnmounted
from .list_page import ListPageController, filter_users
from .not_found import NotFoundPageController
from .state import PageState, PageStatus

__all__ = [
    "build_controller",
    "PageController",
    "ListPageController",
    "DetailPageController",
    "RecordPageController",
    "CreatePageController",
    "EditPageController",
    "NotFoundPageController",
    "PageLifetime",
    "PageUnmounted",
    "PageState",
    "PageStatus",
    "filter_users",
]


def build_controller(
    match: Optional[RouteMatch],
    path: str,
    client: UserDirectoryClient,
    bus: NotificationBus,
    channel: Optional[str] = None,
    navigate: Optional[Navigate] = None,
) -> PageController:
    """Instantiate the controller for a resolved route (unmounted)."""
    common = dict(client=client, bus=bus, channel=channel, navigate=navigate)
    if match is None:
        return NotFoundPageController(path=path, **common)
    if match.name == "list":
        return ListPageController(**common)
    if match.name == "create":
        return CreatePageController(**common)
    if match.name == "detail":
        return DetailPageController(raw_id=match.params["id"], **common)
    if match.name == "edit":
        return EditPageController(raw_id=match.params["id"], **common)
    return NotFoundPageController(path=path, **common)
