"""Pages keyed by a user identifier from the route: detail (and edit, via subclass)."""

from __future__ import annotations

from typing import Optional

from ..models import User
from ..routing import InvalidUserId, UserIdResult, ValidUserId, detail_path, parse_user_id
from ..views.users import render_detail_page
from .base import PageController
from .state import PageStatus


class RecordPageController(PageController[User]):
    """Fetches one user named by the route identifier.

    An identifier that does not parse puts the page in the INVALID state
    without touching the network.
    """

    load_error = "Failed to load user details. Please try again."

    def __init__(self, *args, raw_id: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.raw_id = raw_id
        self.user_id: UserIdResult = parse_user_id(raw_id)

    @property
    def user(self) -> Optional[User]:
        return self.state.data

    async def mount(self) -> None:
        if isinstance(self.user_id, InvalidUserId):
            self.state.status = PageStatus.INVALID
            self.state.error = self.user_id.message
            self._changed()
            return
        await self.load()

    async def load(self) -> None:
        user_id = self.user_id
        if not isinstance(user_id, ValidUserId):
            return
        await self._load(lambda: self.client.get_user(user_id.value), self.load_error)

    async def retry(self) -> None:
        await self.load()


class DetailPageController(RecordPageController):
    @property
    def path(self) -> str:
        return detail_path(self.raw_id)

    def render(self) -> str:
        return render_detail_page(
            loading=self.state.loading,
            error=self.state.error,
            can_retry=self.state.can_retry,
            user=self.user,
        )
