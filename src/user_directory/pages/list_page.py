"""List page: all users, client-side search, per-row delete."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..confirm import ConfirmOutcome, confirm_and_run, delete_confirmation_message
from ..models import User
from ..routing import LIST_PATH
from ..views.users import render_list_page
from .base import PageController

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load users. Please try again."


def searchable_fields(user: User) -> tuple[str, ...]:
    """The six fields the search box matches against."""
    return (
        user.name,
        user.email,
        user.username,
        user.phone,
        user.address.city,
        user.company.name,
    )


def filter_users(users: Iterable[User], term: str) -> list[User]:
    """Case-insensitive substring match of *term* across the searchable fields.

    One term, no tokenization; an empty term keeps everything.
    """
    users = list(users)
    if not term:
        return users
    needle = term.lower()
    return [u for u in users if any(needle in value.lower() for value in searchable_fields(u))]


class ListPageController(PageController[list[User]]):
    def __init__(self, *args, search_term: str = "", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.search_term = search_term

    @property
    def path(self) -> str:
        return LIST_PATH

    @property
    def users(self) -> list[User]:
        return self.state.data or []

    @property
    def visible_users(self) -> list[User]:
        return filter_users(self.users, self.search_term)

    async def mount(self) -> None:
        await self.load()

    async def load(self) -> None:
        await self._load(self.client.list_users, LOAD_ERROR)

    async def refresh(self) -> None:
        await self.load()

    async def retry(self) -> None:
        await self.load()

    def search(self, term: str) -> None:
        self.search_term = term
        self._changed()

    def clear_search(self) -> None:
        self.search("")

    def find_user(self, user_id: int) -> Optional[User]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def is_deleting(self, user_id: int) -> bool:
        return user_id in self.state.in_flight

    async def delete_user(self, user_id: int) -> None:
        """Delete one user and drop it from the local list on success.

        While the call is in flight the id sits in ``state.in_flight`` so the
        row's delete control is disabled. Failures propagate to the caller
        and leave the list untouched.
        """
        if user_id in self.state.in_flight:
            logger.debug("Delete for user %d already in flight", user_id)
            return
        self.state.in_flight.add(user_id)
        self._changed()
        try:
            await self.lifetime.guard(self.client.delete_user(user_id))
            remaining = list(self.users)
            for index, user in enumerate(remaining):
                if user.id == user_id:
                    del remaining[index]
                    break
            self.state.data = remaining
        finally:
            if not self.lifetime.cancelled:
                self.state.in_flight.discard(user_id)
                self._changed()

    async def request_delete(self, user_id: int, prompt: Callable[[str], bool]) -> ConfirmOutcome:
        """Confirm, then delete with loading/success/failure toasts."""
        user = self.find_user(user_id)
        if user is None or self.is_deleting(user_id):
            logger.debug("Ignoring delete request for user %d", user_id)
            return ConfirmOutcome.DECLINED
        return await confirm_and_run(
            prompt,
            delete_confirmation_message(user),
            lambda: self.delete_user(user_id),
            self.bus,
            channel=self.channel,
        )

    def render(self) -> str:
        return render_list_page(
            loading=self.state.loading,
            error=self.state.error,
            users=self.users,
            visible_users=self.visible_users,
            search_term=self.search_term,
            deleting_ids=self.state.in_flight,
        )
