"""Create and edit pages: a form, a submitting flag, toast, navigate home."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from ..exceptions import RemoteOperationError
from ..models import FIELD_LABELS, CreateUserData, User
from ..routing import CREATE_PATH, LIST_PATH, edit_path
from ..views.users import render_create_page, render_edit_page
from .base import PageController
from .detail_page import RecordPageController
from .state import PageStatus

logger = logging.getLogger(__name__)


class FormSubmitMixin:
    """Shared submit flow for pages that hold a :class:`CreateUserData` form."""

    form: CreateUserData
    success_message: str
    error_message: str

    async def _submit(
        self: PageController,
        form: CreateUserData,
        send: Callable[[CreateUserData], Awaitable[User]],
    ) -> bool:
        if self.state.submitting:
            logger.debug("Submit ignored: already submitting")
            return False
        self.form = form

        missing = form.missing_required()
        if missing:
            labels = ", ".join(FIELD_LABELS[name] for name in missing)
            self.bus.error(f"Please fill in the required fields: {labels}.", self.channel)
            self._changed()
            return False

        self.state.submitting = True
        self._changed()
        try:
            await self.lifetime.guard(send(form))
            self.bus.success(self.success_message, self.channel)
            self.navigate(LIST_PATH)
            return True
        except RemoteOperationError as exc:
            logger.info("Submit failed: %s", exc)
            self.bus.error(self.error_message, self.channel)
            return False
        finally:
            if not self.lifetime.cancelled:
                self.state.submitting = False
                self._changed()


class CreatePageController(FormSubmitMixin, PageController[None]):
    """No fetch; the created record only shows up on the next list load."""

    success_message = "User created successfully!"
    error_message = "Failed to create user. Please try again."

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.form = CreateUserData()

    @property
    def path(self) -> str:
        return CREATE_PATH

    async def mount(self) -> None:
        self.state.status = PageStatus.READY
        self._changed()

    async def submit(self, form: CreateUserData) -> bool:
        return await self._submit(form, self.client.create_user)

    def render(self) -> str:
        return render_create_page(form=self.form, submitting=self.state.submitting)


class EditPageController(FormSubmitMixin, RecordPageController):
    """Loads the record like the detail page, then edits it in place."""

    load_error = "Failed to load user data. Please try again."
    success_message = "User updated successfully!"
    error_message = "Failed to update user. Please try again."

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.form = CreateUserData()

    @property
    def path(self) -> str:
        return edit_path(self.raw_id)

    def _loaded(self, data: User) -> None:
        self.form = CreateUserData.from_user(data)

    async def submit(self, form: CreateUserData) -> bool:
        user = self.user
        if user is None:
            logger.debug("Submit ignored: user not loaded")
            return False
        return await self._submit(form, lambda data: self.client.update_user(user.id, data))

    def render(self) -> str:
        return render_edit_page(
            loading=self.state.loading,
            error=self.state.error,
            can_retry=self.state.can_retry,
            user=self.user,
            form=self.form,
            submitting=self.state.submitting,
        )
