"""Fallback page for paths outside the route table."""

from __future__ import annotations

from ..views.layout import render_not_found
from .base import PageController
from .state import PageStatus


class NotFoundPageController(PageController[None]):
    def __init__(self, *args, path: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def mount(self) -> None:
        self.state.status = PageStatus.READY
        self._changed()

    def render(self) -> str:
        return render_not_found(self._path)
