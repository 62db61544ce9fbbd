"""Per-page state: status flag, data, error message, in-flight ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class PageStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    # The route identifier did not parse; nothing was fetched
    INVALID = "invalid"


@dataclass
class PageState(Generic[T]):
    status: PageStatus = PageStatus.IDLE
    data: Optional[T] = None
    error: Optional[str] = None
    in_flight: set[int] = field(default_factory=set)
    submitting: bool = False

    @property
    def loading(self) -> bool:
        return self.status in (PageStatus.IDLE, PageStatus.LOADING)

    @property
    def can_retry(self) -> bool:
        return self.status is PageStatus.ERROR
