"""Route table and route-parameter parsing.

Identifiers arrive from the URL as text. They are parsed explicitly into a
typed result so pages can show a dedicated invalid-identifier state instead
of converting blindly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union
from urllib.parse import urlsplit

LIST_PATH = "/"
CREATE_PATH = "/create"

_ROUTES: list[tuple[str, re.Pattern[str]]] = [
    ("list", re.compile(r"^/$")),
    ("create", re.compile(r"^/create/?$")),
    ("edit", re.compile(r"^/edit/(?P<id>[^/]+)/?$")),
    ("detail", re.compile(r"^/user/(?P<id>[^/]+)/?$")),
]

_DIGITS = re.compile(r"^[0-9]+$")


def detail_path(user_id: int | str) -> str:
    return f"/user/{user_id}"


def edit_path(user_id: int | str) -> str:
    return f"/edit/{user_id}"


@dataclass(frozen=True)
class RouteMatch:
    """A resolved route: its name and the raw text of its parameters."""

    name: str
    path: str
    params: dict[str, str] = field(default_factory=dict)


def match_route(path: str) -> RouteMatch | None:
    """Resolve *path* (query string ignored) to a route, or None."""
    clean = urlsplit(path).path or LIST_PATH
    for name, pattern in _ROUTES:
        m = pattern.match(clean)
        if m:
            return RouteMatch(name=name, path=clean, params=m.groupdict())
    return None


@dataclass(frozen=True)
class ValidUserId:
    value: int


@dataclass(frozen=True)
class InvalidUserId:
    raw: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid user identifier '{self.raw}': {self.reason}."


UserIdResult = Union[ValidUserId, InvalidUserId]


def parse_user_id(raw: str) -> UserIdResult:
    """Parse a route identifier. Only positive decimal integers are valid."""
    text = raw.strip()
    if not text:
        return InvalidUserId(raw=raw, reason="identifier is empty")
    if not _DIGITS.match(text):
        return InvalidUserId(raw=raw, reason="identifier must be a whole number")
    value = int(text)
    if value < 1:
        return InvalidUserId(raw=raw, reason="identifier must be positive")
    return ValidUserId(value=value)
