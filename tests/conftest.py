"""Shared fixtures: an in-memory user service behind httpx.MockTransport."""

from __future__ import annotations

import asyncio
import copy
import json
import os
import queue
import re
from typing import Any, Optional

import httpx
import pytest

from user_directory.client import UserDirectoryClient
from user_directory.models import User
from user_directory.notifications import NotificationBus

BASE_URL = "https://users.test"

SAMPLE_USERS: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "Leanne Graham",
        "username": "Bret",
        "email": "Sincere@april.biz",
        "phone": "1-770-736-8031 x56442",
        "website": "hildegard.org",
        "address": {
            "street": "Kulas Light",
            "suite": "Apt. 556",
            "city": "Gwenborough",
            "zipcode": "92998-3874",
            "geo": {"lat": "-37.3159", "lng": "81.1496"},
        },
        "company": {
            "name": "Romaguera-Crona",
            "catchPhrase": "Multi-layered client-server neural-net",
            "bs": "harness real-time e-markets",
        },
    },
    {
        "id": 2,
        "name": "Ervin Howell",
        "username": "Antonette",
        "email": "Shanna@melissa.tv",
        "phone": "010-692-6593 x09125",
        "website": "anastasia.net",
        "address": {
            "street": "Victor Plains",
            "suite": "Suite 879",
            "city": "Wisokyburgh",
            "zipcode": "90566-7771",
            "geo": {"lat": "-43.9509", "lng": "-34.4618"},
        },
        "company": {
            "name": "Deckow-Crist",
            "catchPhrase": "Proactive didactic contingency",
            "bs": "synergize scalable supply-chains",
        },
    },
    {
        "id": 3,
        "name": "Clementine Bauch",
        "username": "Samantha",
        "email": "Nathan@yesenia.net",
        "phone": "1-463-123-4447",
        "website": "ramiro.info",
        "address": {
            "street": "Douglas Extension",
            "suite": "Suite 847",
            "city": "McKenziehaven",
            "zipcode": "59590-4157",
            "geo": {"lat": "-68.6102", "lng": "-47.0653"},
        },
        "company": {
            "name": "Romaguera-Jacobson",
            "catchPhrase": "Face to face bifurcated interface",
            "bs": "e-enable strategic applications",
        },
    },
]

_USER_PATH = re.compile(r"^/users/(\d+)$")


class FakeUserService:
    """In-memory stand-in for the remote REST API.

    Mirrors the demo service: POST answers with id 11 and PUT echoes the
    payload, neither persists. Failures and pauses are injected per
    ``(method, path)``.
    """

    def __init__(self, users: Optional[list[dict[str, Any]]] = None) -> None:
        self.users = {u["id"]: copy.deepcopy(u) for u in (users or SAMPLE_USERS)}
        self.calls: list[tuple[str, str, Any]] = []
        self._failures: dict[tuple[str, str], int] = {}
        self._gates: dict[tuple[str, str], asyncio.Event] = {}

    def fail_on(self, method: str, path: str, status: int = 500) -> None:
        self._failures[(method, path)] = status

    def clear_failures(self) -> None:
        self._failures.clear()

    def gate(self, method: str, path: str) -> asyncio.Event:
        """Hold the next matching request until the returned event is set.

        Must be called from inside the running event loop.
        """
        event = asyncio.Event()
        self._gates[(method, path)] = event
        return event

    def calls_to(self, method: str, path: Optional[str] = None) -> list[tuple[str, str, Any]]:
        return [c for c in self.calls if c[0] == method and (path is None or c[1] == path)]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((method, path, body))

        gate = self._gates.pop((method, path), None)
        if gate is not None:
            await gate.wait()

        status = self._failures.get((method, path))
        if status is not None:
            return httpx.Response(status, json={})

        if path == "/users":
            if method == "GET":
                return httpx.Response(200, json=list(self.users.values()))
            if method == "POST":
                return httpx.Response(201, json={**body, "id": 11})

        m = _USER_PATH.match(path)
        if m:
            user_id = int(m.group(1))
            if method == "GET":
                if user_id not in self.users:
                    return httpx.Response(404, json={})
                return httpx.Response(200, json=self.users[user_id])
            if method == "PUT":
                if user_id not in self.users:
                    return httpx.Response(500, json={})
                return httpx.Response(200, json={**body, "id": user_id})
            if method == "DELETE":
                return httpx.Response(200, json={})

        return httpx.Response(404, json={})


class ToastRecorder:
    """Collects notifications published on a bus."""

    def __init__(self, bus: NotificationBus, channel: Optional[str] = None) -> None:
        self.queue: queue.Queue = queue.Queue()
        self._seen: list[dict[str, Any]] = []
        bus.subscribe(self.queue, channel)

    @property
    def messages(self) -> list[dict[str, Any]]:
        while True:
            try:
                self._seen.append(self.queue.get_nowait())
            except queue.Empty:
                return list(self._seen)

    @property
    def texts(self) -> list[str]:
        return [m["message"] for m in self.messages]


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until *predicate* holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def service():
    return FakeUserService()


@pytest.fixture
def client(service):
    return UserDirectoryClient(base_url=BASE_URL, transport=service.transport())


@pytest.fixture
def bus():
    return NotificationBus(default_duration=4.0)


@pytest.fixture
def toasts(bus):
    return ToastRecorder(bus)


@pytest.fixture
def sample_user():
    return User.from_dict(SAMPLE_USERS[0])


@pytest.fixture
def users():
    return [User.from_dict(u) for u in SAMPLE_USERS]


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep config discovery away from the real home and working directory."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("USER_DIRECTORY_"):
            monkeypatch.delenv(key)
    return work
