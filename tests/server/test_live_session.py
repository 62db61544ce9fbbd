"""Tests for LiveSession intent dispatch and output."""

import pytest

from user_directory.pages import (
    CreatePageController,
    DetailPageController,
    ListPageController,
    NotFoundPageController,
)
from user_directory.server import LiveSession

from conftest import wait_until


def drain(session):
    messages = []
    while not session.outbox.empty():
        messages.append(session.outbox.get_nowait())
    return messages


def renders(messages):
    return [m for m in messages if m["type"] == "render"]


@pytest.fixture
def session(client, bus):
    live = LiveSession(client, bus, session_id="s1")
    live.open()
    yield live
    live.close()


class TestLifecycle:
    """Test open/close against the bus."""

    def test_open_subscribes_and_close_unsubscribes(self, client, bus):
        live = LiveSession(client, bus)
        live.open()
        live.open()
        assert bus.subscriber_count == 1
        live.close()
        live.close()
        assert bus.subscriber_count == 0
        assert not live.is_open

    @pytest.mark.asyncio
    async def test_close_unmounts_page(self, session):
        page = session.navigate("/")
        session.close()
        await page.lifetime.join()
        assert not page.mounted
        assert session.controller is None


class TestNavigation:
    """Test mounting pages by path."""

    @pytest.mark.asyncio
    async def test_navigate_renders_list(self, session):
        page = session.navigate("/")
        assert isinstance(page, ListPageController)
        await page.lifetime.join()

        messages = drain(session)
        assert messages[0] == {"type": "location", "path": "/"}
        last = renders(messages)[-1]
        assert last["path"] == "/"
        assert "Leanne Graham" in last["html"]
        assert "User Management System" in last["html"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path,kind",
        [
            ("/create", CreatePageController),
            ("/user/2", DetailPageController),
            ("/nowhere", NotFoundPageController),
        ],
    )
    async def test_route_table(self, session, path, kind):
        page = session.navigate(path)
        await page.lifetime.join()
        assert isinstance(page, kind)

    @pytest.mark.asyncio
    async def test_navigation_unmounts_previous_page(self, session, service):
        gate = service.gate("GET", "/users")
        first = session.navigate("/")
        second = session.navigate("/user/1")
        gate.set()
        await first.lifetime.join()
        await second.lifetime.join()

        assert not first.mounted
        assert first.state.data is None
        # The abandoned list page never renders its table
        assert not any(
            m["path"] == "/" and "Users Database" in m["html"] for m in renders(drain(session))
        )


class TestIntents:
    """Test intent dispatch."""

    @pytest.mark.asyncio
    async def test_search(self, session):
        page = session.navigate("/")
        await page.lifetime.join()
        drain(session)

        session.handle({"type": "search", "term": "ervin"})

        (render,) = renders(drain(session))
        assert "Found <strong>1</strong> of <strong>3</strong> users" in render["html"]

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, session):
        page = session.navigate("/")
        await page.lifetime.join()
        drain(session)

        session.handle({"type": "delete", "id": 1, "confirmed": True})
        await page.lifetime.join()

        messages = drain(session)
        toasts = [m for m in messages if m["type"] == "toast"]
        assert [t["message"] for t in toasts] == [
            "Deleting user...",
            "User deleted successfully!",
        ]
        assert "Leanne Graham" not in renders(messages)[-1]["html"]

    @pytest.mark.asyncio
    async def test_declined_delete(self, session, service):
        page = session.navigate("/")
        await page.lifetime.join()
        session.handle({"type": "delete", "id": 1, "confirmed": False})
        await page.lifetime.join()
        assert service.calls_to("DELETE") == []

    @pytest.mark.asyncio
    async def test_submit_then_navigates_home(self, session, service):
        page = session.navigate("/create")
        await page.lifetime.join()
        drain(session)

        session.handle(
            {
                "type": "submit",
                "form": {
                    "name": "Ada",
                    "username": "ada",
                    "email": "ada@x.io",
                    "phone": "555",
                    "website": "",
                },
            }
        )
        await page.lifetime.join()
        home = session.controller
        assert isinstance(home, ListPageController)
        await home.lifetime.join()

        messages = drain(session)
        assert {"type": "location", "path": "/"} in messages
        assert any(
            m["type"] == "toast" and m["message"] == "User created successfully!"
            for m in messages
        )
        assert len(service.calls_to("POST")) == 1

    @pytest.mark.asyncio
    async def test_retry(self, session, service):
        service.fail_on("GET", "/users/1")
        page = session.navigate("/user/1")
        await page.lifetime.join()
        service.clear_failures()

        session.handle({"type": "retry"})
        await page.lifetime.join()
        assert page.user.name == "Leanne Graham"

    @pytest.mark.asyncio
    async def test_intent_for_another_page_is_ignored(self, session, service):
        page = session.navigate("/create")
        await page.lifetime.join()
        session.handle({"type": "delete", "id": 1, "confirmed": True})
        session.handle({"type": "search", "term": "x"})
        session.handle({"type": "refresh"})
        await page.lifetime.join()
        assert service.calls == []

    def test_intent_before_navigation_is_ignored(self, session):
        session.handle({"type": "search", "term": "x"})
        assert session.outbox.empty()

    @pytest.mark.parametrize(
        "message",
        [
            "navigate",
            {"type": "teleport"},
            {"type": "navigate", "path": "relative"},
            {"type": "delete", "id": "1", "confirmed": True},
            {"type": "delete", "id": True},
            {"type": "submit", "form": []},
            {"type": "search", "term": 3},
        ],
    )
    def test_malformed_messages(self, client, bus, message):
        live = LiveSession(client, bus)
        live.controller = object()  # handlers only run once something is mounted
        with pytest.raises(ValueError):
            live.handle(message)


class TestInterruptedDelete:
    """Navigating away mid-delete settles the loading toast."""

    @pytest.mark.asyncio
    async def test_navigation_replaces_deleting_toast(self, session, service):
        page = session.navigate("/")
        await page.lifetime.join()
        drain(session)
        gate = service.gate("DELETE", "/users/1")

        session.handle({"type": "delete", "id": 1, "confirmed": True})
        await wait_until(lambda: service.calls_to("DELETE", "/users/1"))
        detail = session.navigate("/user/2")
        gate.set()
        await page.lifetime.join()
        await detail.lifetime.join()

        toasts = [m for m in drain(session) if m["type"] == "toast"]
        loading, settled = toasts
        assert loading["message"] == "Deleting user..."
        assert settled["id"] == loading["id"]
        assert settled["kind"] == "error"
        assert settled["message"] == (
            "Delete interrupted. Refresh the list to check whether the user was removed."
        )


class TestToastChannels:
    """Toasts reach only the session that caused them."""

    @pytest.mark.asyncio
    async def test_other_session_sees_nothing(self, client, bus, session):
        other = LiveSession(client, bus, session_id="s2")
        other.open()
        try:
            page = session.navigate("/")
            await page.lifetime.join()
            session.handle({"type": "delete", "id": 2, "confirmed": True})
            await page.lifetime.join()
            assert any(m["type"] == "toast" for m in drain(session))
            assert other.outbox.empty()
        finally:
            other.close()
