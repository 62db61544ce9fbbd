"""HTTP client for the remote user directory service.

This is the only place that talks to the network. Each operation either
returns parsed records or raises :class:`RemoteOperationError` naming the
action; the cause is logged and chained but never surfaced to callers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import DEFAULT_API_BASE_URL
from .exceptions import RemoteOperationError
from .models import CreateUserData, User

logger = logging.getLogger(__name__)


class UserDirectoryClient:
    """Async client for the five user operations.

    No retries and no request cancellation; the timeout is httpx's default
    unless *timeout* is given. Pass *transport* to route requests somewhere
    other than the network (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            **kwargs,
        )

    async def __aenter__(self) -> UserDirectoryClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Operations ──────────────────────────────────────────────────

    async def list_users(self) -> list[User]:
        action = "fetch users"
        data = await self._request("GET", "/users", action)
        if not isinstance(data, list):
            raise RemoteOperationError(action, reason="expected a list of users")
        return [self._parse_user(item, action) for item in data]

    async def get_user(self, user_id: int) -> User:
        action = f"fetch user with ID {user_id}"
        data = await self._request("GET", f"/users/{user_id}", action)
        return self._parse_user(data, action)

    async def create_user(self, user_data: CreateUserData) -> User:
        action = "create user"
        data = await self._request("POST", "/users", action, payload=user_data.to_payload())
        return self._parse_user(data, action)

    async def update_user(self, user_id: int, user_data: CreateUserData) -> User:
        """Send the whole form with PUT.

        The service's merge-vs-replace behaviour is undocumented, so every
        form field is sent and the update is treated as a full replace.
        """
        action = f"update user with ID {user_id}"
        data = await self._request(
            "PUT", f"/users/{user_id}", action, payload=user_data.to_payload()
        )
        return self._parse_user(data, action)

    async def delete_user(self, user_id: int) -> None:
        await self._request("DELETE", f"/users/{user_id}", f"delete user with ID {user_id}")

    # ── Private helpers ─────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, json=payload)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise RemoteOperationError(action, reason=type(exc).__name__) from exc

    @staticmethod
    def _parse_user(data: Any, action: str) -> User:
        if not isinstance(data, dict):
            raise RemoteOperationError(action, reason="expected a user object")
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed user record for %r: %s", action, exc)
            raise RemoteOperationError(action, reason="malformed user record") from exc
