"""UserDesk API Client — typed async wrapper over the users REST API.

Invariants:
    - Every non-2xx response raises UserDeskClientError carrying the server's
      error code and message (falls back to "Request failed: <status>")
    - Query parameters that are None are omitted from the query string
    - Responses are parsed into the same pydantic records the server emits

Design Decisions:
    - httpx.AsyncClient owned by the wrapper unless one is injected
      (tests inject an ASGITransport-backed client)
    - base_url defaults from USERDESK_API_BASE, else http://localhost:3000/api
"""

import os
from typing import Any

import httpx

from userdesk.schemas.user import (
    DeleteUserResponse,
    NukeUsersResponse,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

DEFAULT_API_BASE = "http://localhost:3000/api"


def default_api_base() -> str:
    return os.environ.get("USERDESK_API_BASE", "").strip() or DEFAULT_API_BASE


class UserDeskClientError(Exception):
    """The API answered with an error status."""

    def __init__(self, status_code: int, message: str, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


def _error_from_response(response: httpx.Response) -> UserDeskClientError:
    fallback = f"Request failed: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return UserDeskClientError(response.status_code, fallback)
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return UserDeskClientError(
            response.status_code,
            error.get("message") or fallback,
            error.get("code"),
        )
    if isinstance(error, str):
        return UserDeskClientError(response.status_code, error)
    return UserDeskClientError(response.status_code, fallback)


class UserDeskClient:
    """Async client for the users API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        admin_token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or default_api_base()).rstrip("/")
        self.admin_token = admin_token
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "UserDeskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._http.request(
            method,
            f"{self.base_url}{path}",
            params={k: v for k, v in (params or {}).items() if v is not None},
            json=json,
            headers=headers,
        )
        if response.is_error:
            raise _error_from_response(response)
        return response.json()

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def list_users(
        self,
        search: str | None = None,
        role: str | None = None,
        is_active: bool | None = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> UserListResponse:
        params = {
            "search": search,
            "role": role,
            "isActive": None if is_active is None else str(is_active).lower(),
            "skip": skip,
            "take": take,
        }
        data = await self._request("GET", "/users", params=params)
        return UserListResponse.model_validate(data)

    async def get_user(self, user_id: str) -> UserResponse:
        data = await self._request("GET", f"/users/{user_id}")
        return UserResponse.model_validate(data)

    async def create_user(self, body: UserCreate) -> UserResponse:
        data = await self._request(
            "POST", "/users", json=body.model_dump(mode="json", by_alias=True),
        )
        return UserResponse.model_validate(data)

    async def update_user(self, user_id: str, body: UserUpdate) -> UserResponse:
        """Send only the fields set on body (absent fields stay untouched)."""
        payload = body.model_dump(
            mode="json", by_alias=True, exclude_unset=True,
        )
        data = await self._request("PUT", f"/users/{user_id}", json=payload)
        return UserResponse.model_validate(data)

    async def delete_user(self, user_id: str) -> DeleteUserResponse:
        data = await self._request("DELETE", f"/users/{user_id}")
        return DeleteUserResponse.model_validate(data)

    async def nuke_users(self) -> NukeUsersResponse:
        headers = {"X-Admin-Token": self.admin_token} if self.admin_token else None
        data = await self._request("DELETE", "/users/nuke", headers=headers)
        return NukeUsersResponse.model_validate(data)
