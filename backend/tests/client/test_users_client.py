"""UserDeskClient — typed client driven against the ASGI app in-process."""

import pytest
from httpx import ASGITransport, AsyncClient

from userdesk.client import UserDeskClient, UserDeskClientError, default_api_base
from userdesk.main import app
from userdesk.schemas.user import UserCreate, UserUpdate


@pytest.fixture
async def api(client, admin_headers):
    """Client sharing the overridden app; client fixture installs the test DB."""
    http = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    async with UserDeskClient(
        base_url="http://test/api", admin_token=admin_headers["X-Admin-Token"], http_client=http,
    ) as c:
        yield c
    await http.aclose()


async def test_full_lifecycle(api):
    created = await api.create_user(
        UserCreate(name="Ada", email="ada@x.com", phone="555"),
    )
    assert created.role.value == "USER"
    assert created.is_active is True

    fetched = await api.get_user(created.id)
    assert fetched == created

    updated = await api.update_user(created.id, UserUpdate(is_active=False))
    assert updated.is_active is False
    assert updated.name == "Ada"

    page = await api.list_users(is_active=False)
    assert page.total == 1
    assert page.data[0].id == created.id

    deleted = await api.delete_user(created.id)
    assert deleted.deleted_user.id == created.id


async def test_errors_carry_server_message(api):
    await api.create_user(UserCreate(name="Ada", email="ada@x.com", phone="555"))
    with pytest.raises(UserDeskClientError) as exc_info:
        await api.create_user(UserCreate(name="Ada", email="ada@x.com", phone="555"))
    assert exc_info.value.status_code == 409
    assert exc_info.value.code == "EMAIL_CONFLICT"
    assert exc_info.value.message == "User with this email already exists"


async def test_not_found_raises(api):
    with pytest.raises(UserDeskClientError) as exc_info:
        await api.get_user("missing")
    assert exc_info.value.status_code == 404


async def test_nuke_and_health(api):
    await api.create_user(UserCreate(name="A", email="a@x.com", phone="1"))
    result = await api.nuke_users()
    assert result.cleared_count == 1
    assert (await api.list_users()).total == 0
    assert await api.health() == {"status": "ok"}


async def test_nuke_without_token_raises_401(client):
    http = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    async with UserDeskClient(base_url="http://test/api", http_client=http) as c:
        with pytest.raises(UserDeskClientError) as exc_info:
            await c.nuke_users()
    await http.aclose()
    assert exc_info.value.status_code == 401


def test_default_api_base(monkeypatch):
    monkeypatch.delenv("USERDESK_API_BASE", raising=False)
    assert default_api_base() == "http://localhost:3000/api"
    monkeypatch.setenv("USERDESK_API_BASE", "https://users.example/api")
    assert default_api_base() == "https://users.example/api"
