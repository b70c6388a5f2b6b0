"""Root conftest — shared test configuration and database/app fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test database
    - db_manager patched so readiness probes see the test engine
    - Environment defaults set before userdesk is imported (settings are cached)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Fake DatabaseSessionManager built with __new__: reuses the real
      session() rollback logic without creating a second engine
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("STATIC_DIR", "does-not-exist")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from userdesk.db.base import Base
from userdesk.infrastructure.database import get_db, DatabaseSessionManager
import userdesk.infrastructure.database as db_module
import userdesk.models  # noqa: F401
from userdesk.main import app
from userdesk.models.user import User

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def fake_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine, installed as db_manager."""
    original_manager = db_module.db_manager
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    db_module.db_manager = manager
    yield manager
    db_module.db_manager = original_manager


@pytest.fixture
async def client(fake_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
async def seed_user(test_db):
    """Insert one user directly into the test DB."""
    user = User(name="Ada Lovelace", email="ada@x.com", phone="555")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def create_user(client):
    """POST a user through the API and return the JSON body."""
    async def _create(name="Ada", email="ada@x.com", phone="555", **extra):
        res = await client.post(
            "/api/users",
            json={"name": name, "email": email, "phone": phone, **extra},
        )
        assert res.status_code == 201, res.text
        return res.json()

    return _create
