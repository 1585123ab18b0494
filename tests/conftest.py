"""Test fixtures — a fresh app and database per test.

Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite file (aiosqlite) with tables created from
   the ORM metadata, so there is no cross-test pollution and no database
   server to run.
2. The app is built with create_app(settings, database); passing the
   Database in means the lifespan (which httpx's ASGITransport does not
   run) is not needed to wire it up.
3. Clients talk to the app in-process through httpx.ASGITransport. Each
   logged-in user gets its own client so cookie jars never mix.
"""

import uuid
from contextlib import AsyncExitStack

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tasktrack.config import Settings
from tasktrack.db.engine import Database
from tasktrack.main import create_app

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnop"
PASSWORD = "secret1"


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "database_url": "sqlite+aiosqlite://",
        "environment": "test",
        "bcrypt_rounds": 4,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture()
def settings(tmp_path):
    return make_settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest_asyncio.fixture()
async def database(settings):
    db = Database(settings.database_url)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture()
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture()
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def make_client(app):
    """Factory for independent HTTP clients (one cookie jar each)."""
    async with AsyncExitStack() as stack:

        async def _make() -> AsyncClient:
            transport = ASGITransport(app=app)
            return await stack.enter_async_context(
                AsyncClient(transport=transport, base_url="http://test")
            )

        yield _make


@pytest_asyncio.fixture()
async def client(make_client):
    """An anonymous client (no session cookie)."""
    return await make_client()


@pytest_asyncio.fixture()
async def login_as(make_client):
    """Register a fresh user and return a client carrying their session.

    Usage: alice = await login_as("alice")  → client with .user attached
    """

    async def _login(prefix: str = "user") -> AsyncClient:
        c = await make_client()
        r = await c.post(
            "/api/auth/register",
            json={"email": unique_email(prefix), "password": PASSWORD},
        )
        assert r.status_code == 201, r.text
        c.user = r.json()["user"]
        return c

    return _login


@pytest_asyncio.fixture()
async def auth_client(login_as):
    """A client logged in as a freshly registered user."""
    return await login_as("owner")
