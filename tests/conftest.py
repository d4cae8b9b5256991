"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own sqlite+aiosqlite in-memory engine. engine_options()
   gives it a StaticPool: every session shares one connection and one DB.
2. The app's get_db is overridden to open a new session per request,
   exactly like production, so no ORM state leaks between requests.
3. Auth is NOT mocked: tests register users and send real tokens.

Env vars are set before any devconnect import so Settings picks them up
(cheap bcrypt rounds, a fixed signing secret, no startup DDL).
"""

import os

os.environ.setdefault("DEVCONNECT_BCRYPT_ROUNDS", "4")
os.environ.setdefault(
    "DEVCONNECT_JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256"
)
os.environ.setdefault("DEVCONNECT_CREATE_TABLES", "false")

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from devconnect.db.engine import engine_options, get_db
from devconnect.db.models import Base
from devconnect.main import app


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture()
async def session_factory():
    """Per-test engine with the schema created from the ORM models."""
    engine = create_async_engine(TEST_DB_URL, **engine_options(TEST_DB_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for service-level tests that skip HTTP."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def register(client):
    """Factory: register a user, return auth headers carrying its token.

    Usage: headers = await register(email="a@x.com", password="secret1")
    """

    async def _register(
        name: str = "Test User",
        email: str | None = None,
        password: str = "secret1",
    ) -> dict:
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert r.status_code == 200, r.text
        return {"x-auth-token": r.json()["token"]}

    return _register
