"""Async SQLAlchemy engine and session factory.

Learn: PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local
runs and tests. The two want different pool settings: a queue pool with
pre-ping for the server database, a single shared connection for an
in-memory SQLite database (every new connection would be a new, empty DB).
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from devconnect.config import settings
from devconnect.db.models import Base


def engine_options(url: str) -> dict:
    """Pool arguments for create_async_engine, chosen by database backend."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options = {"connect_args": {"check_same_thread": False}}
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_size": 5, "max_overflow": 15, "pool_pre_ping": True}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **engine_options(settings.database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_tables() -> None:
    """Create any missing tables (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncSession:
    """One session per request; the context manager closes it."""
    async with async_session_factory() as session:
        yield session
