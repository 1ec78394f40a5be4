"""Database configuration and connection management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import create_engine, event, pool, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from doutor_agenda.config import settings


def to_async_url(url: str) -> str:
    """Convert a sync PostgreSQL URL to its asyncpg form."""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url.replace("postgresql://", "postgresql+asyncpg://", 1)


def is_sqlite_url(url: str) -> bool:
    """Check whether a connection URL points to SQLite."""
    return url.startswith("sqlite")


def enable_sqlite_foreign_keys(dbapi_conn: Any, connection_record: Any) -> None:
    """Turn on foreign key enforcement for a SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` literally anywhere in a value."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def build_async_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for the given URL with backend-specific options."""
    url = to_async_url(url)

    if is_sqlite_url(url):
        async_engine = create_async_engine(url, **kwargs)
        event.listen(async_engine.sync_engine, "connect", enable_sqlite_foreign_keys)
        return async_engine

    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": settings.app_name,
            },
        },
    }
    options.update(kwargs)
    return create_async_engine(url, **options)


# Create async engine with connection pooling
engine: AsyncEngine = build_async_engine(settings.database_url, echo=settings.debug)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_sync_engine() -> Engine:
    """Create a sync engine for Alembic migrations."""
    url = settings.database_url
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    url = url.replace("+aiosqlite", "").replace("+asyncpg", "")

    sync_engine = create_engine(url, poolclass=pool.NullPool)
    if is_sqlite_url(url):
        event.listen(sync_engine, "connect", enable_sqlite_foreign_keys)
    return sync_engine


async def check_database_connection() -> bool:
    """Check if database connection is healthy."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
