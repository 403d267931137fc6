"""Async Engine Factory — builds engines and session factories outside FastAPI too.

Invariants:
    - SQLite engines enforce foreign keys (ON DELETE CASCADE / SET NULL behave as on PostgreSQL)
    - Sessions never expire attributes on commit (no lazy reloads in async code)

Design Decisions:
    - Shared by DatabaseSessionManager and test fixtures so both get identical engines
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite connections get PRAGMA foreign_keys=ON."""
    engine = create_async_engine(database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
