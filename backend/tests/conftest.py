"""Root conftest — shared test configuration and in-memory database fixtures."""

import os

# Never reach a real database or pay full bcrypt cost in tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import catalog.models  # noqa: E402,F401
from catalog.db.base import Base  # noqa: E402
from catalog.db.session import create_engine, create_session_factory  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
