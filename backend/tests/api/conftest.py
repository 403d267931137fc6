"""API test fixtures — async DB, FastAPI test client, and seeded users with tokens.

Invariants:
    - Every test gets a fresh in-memory SQLite database (root conftest)
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness check sees the test engine
    - admin/member fixtures carry a live bearer token in ready-to-send headers
"""

import pytest
from httpx import ASGITransport, AsyncClient

import catalog.infrastructure.database as db_module
from catalog.core.domain_types import UserRole
from catalog.infrastructure.database import DatabaseSessionManager, get_db
from catalog.infrastructure.security import hash_password
from catalog.main import app
from catalog.models.book import Book
from catalog.models.category import Category
from catalog.models.user import User
from catalog.services.token_service import issue_token

PASSWORD = "secret-password"


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _make_user(test_db, email: str, role: UserRole, is_active=True):
    user = User(
        name=email.split("@")[0].title(),
        email=email,
        password=hash_password(PASSWORD),
        role=role.value,
        is_active=is_active,
    )
    test_db.add(user)
    await test_db.flush()
    plaintext, _ = await issue_token(test_db, user)
    await test_db.commit()
    return user, {"Authorization": f"Bearer {plaintext}"}


@pytest.fixture
async def admin(test_db):
    """(User, headers) for an administrator."""
    return await _make_user(test_db, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def member(test_db):
    """(User, headers) for a plain member."""
    return await _make_user(test_db, "member@example.com", UserRole.MEMBER)


@pytest.fixture
async def other_member(test_db):
    return await _make_user(test_db, "other@example.com", UserRole.MEMBER)


@pytest.fixture
async def make_user(test_db):
    async def factory(email: str, role: UserRole = UserRole.MEMBER, is_active=True):
        return await _make_user(test_db, email, role, is_active=is_active)
    return factory


@pytest.fixture
async def category(test_db):
    cat = Category(name="Fiction")
    test_db.add(cat)
    await test_db.commit()
    return cat


@pytest.fixture
async def make_book(test_db):
    """Insert a book directly; returns the Book row."""
    async def factory(title="Dune", author="Frank Herbert", category_id=None, **kw):
        book = Book(title=title, author=author, category_id=category_id, **kw)
        test_db.add(book)
        await test_db.commit()
        return book
    return factory
