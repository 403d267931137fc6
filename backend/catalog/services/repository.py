"""Repository Helpers — point lookups, reloads and conflict-safe commits shared by routes.

Invariants:
    - get_or_404 raises ResourceNotFoundError("<Label> not found") for unknown ids
    - Wishlist lookups are always scoped by owner; another user's entry is "not found"
    - commit_or_conflict turns a store unique-constraint violation into ConflictError
    - reload re-reads a row (and its eager relationships) after a mutation
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.domain_types import BookId, EntityId, UserId, WishlistId
from catalog.core.errors import ConflictError, ResourceNotFoundError
from catalog.models.wishlist import WishlistEntry

logger = logging.getLogger(__name__)


async def find_by_id(db: AsyncSession, model: type, entity_id: EntityId):
    result = await db.execute(select(model).where(model.id == entity_id))
    return result.scalar_one_or_none()


async def get_or_404(
    db: AsyncSession, model: type, entity_id: EntityId, label: str,
):
    entity = await find_by_id(db, model, entity_id)
    if entity is None:
        raise ResourceNotFoundError(label, entity_id)
    return entity


async def reload(db: AsyncSession, model: type, entity_id: EntityId):
    result = await db.execute(
        select(model)
        .where(model.id == entity_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one()


@asynccontextmanager
async def conflict_guard(
    db: AsyncSession, conflict_message: str,
) -> AsyncGenerator[None, None]:
    """Roll back and raise ConflictError when a store constraint fires inside the block."""
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity conflict: {e.orig}")
        raise ConflictError(conflict_message) from e


async def commit_or_conflict(db: AsyncSession, conflict_message: str) -> None:
    """Commit; a unique-constraint race surfaces as ConflictError, not a 500."""
    async with conflict_guard(db, conflict_message):
        await db.commit()


async def find_wishlist_entry(
    db: AsyncSession, user_id: UserId, entry_id: WishlistId,
) -> WishlistEntry | None:
    result = await db.execute(
        select(WishlistEntry)
        .where(WishlistEntry.id == entry_id)
        .where(WishlistEntry.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def find_wishlist_entry_for_book(
    db: AsyncSession, user_id: UserId, book_id: BookId,
) -> WishlistEntry | None:
    result = await db.execute(
        select(WishlistEntry)
        .where(WishlistEntry.user_id == user_id)
        .where(WishlistEntry.book_id == book_id),
    )
    return result.scalar_one_or_none()


async def get_wishlist_entry_or_404(
    db: AsyncSession, user_id: UserId, entry_id: WishlistId,
) -> WishlistEntry:
    entry = await find_wishlist_entry(db, user_id, entry_id)
    if entry is None:
        raise ResourceNotFoundError(
            "Wishlist item", entry_id, message="Wishlist item not found",
        )
    return entry
