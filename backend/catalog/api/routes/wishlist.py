"""Wishlist Routes — the caller's own saved books with optional notes.

Invariants:
    - Every query is scoped to the authenticated caller; another user's entry is a 404
    - A (user, book) pair is stored at most once: the pre-check and the unique
      constraint both answer 400 "Book is already in your wishlist"
    - A book deleted between the lookup and the insert answers 404, not 400
    - Entries are returned with their book and the book's category embedded
    - /check/{book_id} never errors; an unknown book is simply not in the wishlist
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.auth import get_current_user
from catalog.api.params import parse_payload
from catalog.core.errors import ConflictError
from catalog.infrastructure.database import get_db
from catalog.models.book import Book
from catalog.models.user import User
from catalog.models.wishlist import WishlistEntry
from catalog.schemas.common import MessageResponse
from catalog.schemas.wishlist import (
    WishlistCheckResponse, WishlistCreate, WishlistEntryResponse, WishlistUpdate,
)
from catalog.services.repository import (
    commit_or_conflict, find_wishlist_entry_for_book, get_or_404,
    get_wishlist_entry_or_404, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/wishlist", tags=["wishlist"])

ALREADY_LISTED = "Book is already in your wishlist"


@router.get("", response_model=list[WishlistEntryResponse])
async def list_wishlist(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(WishlistEntry)
        .where(WishlistEntry.user_id == user.id)
        .order_by(WishlistEntry.created_at.desc(), WishlistEntry.id.asc()),
    )
    return [
        WishlistEntryResponse.model_validate(e) for e in result.scalars().all()
    ]


@router.post(
    "", response_model=WishlistEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_wishlist(
    body: WishlistCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user_id = user.id
    await get_or_404(db, Book, body.book_id, "Book")
    if await find_wishlist_entry_for_book(db, user_id, body.book_id):
        raise ConflictError(ALREADY_LISTED)
    entry = WishlistEntry(user_id=user_id, book_id=body.book_id, notes=body.notes)
    db.add(entry)
    try:
        await commit_or_conflict(db, ALREADY_LISTED)
    except ConflictError:
        # The book may have been deleted since the lookup above
        await get_or_404(db, Book, body.book_id, "Book")
        raise
    logger.info(
        "Book added to wishlist",
        extra={"user_id": user_id, "entity": "book", "entity_id": body.book_id},
    )
    return WishlistEntryResponse.model_validate(
        await reload(db, WishlistEntry, entry.id),
    )


@router.get("/check/{book_id}", response_model=WishlistCheckResponse)
async def check_wishlist(
    book_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await find_wishlist_entry_for_book(db, user.id, book_id)
    return WishlistCheckResponse(
        in_wishlist=entry is not None,
        wishlist_item=(
            WishlistEntryResponse.model_validate(entry) if entry else None
        ),
    )


@router.get("/{entry_id}", response_model=WishlistEntryResponse)
async def get_wishlist_entry(
    entry_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return WishlistEntryResponse.model_validate(
        await get_wishlist_entry_or_404(db, user.id, entry_id),
    )


@router.put("/{entry_id}", response_model=WishlistEntryResponse)
async def update_wishlist_entry(
    entry_id: str,
    payload: Any = Body(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await get_wishlist_entry_or_404(db, user.id, entry_id)
    changes = parse_payload(WishlistUpdate, payload).model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(entry, field, value)
    await db.commit()
    return WishlistEntryResponse.model_validate(
        await reload(db, WishlistEntry, entry_id),
    )


@router.delete("/{entry_id}", response_model=MessageResponse)
async def remove_from_wishlist(
    entry_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await get_wishlist_entry_or_404(db, user.id, entry_id)
    await db.delete(entry)
    await db.commit()
    logger.info(
        "Book removed from wishlist",
        extra={"user_id": user.id, "entity": "wishlist", "entity_id": entry_id},
    )
    return MessageResponse(message="Book removed from wishlist successfully")
