"""Book Routes — public reads, authenticated mutations, filter and search listings.

Invariants:
    - Reads are public; create/update/delete need a valid bearer token
    - /filter and /search are declared before /{book_id} so they are never read as ids
    - Update looks the book up (404) before validating the body (422)
    - GET /{book_id} adds in_wishlist/wishlist_notes only for an authenticated caller
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.auth import get_current_user, get_optional_user
from catalog.api.params import (
    PageParams, SortParams, page_params, parse_payload, sort_params,
)
from catalog.core.validation import ForeignKeyExists
from catalog.infrastructure.database import get_db
from catalog.models.book import Book
from catalog.models.category import Category
from catalog.models.user import User
from catalog.schemas.book import (
    BookCreate, BookDetailResponse, BookResponse, BookUpdate,
)
from catalog.schemas.common import MessageResponse, Page, build_page
from catalog.services.query_composer import (
    BOOK_FILTERS, apply_filters, apply_search, apply_sort, paginate,
)
from catalog.services.repository import (
    commit_or_conflict, find_wishlist_entry_for_book, get_or_404, reload,
)
from catalog.services.store_rules import check_store_rules

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["books"])

BOOK_RULES = [ForeignKeyExists("category_id", Category)]


@router.get("", response_model=list[BookResponse])
async def list_books(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Book).order_by(Book.created_at.desc(), Book.id.asc()),
    )
    return [BookResponse.model_validate(b) for b in result.scalars().all()]


@router.get("/filter", response_model=Page[BookResponse])
async def filter_books(
    title: str | None = Query(None),
    author: str | None = Query(None),
    category_id: str | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    sort: SortParams = Depends(sort_params),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    """Filter mode: every supplied key narrows the result."""
    filters = {
        "title": title, "author": author, "category_id": category_id,
        "start_date": start_date, "end_date": end_date,
    }
    query = apply_filters(select(Book), Book, filters, BOOK_FILTERS)
    query = apply_sort(query, Book, sort.sort_by, sort.sort_order, BOOK_FILTERS)
    rows, window = await paginate(db, query, paging.page, paging.per_page)
    return build_page(BookResponse, rows, window)


@router.get("/search", response_model=Page[BookResponse])
async def search_books(
    q: str = Query(..., min_length=1),
    sort: SortParams = Depends(sort_params),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    """Search mode: one term matched against title or author."""
    query = apply_search(select(Book), Book, q, BOOK_FILTERS)
    query = apply_sort(query, Book, sort.sort_by, sort.sort_order, BOOK_FILTERS)
    rows, window = await paginate(db, query, paging.page, paging.per_page)
    return build_page(BookResponse, rows, window)


@router.get("/{book_id}", response_model=None)
async def get_book(
    book_id: str,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> BookResponse | BookDetailResponse:
    book = await get_or_404(db, Book, book_id, "Book")
    base = BookResponse.model_validate(book)
    if user is None:
        return base
    entry = await find_wishlist_entry_for_book(db, user.id, book.id)
    return BookDetailResponse(
        **base.model_dump(),
        in_wishlist=entry is not None,
        wishlist_notes=entry.notes if entry else None,
    )


@router.post(
    "", response_model=BookResponse, status_code=status.HTTP_201_CREATED,
)
async def create_book(
    body: BookCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = body.model_dump()
    await check_store_rules(db, BOOK_RULES, data)
    book = Book(**data)
    db.add(book)
    await commit_or_conflict(db, "Book could not be created")
    logger.info(
        "Book created", extra={"user_id": user.id, "entity": "book", "entity_id": book.id},
    )
    return BookResponse.model_validate(await reload(db, Book, book.id))


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str,
    payload: Any = Body(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    book = await get_or_404(db, Book, book_id, "Book")
    changes = parse_payload(BookUpdate, payload).model_dump(exclude_unset=True)
    await check_store_rules(db, BOOK_RULES, changes)
    for field, value in changes.items():
        setattr(book, field, value)
    await commit_or_conflict(db, "Book could not be updated")
    logger.info(
        "Book updated", extra={"user_id": user.id, "entity": "book", "entity_id": book_id},
    )
    return BookResponse.model_validate(await reload(db, Book, book_id))


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    book = await get_or_404(db, Book, book_id, "Book")
    await db.delete(book)
    await db.commit()
    logger.info(
        "Book deleted", extra={"user_id": user.id, "entity": "book", "entity_id": book_id},
    )
    return MessageResponse(message="Book deleted successfully")
