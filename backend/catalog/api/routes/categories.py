"""Category Routes — public reads, admin-only mutations, filter listing with book counts.

Invariants:
    - Create/update/delete require the admin role (403 for everyone else)
    - Deleting a category keeps its books; their category_id becomes NULL
    - Each row of /filter carries books_count, computed in the same SELECT
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.auth import require_admin
from catalog.api.params import (
    PageParams, SortParams, page_params, parse_payload, sort_params,
)
from catalog.infrastructure.database import get_db
from catalog.models.book import Book
from catalog.models.category import Category
from catalog.models.user import User
from catalog.schemas.book import BookResponse
from catalog.schemas.category import (
    CategoryCreate, CategoryResponse, CategoryUpdate, CategoryWithCountResponse,
)
from catalog.schemas.common import MessageResponse, Page
from catalog.services.query_composer import (
    CATEGORY_FILTERS, apply_filters, apply_sort, paginate,
)
from catalog.services.repository import commit_or_conflict, get_or_404, reload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/categories", tags=["categories"])


def _books_count():
    return (
        select(func.count(Book.id))
        .where(Book.category_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
        .label("books_count")
    )


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Category).order_by(Category.created_at.desc(), Category.id.asc()),
    )
    return [CategoryResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/filter", response_model=Page[CategoryWithCountResponse])
async def filter_categories(
    name: str | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    sort: SortParams = Depends(sort_params),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    filters = {"name": name, "start_date": start_date, "end_date": end_date}
    query = apply_filters(
        select(Category, _books_count()), Category, filters, CATEGORY_FILTERS,
    )
    query = apply_sort(
        query, Category, sort.sort_by, sort.sort_order, CATEGORY_FILTERS,
    )
    rows, window = await paginate(
        db, query, paging.page, paging.per_page, scalars=False,
    )
    data = [
        CategoryWithCountResponse(
            **CategoryResponse.model_validate(category).model_dump(),
            books_count=books_count,
        )
        for category, books_count in rows
    ]
    return Page[CategoryWithCountResponse](data=data, **window.meta())


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, db: AsyncSession = Depends(get_db)):
    return CategoryResponse.model_validate(
        await get_or_404(db, Category, category_id, "Category"),
    )


@router.get("/{category_id}/books", response_model=list[BookResponse])
async def list_category_books(
    category_id: str, db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Category, category_id, "Category")
    result = await db.execute(
        select(Book)
        .where(Book.category_id == category_id)
        .order_by(Book.created_at.desc(), Book.id.asc()),
    )
    return [BookResponse.model_validate(b) for b in result.scalars().all()]


@router.post(
    "", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: CategoryCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = Category(name=body.name)
    db.add(category)
    await commit_or_conflict(db, "Category could not be created")
    logger.info(
        "Category created",
        extra={"user_id": admin.id, "entity": "category", "entity_id": category.id},
    )
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    payload: Any = Body(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await get_or_404(db, Category, category_id, "Category")
    changes = parse_payload(CategoryUpdate, payload).model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(category, field, value)
    await commit_or_conflict(db, "Category could not be updated")
    logger.info(
        "Category updated",
        extra={"user_id": admin.id, "entity": "category", "entity_id": category_id},
    )
    return CategoryResponse.model_validate(
        await reload(db, Category, category_id),
    )


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await get_or_404(db, Category, category_id, "Category")
    await db.delete(category)
    await db.commit()
    logger.info(
        "Category deleted",
        extra={"user_id": admin.id, "entity": "category", "entity_id": category_id},
    )
    return MessageResponse(message="Category deleted successfully")
