"""Query Composer — filter, search, sort and paginate SELECTs over catalog entities.

Invariants:
    - apply_filters only appends conjunctive predicates; step order never changes the result
    - Text filters are case-insensitive substring matches with LIKE wildcards escaped
    - The created_at range applies only when BOTH start_date and end_date are present,
      and includes every row created on end_date
    - Search mode ORs one term across the FilterSpec's search fields
    - Sorting always ends with id so page boundaries are stable

Design Decisions:
    - Each recognised filter key maps to one step function (query, model, value) -> query
    - Sort and page arithmetic live in core/listing.py (pure); this module only touches SQL
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.domain_types import SortOrder
from catalog.core.listing import (
    BOOK_SORT_FIELDS, CATEGORY_SORT_FIELDS, PageWindow, page_window, resolve_sort,
)

Step = Callable[[Select, type, Any], Select]


@dataclass(frozen=True)
class FilterSpec:
    """Which request keys an entity recognises, and how each is applied."""
    text_fields: tuple[str, ...] = ()
    exact_fields: tuple[str, ...] = ()
    search_fields: tuple[str, ...] = ()
    sort_fields: tuple[str, ...] = ()
    date_field: str = "created_at"


BOOK_FILTERS = FilterSpec(
    text_fields=("title", "author"),
    exact_fields=("category_id",),
    search_fields=("title", "author"),
    sort_fields=BOOK_SORT_FIELDS,
)

CATEGORY_FILTERS = FilterSpec(
    text_fields=("name",),
    sort_fields=CATEGORY_SORT_FIELDS,
)


def escape_like(value: str) -> str:
    return (
        value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def contains_ci(column, value: str):
    """Case-insensitive 'column contains value' predicate."""
    return column.ilike(f"%{escape_like(value)}%", escape="\\")


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _text_step(field: str) -> Step:
    def step(query: Select, model: type, value: Any) -> Select:
        return query.where(contains_ci(getattr(model, field), str(value)))
    return step


def _exact_step(field: str) -> Step:
    def step(query: Select, model: type, value: Any) -> Select:
        return query.where(getattr(model, field) == value)
    return step


def _date_range_step(field: str) -> Step:
    def step(query: Select, model: type, value: Any) -> Select:
        start_date, end_date = value
        column = getattr(model, field)
        return query.where(
            column >= _day_start(start_date),
            column < _day_start(end_date + timedelta(days=1)),
        )
    return step


def build_steps(
    filters: dict[str, Any], spec: FilterSpec,
) -> list[tuple[Step, Any]]:
    """Pair every recognised, non-empty filter key with its predicate step."""
    steps: list[tuple[Step, Any]] = []
    for field in spec.text_fields:
        if filters.get(field):
            steps.append((_text_step(field), filters[field]))
    for field in spec.exact_fields:
        if filters.get(field):
            steps.append((_exact_step(field), filters[field]))
    start_date, end_date = filters.get("start_date"), filters.get("end_date")
    if start_date is not None and end_date is not None:
        steps.append((_date_range_step(spec.date_field), (start_date, end_date)))
    return steps


def apply_filters(
    query: Select, model: type, filters: dict[str, Any], spec: FilterSpec,
) -> Select:
    for step, value in build_steps(filters, spec):
        query = step(query, model, value)
    return query


def apply_search(
    query: Select, model: type, term: str, spec: FilterSpec,
) -> Select:
    """Search mode: the term may appear in any of the FilterSpec's search fields."""
    term = term.strip()
    if not term:
        return query
    return query.where(or_(
        *(contains_ci(getattr(model, field), term) for field in spec.search_fields)
    ))


def apply_sort(
    query: Select,
    model: type,
    sort_by: str | None,
    sort_order: str | None,
    spec: FilterSpec,
) -> Select:
    sort = resolve_sort(sort_by, sort_order, spec.sort_fields)
    column = getattr(model, sort.field)
    ordered = column.asc() if sort.order == SortOrder.ASC else column.desc()
    return query.order_by(ordered, model.id.asc())


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int,
    per_page: int,
    scalars: bool = True,
) -> tuple[list, PageWindow]:
    """Run one page of `query`; returns the rows and the page window."""
    count_query = select(func.count()).select_from(
        query.order_by(None).subquery(),
    )
    total = (await db.execute(count_query)).scalar_one()
    window = page_window(page, per_page, total)
    result = await db.execute(query.limit(per_page).offset(window.offset))
    rows = result.scalars().all() if scalars else result.all()
    return list(rows), window
