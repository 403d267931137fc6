"""Listing Policy — pure sort resolution and pagination arithmetic.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - sort_by outside the allow-list falls back to created_at desc (never an error)
    - last_page is at least 1, even for an empty result set
    - from/to are 1-based row positions, None on an empty page
"""

import math
from dataclasses import dataclass

from catalog.core.domain_types import SortOrder

DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = SortOrder.DESC

BOOK_SORT_FIELDS = ("title", "author", "created_at", "updated_at")
CATEGORY_SORT_FIELDS = ("name", "created_at", "updated_at")


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: SortOrder


@dataclass(frozen=True)
class PageWindow:
    """Offset/limit plus the metadata block returned with every page."""
    current_page: int
    per_page: int
    total: int

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def first_item(self) -> int | None:
        if self.offset >= self.total:
            return None
        return self.offset + 1

    @property
    def last_item(self) -> int | None:
        if self.first_item is None:
            return None
        return min(self.offset + self.per_page, self.total)

    def meta(self) -> dict:
        return {
            "current_page": self.current_page,
            "per_page": self.per_page,
            "total": self.total,
            "last_page": self.last_page,
            "from": self.first_item,
            "to": self.last_item,
        }


def resolve_sort(
    sort_by: str | None,
    sort_order: str | None,
    allowed: tuple[str, ...],
) -> SortSpec:
    """Map raw sort parameters onto an allowed field and direction."""
    if not sort_by or sort_by not in allowed:
        return SortSpec(DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER)
    try:
        order = SortOrder((sort_order or "").lower())
    except ValueError:
        order = DEFAULT_SORT_ORDER
    return SortSpec(sort_by, order)


def page_window(page: int, per_page: int, total: int) -> PageWindow:
    return PageWindow(current_page=page, per_page=per_page, total=total)
