"""Listing Policy — sort resolution and page arithmetic.

Tests:
    - Unknown or missing sort_by falls back to created_at desc
    - sort_order is case-insensitive; junk on an allowed field means desc
    - last_page >= 1; from/to are 1-based and None past the end
"""

import pytest

from catalog.core.domain_types import SortOrder
from catalog.core.listing import (
    BOOK_SORT_FIELDS, CATEGORY_SORT_FIELDS, PageWindow, page_window, resolve_sort,
)


@pytest.mark.parametrize("sort_by", [None, "", "unknown_field", "password"])
def test_unknown_sort_falls_back(sort_by):
    spec = resolve_sort(sort_by, "asc", BOOK_SORT_FIELDS)
    assert spec.field == "created_at"
    assert spec.order == SortOrder.DESC


def test_allowed_field_keeps_order_case_insensitively():
    spec = resolve_sort("title", "ASC", BOOK_SORT_FIELDS)
    assert (spec.field, spec.order) == ("title", SortOrder.ASC)


def test_invalid_order_on_allowed_field_is_desc():
    assert resolve_sort("author", "up", BOOK_SORT_FIELDS).order == SortOrder.DESC
    assert resolve_sort("author", None, BOOK_SORT_FIELDS).order == SortOrder.DESC


def test_category_allow_list_excludes_book_fields():
    assert resolve_sort("title", "asc", CATEGORY_SORT_FIELDS).field == "created_at"
    assert resolve_sort("name", "asc", CATEGORY_SORT_FIELDS).field == "name"


def test_five_rows_two_per_page():
    window = page_window(1, 2, 5)
    assert window.last_page == 3
    assert window.offset == 0
    assert (window.first_item, window.last_item) == (1, 2)


def test_partial_last_page():
    window = page_window(3, 2, 5)
    assert window.offset == 4
    assert (window.first_item, window.last_item) == (5, 5)


def test_empty_result_has_one_page():
    window = PageWindow(current_page=1, per_page=15, total=0)
    assert window.last_page == 1
    assert window.first_item is None and window.last_item is None


def test_meta_uses_reserved_word_keys():
    meta = page_window(2, 10, 25).meta()
    assert meta == {
        "current_page": 2, "per_page": 10, "total": 25,
        "last_page": 3, "from": 11, "to": 20,
    }
