"""Book Routes — public reads, authenticated writes, filter/search listings.

Invariants:
    - Create returns 201 with a fresh id; unknown ids are 404 everywhere
    - Filter text matches are case-insensitive substrings
    - Unknown sort_by falls back to created_at desc (same as omitting it)
    - per_page=2 over 5 books -> last_page=3, total=5
    - GET /books/{id} adds wishlist state only for an authenticated caller
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from catalog.models.book import Book
from catalog.models.wishlist import WishlistEntry
API = "/api/v1"

BASE = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


async def _seed_five(make_book, category_id=None):
    titles = ["The Great Gatsby", "Dune", "Emma", "Ulysses", "Beloved"]
    return [
        await make_book(
            title=t, author=f"Author {i}", category_id=category_id,
            created_at=BASE + timedelta(days=i),
        )
        for i, t in enumerate(titles)
    ]


# ─── Create / Read ───────────────────────────────────────────────

async def test_create_book_returns_201_with_new_id(client, member, make_book):
    existing = await make_book()
    _, headers = member
    res = await client.post(
        f"{API}/books", json={"title": "Emma", "author": "Jane Austen"},
        headers=headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "Emma"
    assert body["id"] and body["id"] != existing.id
    assert body["category"] is None


async def test_two_creates_get_distinct_ids(client, member):
    _, headers = member
    payload = {"title": "Emma", "author": "Jane Austen"}
    first = await client.post(f"{API}/books", json=payload, headers=headers)
    second = await client.post(f"{API}/books", json=payload, headers=headers)
    assert first.json()["id"] != second.json()["id"]


async def test_create_book_embeds_category(client, member, category):
    _, headers = member
    res = await client.post(
        f"{API}/books",
        json={"title": "Dune", "author": "Frank Herbert", "category_id": category.id},
        headers=headers,
    )
    assert res.status_code == 201
    assert res.json()["category"]["name"] == "Fiction"


async def test_create_book_requires_token(client):
    res = await client.post(f"{API}/books", json={"title": "Dune", "author": "X"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_create_book_rejects_unknown_category(client, member):
    _, headers = member
    res = await client.post(
        f"{API}/books",
        json={"title": "Dune", "author": "Frank Herbert", "category_id": "nope"},
        headers=headers,
    )
    assert res.status_code == 422
    assert res.json()["error"]["details"] == {
        "category_id": ["The selected category id is invalid."],
    }


async def test_create_book_missing_fields_is_422(client, member):
    _, headers = member
    res = await client.post(f"{API}/books", json={"title": "  "}, headers=headers)
    assert res.status_code == 422
    details = res.json()["error"]["details"]
    assert details == {
        "title": ["This field is required."],
        "author": ["This field is required."],
    }


async def test_create_book_title_too_long_is_422(client, member):
    _, headers = member
    res = await client.post(
        f"{API}/books", json={"title": "x" * 257, "author": "A"}, headers=headers,
    )
    assert res.status_code == 422
    assert "title" in res.json()["error"]["details"]


async def test_list_books_is_public(client, make_book):
    await _seed_five(make_book)
    res = await client.get(f"{API}/books")
    assert res.status_code == 200
    assert [b["title"] for b in res.json()][0] == "Beloved"
    assert len(res.json()) == 5


async def test_get_book(client, make_book):
    book = await make_book()
    res = await client.get(f"{API}/books/{book.id}")
    assert res.status_code == 200
    assert res.json()["title"] == "Dune"
    assert "in_wishlist" not in res.json()


async def test_get_unknown_book_is_404(client):
    res = await client.get(f"{API}/books/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Book not found"


async def test_get_book_with_token_reports_wishlist_state(
    client, member, make_book, test_db,
):
    user, headers = member
    book = await make_book()
    test_db.add(WishlistEntry(user_id=user.id, book_id=book.id, notes="soon"))
    await test_db.commit()

    res = await client.get(f"{API}/books/{book.id}", headers=headers)
    assert res.json()["in_wishlist"] is True
    assert res.json()["wishlist_notes"] == "soon"


async def test_get_book_with_token_not_in_wishlist(client, member, make_book):
    _, headers = member
    book = await make_book()
    res = await client.get(f"{API}/books/{book.id}", headers=headers)
    assert res.json()["in_wishlist"] is False
    assert res.json()["wishlist_notes"] is None


async def test_get_book_with_bad_token_is_anonymous(client, make_book):
    book = await make_book()
    res = await client.get(
        f"{API}/books/{book.id}", headers={"Authorization": "Bearer junk"},
    )
    assert res.status_code == 200
    assert "in_wishlist" not in res.json()


# ─── Update / Delete ─────────────────────────────────────────────

async def test_update_book_partial(client, member, make_book):
    _, headers = member
    book = await make_book()
    res = await client.put(
        f"{API}/books/{book.id}", json={"title": "Dune Messiah"}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["title"] == "Dune Messiah"
    assert res.json()["author"] == "Frank Herbert"


async def test_update_book_explicit_null_title_is_422(client, member, make_book):
    _, headers = member
    book = await make_book()
    res = await client.put(
        f"{API}/books/{book.id}", json={"title": None}, headers=headers,
    )
    assert res.status_code == 422
    assert res.json()["error"]["details"]["title"] == ["This field is required."]


async def test_update_book_can_clear_category(client, member, make_book, category):
    _, headers = member
    book = await make_book(category_id=category.id)
    res = await client.put(
        f"{API}/books/{book.id}", json={"category_id": None}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["category_id"] is None
    assert res.json()["category"] is None


async def test_update_unknown_book_is_404_before_validation(client, member):
    _, headers = member
    res = await client.put(
        f"{API}/books/missing", json={"title": None}, headers=headers,
    )
    assert res.status_code == 404


async def test_delete_book(client, member, make_book, test_db):
    _, headers = member
    book = await make_book()
    res = await client.delete(f"{API}/books/{book.id}", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Book deleted successfully"}
    result = await test_db.execute(select(Book).where(Book.id == book.id))
    assert result.scalar_one_or_none() is None


async def test_delete_book_removes_wishlist_entries(
    client, member, make_book, test_db,
):
    user, headers = member
    book = await make_book()
    test_db.add(WishlistEntry(user_id=user.id, book_id=book.id))
    await test_db.commit()

    await client.delete(f"{API}/books/{book.id}", headers=headers)

    result = await test_db.execute(
        select(WishlistEntry).where(WishlistEntry.book_id == book.id),
    )
    assert result.scalar_one_or_none() is None


async def test_delete_unknown_book_is_404(client, member):
    _, headers = member
    res = await client.delete(f"{API}/books/missing", headers=headers)
    assert res.status_code == 404


# ─── Filter / Search ─────────────────────────────────────────────

async def test_filter_title_is_case_insensitive_substring(client, make_book):
    await _seed_five(make_book)
    res = await client.get(f"{API}/books/filter", params={"title": "gatsby"})
    assert res.status_code == 200
    assert [b["title"] for b in res.json()["data"]] == ["The Great Gatsby"]


async def test_filter_treats_like_wildcards_literally(client, make_book):
    await make_book(title="100% Wool")
    await make_book(title="1000 Wools")
    res = await client.get(f"{API}/books/filter", params={"title": "0%"})
    assert [b["title"] for b in res.json()["data"]] == ["100% Wool"]


async def test_filter_by_category(client, make_book, category):
    await make_book(title="In", category_id=category.id)
    await make_book(title="Out")
    res = await client.get(
        f"{API}/books/filter", params={"category_id": category.id},
    )
    assert [b["title"] for b in res.json()["data"]] == ["In"]


async def test_filter_date_range_includes_whole_end_day(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter",
        params={"start_date": "2026-01-11", "end_date": "2026-01-12"},
    )
    titles = {b["title"] for b in res.json()["data"]}
    assert titles == {"Dune", "Emma"}


async def test_filter_single_date_bound_is_ignored(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter", params={"start_date": "2026-01-13"},
    )
    assert res.json()["total"] == 5


async def test_filter_invalid_date_is_422(client):
    res = await client.get(
        f"{API}/books/filter",
        params={"start_date": "not-a-date", "end_date": "2026-01-12"},
    )
    assert res.status_code == 422
    assert "start_date" in res.json()["error"]["details"]


async def test_pagination_metadata(client, make_book):
    await _seed_five(make_book)
    res = await client.get(f"{API}/books/filter", params={"per_page": 2})
    body = res.json()
    assert body["total"] == 5
    assert body["last_page"] == 3
    assert body["per_page"] == 2
    assert body["current_page"] == 1
    assert body["from"] == 1 and body["to"] == 2
    assert len(body["data"]) == 2


async def test_last_page_is_partial(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter", params={"per_page": 2, "page": 3},
    )
    body = res.json()
    assert len(body["data"]) == 1
    assert body["from"] == 5 and body["to"] == 5


async def test_page_past_the_end_is_empty(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter", params={"per_page": 2, "page": 9},
    )
    body = res.json()
    assert body["data"] == []
    assert body["from"] is None and body["to"] is None


async def test_per_page_above_max_is_422(client):
    res = await client.get(f"{API}/books/filter", params={"per_page": 101})
    assert res.status_code == 422
    assert "per_page" in res.json()["error"]["details"]


async def test_unknown_sort_field_matches_default_order(client, make_book):
    await _seed_five(make_book)
    default = await client.get(f"{API}/books/filter")
    fallback = await client.get(
        f"{API}/books/filter", params={"sort_by": "unknown_field", "sort_order": "asc"},
    )
    default_ids = [b["id"] for b in default.json()["data"]]
    assert default_ids == [b["id"] for b in fallback.json()["data"]]
    assert default.json()["data"][0]["title"] == "Beloved"


async def test_sort_by_title_ascending(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter", params={"sort_by": "title", "sort_order": "ASC"},
    )
    titles = [b["title"] for b in res.json()["data"]]
    assert titles == sorted(titles)


async def test_invalid_sort_order_falls_back_to_desc(client, make_book):
    await _seed_five(make_book)
    res = await client.get(
        f"{API}/books/filter", params={"sort_by": "title", "sort_order": "sideways"},
    )
    titles = [b["title"] for b in res.json()["data"]]
    assert titles == sorted(titles, reverse=True)


async def test_search_matches_title_or_author(client, make_book):
    await make_book(title="Emma", author="Jane Austen")
    await make_book(title="Austerlitz", author="W. G. Sebald")
    await make_book(title="Dune", author="Frank Herbert")
    res = await client.get(f"{API}/books/search", params={"q": "AUST"})
    assert res.status_code == 200
    assert {b["title"] for b in res.json()["data"]} == {"Emma", "Austerlitz"}
    assert res.json()["total"] == 2


async def test_search_requires_q(client):
    res = await client.get(f"{API}/books/search")
    assert res.status_code == 422
    assert res.json()["error"]["details"]["q"] == ["This field is required."]


async def test_update_unknown_book_without_body_is_404(client, member):
    _, headers = member
    res = await client.put(f"{API}/books/missing", headers=headers)
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Book not found"


async def test_update_book_without_body_is_422(client, member, make_book):
    _, headers = member
    book = await make_book()
    res = await client.put(f"{API}/books/{book.id}", headers=headers)
    assert res.status_code == 422
    assert "body" in res.json()["error"]["details"]
