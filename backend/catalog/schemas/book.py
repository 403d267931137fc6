"""Book Schemas — create/update payloads and response shapes.

Invariants:
    - title and author: required, 1-256 chars after stripping
    - category_id: optional and nullable; existence checked by store rules
    - BookUpdate: omitted fields untouched; present title/author must be non-null
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from catalog.schemas.category import CategoryResponse
from catalog.schemas.common import Title, require_value


class BookCreate(BaseModel):
    title: Title
    author: Title
    category_id: str | None = None


class BookUpdate(BaseModel):
    title: Title | None = None
    author: Title | None = None
    category_id: str | None = None

    @field_validator("title", "author", mode="before")
    @classmethod
    def required_when_present(cls, v):
        return require_value(v)


class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    author: str
    category_id: str | None = None
    category: CategoryResponse | None = None
    created_at: datetime
    updated_at: datetime


class BookDetailResponse(BookResponse):
    """Book plus the caller's wishlist state (present only for authenticated callers)."""
    in_wishlist: bool
    wishlist_notes: str | None = None
