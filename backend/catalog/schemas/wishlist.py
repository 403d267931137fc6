"""Wishlist Schemas — entry payloads, entry shape with embedded book, check result."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from catalog.schemas.book import BookResponse
from catalog.schemas.common import Notes, RequiredText


class WishlistCreate(BaseModel):
    book_id: RequiredText
    notes: Notes | None = None


class WishlistUpdate(BaseModel):
    notes: Notes | None = None


class WishlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    book_id: str
    notes: str | None = None
    book: BookResponse | None = None
    created_at: datetime
    updated_at: datetime


class WishlistCheckResponse(BaseModel):
    in_wishlist: bool
    wishlist_item: WishlistEntryResponse | None = None
