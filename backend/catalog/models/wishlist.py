"""Wishlist ORM — a user's saved intent to read a book, with optional private notes.

Invariants:
    - (user_id, book_id) is unique — a user cannot add the same book twice
    - Deleting the owning user or the referenced book deletes the entry (ON DELETE CASCADE)
    - book (and book.category) eager-loaded for every response
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.core.domain_types import new_id
from catalog.db.base import Base, TimestampMixin

class WishlistEntry(TimestampMixin, Base):
    """Wishlist entry — owned by exactly one user."""
    __tablename__ = "wishlist"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_wishlist_user_book"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped["User"] = relationship(
        "User", back_populates="wishlist_entries", lazy="raise",
    )
    book: Mapped["Book"] = relationship("Book", lazy="selectin")
