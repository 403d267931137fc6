"""Book ORM — catalog entries, optionally filed under one category.

Invariants:
    - id is an opaque UUID4 string
    - category_id is NULL or references an existing category
    - category eager-loaded (selectin) so responses can embed it in async context
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.core.domain_types import new_id
from catalog.db.base import Base, TimestampMixin


class Book(TimestampMixin, Base):
    """Book entity — belongs to at most one Category."""
    __tablename__ = "books"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id,
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="books", lazy="selectin",
    )
