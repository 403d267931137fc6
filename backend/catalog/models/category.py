"""Category ORM — groups books; owned and mutated by administrators only.

Invariants:
    - id is an opaque UUID4 string
    - deleting a category leaves its books in place with category_id NULL (ON DELETE SET NULL)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, WriteOnlyMapped, mapped_column, relationship

from catalog.core.domain_types import new_id
from catalog.db.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    """Category entity — one-to-many books."""
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id,
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    books: WriteOnlyMapped["Book"] = relationship(
        "Book", back_populates="category",
        passive_deletes=True, lazy="write_only",
    )
