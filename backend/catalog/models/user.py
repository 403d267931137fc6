"""User ORM — library members, authors and administrators.

Invariants:
    - id is an opaque UUID4 string, generated at insert, never changes
    - email is unique across all users (store constraint is authoritative)
    - password holds a bcrypt hash only; never serialized
    - role is one of UserRole (stored as its string value)
    - deleting a user cascades to wishlist entries and access tokens (ON DELETE CASCADE)
    - wishlist_entries and tokens are write-only; read them through their select()
"""

from datetime import date

from sqlalchemy import Boolean, Date, String, Text
from sqlalchemy.orm import Mapped, WriteOnlyMapped, mapped_column, relationship

from catalog.core.domain_types import UserRole, new_id
from catalog.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Authenticated identity with a role."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.MEMBER.value,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    membership_expires_at: Mapped[date | None] = mapped_column(
        Date, nullable=True,
    )

    wishlist_entries: WriteOnlyMapped["WishlistEntry"] = relationship(
        "WishlistEntry", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True, lazy="write_only",
    )
    tokens: WriteOnlyMapped["AccessToken"] = relationship(
        "AccessToken", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True, lazy="write_only",
    )

    def has_role(self, role: UserRole) -> bool:
        return self.role == role.value
