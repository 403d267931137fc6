"""Access Token ORM — server-side record of issued bearer tokens.

Invariants:
    - token_hash is the SHA-256 hex digest of the plaintext token (plaintext never stored)
    - token_hash is unique
    - Deleting the row revokes the token immediately (logout / refresh)
    - user eager-loaded: resolving a token yields its owner in one round-trip
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.core.domain_types import new_id
from catalog.db.base import Base, TimestampMixin


class AccessToken(TimestampMixin, Base):
    """Personal access token issued at register/login/refresh."""
    __tablename__ = "personal_access_tokens"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="api")
    token_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="tokens", lazy="selectin",
    )
