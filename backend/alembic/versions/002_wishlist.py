"""Wishlist — per-user saved books with notes.

Revision ID: 002_wishlist
Revises: 001_initial
Create Date: 2026-10-18

One row per (user, book) pair; both foreign keys cascade so deleting a user
or a book removes the entries that point at it.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_wishlist"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "wishlist",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id", sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "book_id", sa.String(36),
            sa.ForeignKey("books.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "book_id", name="uq_wishlist_user_book"),
    )
    op.create_index("ix_wishlist_user_id", "wishlist", ["user_id"])
    op.create_index("ix_wishlist_book_id", "wishlist", ["book_id"])


def downgrade() -> None:
    op.drop_table("wishlist")
