"""Domain Types — identifiers, roles and sort directions shared across layers.

Invariants:
    - Every entity id is an opaque UUID4 string for its whole lifetime
    - UserRole is a closed set; labels come from an explicit table
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

import uuid
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EntityId = NewType("EntityId", str)
UserId = NewType("UserId", str)
BookId = NewType("BookId", str)
WishlistId = NewType("WishlistId", str)


def new_id() -> str:
    """Generate a fresh opaque identifier."""
    return str(uuid.uuid4())


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Authorization levels attached to a User."""
    ADMIN = "admin"
    AUTHOR = "author"
    MEMBER = "member"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS: dict[UserRole, str] = {
    UserRole.ADMIN: "Administrator",
    UserRole.AUTHOR: "Author",
    UserRole.MEMBER: "Member",
}


class SortOrder(str, Enum):
    """Sort direction for list endpoints."""
    ASC = "asc"
    DESC = "desc"
