"""ORM Models — SQLAlchemy declarative models for all catalog entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every id is an opaque UUID4 string

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from catalog.models.user import User  # noqa: F401
from catalog.models.category import Category  # noqa: F401
from catalog.models.book import Book  # noqa: F401
from catalog.models.wishlist import WishlistEntry  # noqa: F401
from catalog.models.access_token import AccessToken  # noqa: F401
