"""Account Service — user mutations and credential checks shared by admin and self-service routes.

Invariants:
    - Passwords are hashed here, before any setattr on the model
    - Roles are stored as their string value
    - authenticate reports unknown email and wrong password identically
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.domain_types import UserRole
from catalog.core.errors import AuthenticationError
from catalog.infrastructure.security import hash_password, verify_password
from catalog.models.user import User

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


def apply_user_changes(user: User, changes: dict[str, Any]) -> User:
    changes = dict(changes)
    if changes.get("role") is not None:
        changes["role"] = UserRole(changes["role"]).value
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])
    for field, value in changes.items():
        setattr(user, field, value)
    return user


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the active user owning these credentials or raise AuthenticationError."""
    user = await find_user_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        logger.warning("Login by inactive user", extra={"user_id": user.id})
        raise AuthenticationError("Account is inactive")
    return user
