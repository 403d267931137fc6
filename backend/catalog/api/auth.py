"""Authentication & Role Guards — FastAPI dependencies that resolve and gate the caller.

Invariants:
    - Missing, unknown, expired or inactive-owner tokens -> AuthenticationError (401)
    - The resolved User is returned to the handler as an explicit argument, never stored globally
    - require_role converts its role token when the route is declared; an unknown
      token raises ValueError at import time, never per request
    - A role mismatch -> AuthorizationError (403)
"""

import logging
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.domain_types import UserRole
from catalog.core.errors import AuthenticationError, AuthorizationError
from catalog.db.base import utcnow
from catalog.infrastructure.database import get_db
from catalog.models.access_token import AccessToken
from catalog.models.user import User
from catalog.services.token_service import resolve_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AccessToken:
    """Resolve the presented bearer token or fail with 401."""
    if credentials is None:
        raise AuthenticationError()
    token = await resolve_token(db, credentials.credentials)
    if token is None:
        logger.warning("Rejected unknown or expired bearer token")
        raise AuthenticationError("Invalid or expired token")
    if not token.user.is_active:
        logger.warning(
            "Rejected token of inactive user", extra={"user_id": token.user_id},
        )
        raise AuthenticationError("Account is inactive")
    token.last_used_at = utcnow()
    await db.commit()
    return token


async def get_current_user(
    token: AccessToken = Depends(get_current_token),
) -> User:
    return token.user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if credentials is None:
        return None
    token = await resolve_token(db, credentials.credentials)
    if token is None or not token.user.is_active:
        return None
    return token.user


def require_role(role: UserRole | str) -> Callable:
    """Build a dependency that admits only users holding `role`."""
    required = UserRole(role)

    async def role_guard(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(required):
            logger.warning(
                f"Role {required.value} required",
                extra={"user_id": user.id, "role": user.role},
            )
            raise AuthorizationError(required_role=required.value)
        return user

    return role_guard


require_admin = require_role(UserRole.ADMIN)
