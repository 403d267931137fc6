"""Token Service — issue, resolve, revoke and rotate personal access tokens.

Invariants:
    - Only the SHA-256 digest is persisted; the plaintext leaves exactly once (issue/rotate)
    - Expired tokens resolve to None (treated exactly like unknown tokens)
    - Revocation deletes the row, so logout takes effect on the next request
    - Callers own the transaction: these helpers flush, never commit
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import get_settings
from catalog.db.base import utcnow
from catalog.infrastructure.security import digest_token, generate_token
from catalog.models.access_token import AccessToken
from catalog.models.user import User

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def token_ttl_seconds() -> int | None:
    minutes = get_settings().access_token_ttl_minutes
    return minutes * 60 if minutes > 0 else None


async def issue_token(
    db: AsyncSession, user: User, name: str = "api",
) -> tuple[str, AccessToken]:
    """Create a token for `user`; returns (plaintext, row)."""
    plaintext = generate_token()
    ttl = token_ttl_seconds()
    token = AccessToken(
        user_id=user.id,
        name=name,
        token_hash=digest_token(plaintext),
        expires_at=utcnow() + timedelta(seconds=ttl) if ttl else None,
    )
    token.user = user
    db.add(token)
    await db.flush()
    logger.info("Access token issued", extra={"user_id": user.id})
    return plaintext, token


async def resolve_token(db: AsyncSession, plaintext: str) -> AccessToken | None:
    """Find the live token row for a presented bearer credential."""
    result = await db.execute(
        select(AccessToken).where(AccessToken.token_hash == digest_token(plaintext)),
    )
    token = result.scalar_one_or_none()
    if token is None:
        return None
    if token.expires_at is not None and _as_utc(token.expires_at) <= utcnow():
        return None
    return token


async def revoke_token(db: AsyncSession, token: AccessToken) -> None:
    await db.delete(token)
    await db.flush()
    logger.info("Access token revoked", extra={"user_id": token.user_id})


async def rotate_token(
    db: AsyncSession, token: AccessToken,
) -> tuple[str, AccessToken]:
    """Revoke `token` and issue a replacement for the same user."""
    user = token.user
    await revoke_token(db, token)
    return await issue_token(db, user, name=token.name)
