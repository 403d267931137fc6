"""Auth Routes — registration, login, logout, token refresh and the caller's own profile.

Invariants:
    - Registration always creates a member; roles are granted by administrators only
    - Login answers 401 "Invalid credentials" for unknown email and wrong password alike
    - Logout and refresh delete the presented token; it fails on the next request
    - The plaintext token is returned exactly once, in the TokenResponse

Design Decisions:
    - Opaque server-side tokens over signed JWTs: revocation is a row delete
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.auth import get_current_token, get_current_user
from catalog.api.params import parse_payload
from catalog.core.domain_types import UserRole
from catalog.core.validation import UniqueInStore
from catalog.infrastructure.database import get_db
from catalog.models.access_token import AccessToken
from catalog.models.user import User
from catalog.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from catalog.schemas.common import MessageResponse
from catalog.schemas.user import ProfileUpdate, UserResponse
from catalog.services.accounts import EMAIL_TAKEN, apply_user_changes, authenticate
from catalog.services.repository import commit_or_conflict, conflict_guard, reload
from catalog.services.store_rules import check_store_rules
from catalog.services.token_service import (
    issue_token, revoke_token, rotate_token, token_ttl_seconds,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(plaintext: str, user: User) -> TokenResponse:
    return TokenResponse(
        access_token=plaintext,
        expires_in=token_ttl_seconds(),
        user=UserResponse.from_user(user),
    )


@router.post(
    "/register", response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    data = body.model_dump()
    await check_store_rules(db, [UniqueInStore("email", User, "email")], data)
    user = apply_user_changes(User(role=UserRole.MEMBER.value), data)
    async with conflict_guard(db, EMAIL_TAKEN):
        db.add(user)
        await db.flush()
        plaintext, _ = await issue_token(db, user, name="register")
        await db.commit()
    logger.info("User registered", extra={"user_id": user.id})
    return _token_response(plaintext, user)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, body.email, body.password)
    plaintext, _ = await issue_token(db, user, name="login")
    await db.commit()
    logger.info("User logged in", extra={"user_id": user.id})
    return _token_response(plaintext, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: AccessToken = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
):
    await revoke_token(db, token)
    await db.commit()
    return MessageResponse(message="Successfully logged out")


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    token: AccessToken = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
):
    plaintext, fresh = await rotate_token(db, token)
    await db.commit()
    return _token_response(plaintext, fresh.user)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse.from_user(user)


@router.put("/me", response_model=UserResponse)
async def update_me(
    payload: Any = Body(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    changes = parse_payload(ProfileUpdate, payload).model_dump(exclude_unset=True)
    await check_store_rules(
        db, [UniqueInStore("email", User, "email", ignore_id=user.id)], changes,
    )
    apply_user_changes(user, changes)
    await commit_or_conflict(db, EMAIL_TAKEN)
    logger.info("Profile updated", extra={"user_id": user.id})
    return UserResponse.from_user(await reload(db, User, user.id))
