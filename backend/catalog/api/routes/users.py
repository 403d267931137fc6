"""User Routes — administrator-only account management.

Invariants:
    - Every route requires the admin role
    - Email stays unique; an update ignores the user's own row
    - Passwords are hashed before they reach the store and never returned
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.auth import require_admin
from catalog.api.params import parse_payload
from catalog.core.validation import UniqueInStore
from catalog.infrastructure.database import get_db
from catalog.models.user import User
from catalog.schemas.common import MessageResponse
from catalog.schemas.user import UserCreate, UserResponse, UserUpdate
from catalog.services.accounts import EMAIL_TAKEN, apply_user_changes
from catalog.services.repository import commit_or_conflict, get_or_404, reload
from catalog.services.store_rules import check_store_rules

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.asc()),
    )
    return [UserResponse.from_user(u) for u in result.scalars().all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return UserResponse.from_user(await get_or_404(db, User, user_id, "User"))


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    data = body.model_dump()
    await check_store_rules(db, [UniqueInStore("email", User, "email")], data)
    user = apply_user_changes(User(), data)
    db.add(user)
    await commit_or_conflict(db, EMAIL_TAKEN)
    logger.info(
        "User created",
        extra={"user_id": admin.id, "entity": "user", "entity_id": user.id},
    )
    return UserResponse.from_user(await reload(db, User, user.id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: Any = Body(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_404(db, User, user_id, "User")
    changes = parse_payload(UserUpdate, payload).model_dump(exclude_unset=True)
    await check_store_rules(
        db, [UniqueInStore("email", User, "email", ignore_id=user.id)], changes,
    )
    apply_user_changes(user, changes)
    await commit_or_conflict(db, EMAIL_TAKEN)
    logger.info(
        "User updated",
        extra={"user_id": admin.id, "entity": "user", "entity_id": user_id},
    )
    return UserResponse.from_user(await reload(db, User, user_id))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_404(db, User, user_id, "User")
    await db.delete(user)
    await db.commit()
    logger.info(
        "User deleted",
        extra={"user_id": admin.id, "entity": "user", "entity_id": user_id},
    )
    return MessageResponse(message="User deleted successfully")
