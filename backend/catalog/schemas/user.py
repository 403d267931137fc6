"""User Schemas — admin create/update, self profile update, and the public user shape.

Invariants:
    - email: valid address, <=255 chars, stored lower-cased; uniqueness checked by store rules
    - password: >=8 chars, never echoed back
    - role: one of UserRole; defaults to member on create; non-null when present on update
    - UserResponse never carries the password hash
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from catalog.core.domain_types import UserRole
from catalog.schemas.common import (
    Name, Password, Phone, normalize_email, require_value,
)


class UserCreate(BaseModel):
    name: Name
    email: EmailStr
    password: Password
    phone: Phone | None = None
    address: str | None = None
    role: UserRole = UserRole.MEMBER
    is_active: bool = True
    membership_expires_at: date | None = None

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        return UserRole.MEMBER if v is None else v

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v):
        return True if v is None else v


class UserUpdate(BaseModel):
    name: Name | None = None
    email: EmailStr | None = None
    password: Password | None = None
    phone: Phone | None = None
    address: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None
    membership_expires_at: date | None = None

    @field_validator(
        "name", "email", "password", "role", "is_active", mode="before",
    )
    @classmethod
    def required_when_present(cls, v):
        return require_value(v)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return normalize_email(v)


class ProfileUpdate(BaseModel):
    """Self-service profile changes — role and activation stay admin-only."""
    name: Name | None = None
    email: EmailStr | None = None
    password: Password | None = None
    phone: Phone | None = None
    address: str | None = None

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def required_when_present(cls, v):
        return require_value(v)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return normalize_email(v)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    role: UserRole
    role_label: str
    is_active: bool
    membership_expires_at: date | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        role = UserRole(user.role)
        return cls.model_validate({
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "address": user.address,
            "role": role,
            "role_label": role.label,
            "is_active": user.is_active,
            "membership_expires_at": user.membership_expires_at,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        })
