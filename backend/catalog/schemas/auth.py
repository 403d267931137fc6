"""Auth Schemas — registration, login and the issued-token envelope."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from catalog.schemas.common import Name, Password, Phone, normalize_email
from catalog.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    name: Name
    email: EmailStr
    password: Password
    phone: Phone | None = None
    address: str | None = None

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    user: UserResponse
