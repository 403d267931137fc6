"""Shared Schema Pieces — constrained string types, pagination envelope, messages.

Invariants:
    - Text fields strip surrounding whitespace; an empty string fails as missing
    - Passwords are never stripped and fit bcrypt's 72-byte input limit
    - Page serializes "from"/"to" under their reserved-word names
"""

from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from catalog.core.validation import REQUIRED_MESSAGE

T = TypeVar("T")

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Name = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
]
Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=256),
]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]
PASSWORD_MAX_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(
            f"The password may not be greater than {PASSWORD_MAX_BYTES} bytes.",
        )
    return value


Password = Annotated[
    str,
    StringConstraints(min_length=8, max_length=255),
    AfterValidator(check_password_bytes),
]
Notes = Annotated[str, StringConstraints(max_length=1000)]


def require_value(value: Any) -> Any:
    """Reject an explicit null for a field that may be omitted but not cleared."""
    if value is None:
        raise ValueError(REQUIRED_MESSAGE)
    return value


class MessageResponse(BaseModel):
    message: str


class Page(BaseModel, Generic[T]):
    """One page of results plus pagination metadata."""
    model_config = ConfigDict(populate_by_name=True)

    data: list[T]
    current_page: int
    per_page: int
    total: int
    last_page: int
    from_: int | None = Field(None, alias="from")
    to: int | None = None


EMAIL_MAX_LENGTH = 255


def normalize_email(value: str | None) -> str | None:
    """Lower-case an address and enforce the column length."""
    if value is None:
        return None
    value = value.strip().lower()
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(
            f"The email may not be greater than {EMAIL_MAX_LENGTH} characters.",
        )
    return value


def build_page(schema: type[BaseModel], rows: list, window) -> Page:
    """Wrap ORM rows and a PageWindow into a serialisable Page."""
    return Page[schema](
        data=[schema.model_validate(row) for row in rows], **window.meta(),
    )
