"""Category Schemas — create/update payloads and response shapes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from catalog.schemas.common import Title, require_value


class CategoryCreate(BaseModel):
    name: Title


class CategoryUpdate(BaseModel):
    name: Title | None = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required_when_present(cls, v):
        return require_value(v)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class CategoryWithCountResponse(CategoryResponse):
    books_count: int = 0
