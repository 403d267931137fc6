"""Request Parameters — shared page/sort query dependencies and deferred body parsing.

Invariants:
    - page >= 1; 1 <= per_page <= max_per_page; per_page defaults to default_per_page
    - sort_by / sort_order pass through untouched (the listing policy decides fallbacks)
    - parse_payload raises ValidationFailedError with the same envelope as request errors
"""

from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import Query
from pydantic import BaseModel, ValidationError

from catalog.config import get_settings
from catalog.core.errors import ValidationFailedError
from catalog.core.validation import collect_request_errors

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class PageParams:
    page: int
    per_page: int


@dataclass(frozen=True)
class SortParams:
    sort_by: str | None
    sort_order: str | None


def page_params(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
) -> PageParams:
    settings = get_settings()
    if per_page is None:
        per_page = settings.default_per_page
    if per_page > settings.max_per_page:
        raise ValidationFailedError({
            "per_page": [
                f"The per page may not be greater than {settings.max_per_page}.",
            ],
        })
    return PageParams(page=page, per_page=per_page)


def sort_params(
    sort_by: str | None = Query(None),
    sort_order: str | None = Query(None),
) -> SortParams:
    return SortParams(sort_by=sort_by, sort_order=sort_order)


def parse_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """Validate a raw JSON body against `schema` inside the handler.

    Update routes look the record up (404) before validating, so their bodies
    arrive as plain dicts and are checked here instead of by the framework.
    """
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailedError(collect_request_errors(e.errors())) from e
