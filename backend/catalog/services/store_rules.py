"""Store Rules — evaluates foreign-key and uniqueness rules against the database.

Invariants:
    - Every rule is evaluated; failures aggregate into {field: [messages]} before raising
    - Null or absent values are skipped
    - UniqueInStore excludes ignore_id (the record being updated)
    - The check is advisory: the store constraint stays authoritative at commit time
"""

import logging
from typing import Any

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.errors import ValidationFailedError
from catalog.core.validation import (
    ForeignKeyExists, StoreRule, UniqueInStore,
    add_error, format_message, rules_for_payload,
)

logger = logging.getLogger(__name__)


async def _row_exists(db: AsyncSession, condition) -> bool:
    return bool((await db.execute(select(exists().where(condition)))).scalar())


async def _violates(db: AsyncSession, rule: StoreRule, value: Any) -> bool:
    if isinstance(rule, ForeignKeyExists):
        return not await _row_exists(db, rule.model.id == value)
    if isinstance(rule, UniqueInStore):
        condition = getattr(rule.model, rule.column) == value
        if rule.ignore_id is not None:
            condition = condition & (rule.model.id != rule.ignore_id)
        return await _row_exists(db, condition)
    raise TypeError(f"Unknown store rule: {rule!r}")


async def collect_store_errors(
    db: AsyncSession, rules: list[StoreRule], payload: dict[str, Any],
) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for rule, value in rules_for_payload(rules, payload):
        if await _violates(db, rule, value):
            add_error(errors, rule.field, format_message(rule))
    return errors


async def check_store_rules(
    db: AsyncSession, rules: list[StoreRule], payload: dict[str, Any],
) -> None:
    """Raise ValidationFailedError when any rule fails."""
    errors = await collect_store_errors(db, rules, payload)
    if errors:
        logger.info(f"Store validation failed: {sorted(errors)}")
        raise ValidationFailedError(errors)
