"""Store Validation Rules — typed rule records and error aggregation.

Invariants:
    - Rules are plain records; evaluation lives in services/store_rules.py (needs IO)
    - Errors aggregate into {field: [messages]}, field order preserved
    - A None value never fails a store rule (nullable fields are checked by shape rules)

Design Decisions:
    - Shape rules (required, length, email, enum, date, boolean) are the Pydantic
      request models in schemas/; only rules that need the store are modelled here
"""

from dataclasses import dataclass
from typing import Any

REQUIRED_MESSAGE = "This field is required."


@dataclass(frozen=True)
class ForeignKeyExists:
    """Value must reference an existing row of `model`."""
    field: str
    model: type
    message: str = "The selected {field} is invalid."


@dataclass(frozen=True)
class UniqueInStore:
    """No other row of `model` may hold the value in `column`."""
    field: str
    model: type
    column: str
    ignore_id: str | None = None
    message: str = "The {field} has already been taken."


StoreRule = ForeignKeyExists | UniqueInStore


def format_message(rule: StoreRule) -> str:
    return rule.message.format(field=rule.field.replace("_", " "))


def add_error(errors: dict[str, list[str]], field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def rules_for_payload(
    rules: list[StoreRule], payload: dict[str, Any],
) -> list[tuple[StoreRule, Any]]:
    """Pair each rule with its payload value, skipping absent or null fields."""
    return [
        (rule, payload[rule.field])
        for rule in rules
        if payload.get(rule.field) is not None
    ]


_LOCATION_PREFIXES = ("body", "query", "path", "header")


def field_name(loc: tuple | list) -> str:
    """Turn a request-error location into a dotted field name."""
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _is_blank(err: dict) -> bool:
    """Missing fields and strings empty after stripping both read as "required"."""
    if err.get("type") == "missing":
        return True
    return (
        err.get("type") == "string_too_short"
        and (err.get("ctx") or {}).get("min_length") == 1
    )


def collect_request_errors(raw_errors: list[dict]) -> dict[str, list[str]]:
    """Aggregate framework request errors into {field: [messages]}."""
    errors: dict[str, list[str]] = {}
    for err in raw_errors:
        message = err.get("msg", "Invalid value")
        if _is_blank(err):
            message = REQUIRED_MESSAGE
        elif message.startswith("Value error, "):
            message = message[len("Value error, "):]
        add_error(errors, field_name(err.get("loc", ())), message)
    return errors
