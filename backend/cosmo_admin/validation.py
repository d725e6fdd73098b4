from __future__ import annotations
from datetime import date, datetime
import math
import re

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError
from .time_utils import parse_iso_date, parse_iso_datetime


EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

MAX_DISCOUNT_PERCENT = 100


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: client-facing keys callers are allowed to set (security boundary)
    - required_on_create: client keys required for POST
    - aliases: client key -> column key, for camelCase payloads over snake_case columns
    - ignored_fields: read-only keys clients echo back (id, created_at) and are dropped silently
    """
    writable_fields: frozenset[str]
    required_on_create: frozenset[str] = frozenset()
    aliases: dict[str, str] = field(default_factory=dict)
    ignored_fields: frozenset[str] = frozenset({"id", "created_at"})

    def column_for(self, key: str) -> str:
        return self.aliases.get(key, key)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(label: str, col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # Whole floats arrive from JS clients (e.g. 2.0)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped or not re.fullmatch(r"-?\d+", stripped):
                raise ValidationError(f"{label} must be an integer")
            return int(stripped)
        raise ValidationError(f"{label} must be an integer")

    if isinstance(coltype, Float):
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValidationError(f"{label} must be a number")
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (ValueError, OverflowError):
            raise ValidationError(f"{label} must be a number")
        # NaN and Infinity are not JSON and poison every sum
        if not math.isfinite(number):
            raise ValidationError(f"{label} must be a finite number")
        return number

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{label} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{label} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{label} must be a datetime")

    if isinstance(coltype, Date):
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                d = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{label} must be an ISO-8601 date")
            if d is None:
                raise ValidationError(f"{label} must be an ISO-8601 date")
            return d
        raise ValidationError(f"{label} must be a date")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column name.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if payload.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k in policy.ignored_fields:
            continue
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if policy.column_for(k) not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        if k in policy.ignored_fields:
            continue
        col = cols[policy.column_for(k)]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[col.key] = None
            continue

        val = _coerce_value(k, col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Optional text fields store NULL instead of ""
        if isinstance(col.type, (String, Text)) and col.nullable and val == "":
            val = None

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[col.key] = val

    return patch


def _require_non_negative(patch: dict, key: str, label: str) -> None:
    if key in patch and patch[key] is not None and patch[key] < 0:
        raise ValidationError(f"{label} must be >= 0")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _require_non_negative(patch, "price", "retailPrice")
    _require_non_negative(patch, "salon_price", "salonPrice")
    _require_non_negative(patch, "exchange_rate", "exchangeRate")
    _require_non_negative(patch, "quantity", "quantity")


def enforce_rules_order(patch: dict, statuses: tuple[str, ...]) -> None:
    _require_non_negative(patch, "total_amount", "totalAmount")
    if "status" in patch and patch["status"] not in statuses:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(statuses)}")


def enforce_rules_order_item(patch: dict) -> None:
    if patch.get("quantity") is None or patch["quantity"] <= 0:
        raise ValidationError("Item quantity must be > 0")
    _require_non_negative(patch, "price", "Item price")
    _require_non_negative(patch, "salon_price_usd", "salonPriceUsd")
    _require_non_negative(patch, "exchange_rate", "exchangeRate")
    discount = patch.get("discount")
    if discount is not None and not 0 <= discount <= MAX_DISCOUNT_PERCENT:
        raise ValidationError(f"Item discount must be between 0 and {MAX_DISCOUNT_PERCENT}")


def enforce_rules_expense(patch: dict) -> None:
    if "amount" in patch and (patch["amount"] is None or patch["amount"] <= 0):
        raise ValidationError("amount must be > 0")


def enforce_email(patch: dict, key: str = "email") -> None:
    if key in patch and patch[key] is not None:
        patch[key] = patch[key].lower()
        if not EMAIL_RE.fullmatch(patch[key]):
            raise ValidationError("A valid email is required")


def parse_positive_int(raw: str | None, *, name: str, default: int) -> int:
    """Query-string integer >= 1 (page, pageSize, period)."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a positive integer")
    if value < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def positive_finite_number(value, *, message: str) -> float:
    """JSON number > 0 (not a string, bool, NaN or Infinity)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(message)
    try:
        number = float(value)
    except OverflowError:
        raise ValidationError(message)
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(message)
    return number
