from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not a valid id")
    try:
        number = int(value)
    except (TypeError, ValueError, ArithmeticError):
        raise ValidationError(f"{field_name} is not a valid id")
    # int() truncates 2.9 to 2
    if isinstance(value, (float, Decimal)) and number != value:
        raise ValidationError(f"{field_name} is not a valid id")
    return number


def parse_id_list(values: Iterable[Any] | None, field_name: str) -> list[int]:
    """Coerce submitted ids to ints, dropping blanks and keeping first-seen order."""

    out: list[int] = []
    seen: set[int] = set()
    for value in values or []:
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        item = require_int(value, field_name)
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def filter_filled(data: dict, allowed: Iterable[str]) -> dict:
    """Keep only allowed keys whose values are not empty."""

    out = {}
    for key in allowed:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        out[key] = value
    return out
