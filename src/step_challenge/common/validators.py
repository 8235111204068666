from __future__ import annotations

import re
from datetime import date
from typing import Any

from ..core.constants import MAX_DB_INT
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_non_empty(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def parse_int(value: Any) -> int:
    """Accept ints and integer-looking strings; reject bools, floats and junk."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value):
        return int(value)
    raise ValueError(f"not an integer: {value!r}")


def require_id(value: Any, message: str) -> int:
    try:
        ident = parse_int(value)
    except ValueError:
        raise ValidationError(message)
    if ident <= 0 or ident > MAX_DB_INT:
        raise ValidationError(message)
    return ident


def require_step_count(value: Any) -> int:
    try:
        steps = parse_int(value)
    except ValueError:
        raise ValidationError("Steps must be a non-negative integer")
    if steps < 0 or steps > MAX_DB_INT:
        raise ValidationError("Steps must be a non-negative integer")
    return steps


def require_past_or_today(value: Any, *, today: date) -> date:
    """Parse an entry date and refuse anything after ``today``."""
    if not isinstance(value, str):
        raise ValidationError("Invalid date")
    try:
        entry_date = parse_iso_date(value)
    except ValueError:
        raise ValidationError("Invalid date")
    if entry_date > today:
        raise ValidationError("Date cannot be in the future")
    return entry_date
