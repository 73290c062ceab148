"""Total coercion helpers: every function returns a value and never raises."""

from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from dateutil import parser as date_parser

_INTEGER_TEXT = re.compile(r"^[+-]?\d+$")

TRUE_WORDS = frozenset({"available", "true", "1", "yes", "y", "active"})
FALSE_WORDS = frozenset(
    {
        "unavailable",
        "false",
        "0",
        "no",
        "n",
        "inactive",
        "blocked",
        "not available",
        "not active",
    }
)


def _normalize_text(value: str) -> str:
    return " ".join(value.lower().strip().split())


def safe_number(value: Any) -> float | None:
    """
    Return the finite numeric value of `value`, or None.

    Numeric strings are accepted; NaN, infinities, blanks, booleans and
    containers are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def tri_state(value: Any) -> bool | None:
    """True, False, or None (unknown) from a boolean, number or free text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        number = safe_number(value)
        if number is None:
            return None
        return number != 0
    if isinstance(value, str):
        text = _normalize_text(value)
        if text in TRUE_WORDS:
            return True
        if text in FALSE_WORDS:
            return False
    return None


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, TypeError, OverflowError):
        return None


def safe_date(value: Any) -> str | None:
    """Return the ISO string when it parses to a valid date, else None."""
    if isinstance(value, datetime):
        return value.isoformat()
    if parse_timestamp(value) is None:
        return None
    return str(value).strip()


def optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    text = str(value).strip()
    return text or None


def text_or_empty(value: Any) -> str:
    return optional_text(value) or ""


def identifier(value: Any) -> int | str | None:
    """Integral numbers (and numeric strings) become int; other text is kept as-is."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_TEXT.match(value.strip()):
        return int(value.strip())
    number = safe_number(value)
    if number is not None and number.is_integer():
        return int(number)
    return optional_text(value)


def non_negative_number(value: Any) -> float | None:
    number = safe_number(value)
    if number is None or number < 0:
        return None
    return number


def number_or_zero(value: Any) -> float:
    number = safe_number(value)
    return number if number is not None else 0.0


def clamp_rating(value: Any, low: float = 0.0, high: float = 5.0) -> float:
    return max(low, min(high, number_or_zero(value)))


def is_true(value: Any) -> bool:
    return tri_state(value) is True
