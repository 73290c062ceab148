"""List-like field parsing: arrays, JSON-encoded arrays, or delimited text."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable

DELIMITERS = re.compile(r"[,\n]")


def dedupe_casefold(values: Iterable[str]) -> list[str]:
    """Trim, drop empties, and drop case-insensitive repeats (first casing wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        token = value.strip()
        if not token:
            continue
        key = token.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(token)
    return result


def _from_sequence(values: Iterable[Any]) -> list[str]:
    return dedupe_casefold(str(v) for v in values if v is not None)


def parse_list(value: Any) -> list[str]:
    """
    Parse a list-like value into an ordered, de-duplicated list of strings.

    Structured JSON arrays are tried first; text that does not decode to an
    array falls back to splitting on commas and newlines, so fields that moved
    from free text to JSON are both accepted.
    """
    if value is None or isinstance(value, (bool, dict)):
        return []
    if isinstance(value, (list, tuple)):
        return _from_sequence(value)
    if not isinstance(value, str):
        value = str(value)
    if not value.strip():
        return []

    try:
        decoded = json.loads(value)
    except (ValueError, TypeError):
        decoded = None
    if isinstance(decoded, list):
        return _from_sequence(decoded)

    return dedupe_casefold(DELIMITERS.split(value))
