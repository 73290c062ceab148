"""Field resolution across naming variants, and table-driven extraction."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()
"""Marker for "no candidate key was present" (as opposed to an explicit None)."""


def resolve_field(raw: Any, candidates: Sequence[str], default: Any = MISSING) -> Any:
    """
    Return the value under the first candidate key present in `raw`.

    A present None is returned as-is: it means the backend sent the field
    empty. `default` is only used when none of the keys exist.
    """
    if not isinstance(raw, Mapping):
        return default
    for key in candidates:
        if key in raw:
            return raw[key]
    return default


@dataclass(frozen=True)
class FieldSpec:
    """One row of an entity mapping table."""

    target: str
    """Attribute name on the canonical record."""

    sources: tuple[str, ...]
    """Candidate raw keys, most preferred first."""

    coerce: Callable[[Any], Any]
    """Total conversion from the raw value."""

    default: Any = None
    """Used when no source key is present or coercion fails."""


def extract_fields(raw: Any, specs: Sequence[FieldSpec]) -> dict[str, Any]:
    """Apply a mapping table to one raw record; a bad field degrades to its default."""
    values: dict[str, Any] = {}
    for spec in specs:
        value = resolve_field(raw, spec.sources)
        if value is MISSING:
            values[spec.target] = spec.default
            continue
        try:
            coerced = spec.coerce(value)
        except (TypeError, ValueError, AttributeError) as exc:
            logger.debug("Field %s degraded to default: %s", spec.target, exc)
            coerced = None
        values[spec.target] = spec.default if coerced is None else coerced
    return values
