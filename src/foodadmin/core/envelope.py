"""Locate the record list inside a response envelope and normalize it."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from foodadmin.core.coerce import parse_timestamp
from foodadmin.core.models import EntityKind, Record
from foodadmin.core.registry import EntityRegistry, EntitySchema, default_registry
from foodadmin.core.status import StatusTables

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def unwrap_envelope(payload: Any, key: str) -> list[Any]:
    """
    Return the record list from `payload`.

    Accepted shapes: a bare list, `{key: [...]}`, or `{"Value": {key: [...]}}`.
    Any other shape yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        value = payload.get("Value")
        if isinstance(value, dict) and isinstance(value.get(key), list):
            return value[key]
        if isinstance(payload.get(key), list):
            return payload[key]
    logger.debug("Unrecognized envelope for %s: %s", key, type(payload).__name__)
    return []


def normalize_record(schema: EntitySchema, raw: Any, tables: Optional[StatusTables] = None) -> Record:
    """Normalize one row; a row that still trips a normalizer becomes an all-defaults record."""
    try:
        return schema.normalize(raw, tables)
    except (TypeError, ValueError, AttributeError) as exc:
        logger.warning("Malformed %s record degraded to defaults: %s", schema.kind.value, exc)
        return schema.record_cls()


def normalize_payload(
    payload: Any,
    kind: EntityKind | str,
    registry: Optional[EntityRegistry] = None,
    tables: Optional[StatusTables] = None,
) -> list[Record]:
    """Unwrap `payload` and normalize every element into a fresh canonical list."""
    schema = (registry or default_registry()).get(kind)
    return [normalize_record(schema, raw, tables) for raw in unwrap_envelope(payload, schema.envelope_key)]


def _sort_key(record: Record, attr: str) -> datetime:
    parsed = parse_timestamp(getattr(record, attr, None))
    if parsed is None:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_newest_first(records: list[Record], attr: str) -> list[Record]:
    """Newest first by timestamp attribute; records without one sink to the end."""
    return sorted(records, key=lambda r: _sort_key(r, attr), reverse=True)
