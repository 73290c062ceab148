"""Status mappers: raw codes and free-text synonyms to canonical enums."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Generic, Type, TypeVar

import yaml

from foodadmin.core.coerce import tri_state
from foodadmin.core.models import Availability, DeliveryStatus, OrderStatus, UserStatus

logger = logging.getLogger(__name__)

E = TypeVar("E", OrderStatus, DeliveryStatus)

STATUS_TABLES_FILE = "status_tables.yaml"
UNKNOWN_LABEL = "Unknown"

_CODE_PATTERN = re.compile(r"^[+-]?\d+$")
_SEPARATORS = re.compile(r"[\s_\-]+")


def _load_yaml(path: Path | None, resource_name: str) -> dict[str, Any]:
    if path:
        file_path = path / resource_name
        if not file_path.exists():
            return {}
        with file_path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    try:
        resource = resources.files("foodadmin.templates").joinpath(resource_name)
        with resource.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}


def as_code(value: Any) -> int | None:
    """Integer code carried by `value` (int, integral float, or digit string)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str) and _CODE_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def normalize_token(value: str) -> str:
    return _SEPARATORS.sub("_", value.strip().lower()).strip("_")


@dataclass
class StatusMapper(Generic[E]):
    """
    Total mapping from a raw status value to one enum member.

    Numeric input goes through `codes`, text through `synonyms`; anything
    unmapped, including None, yields the enum's UNKNOWN member.
    """

    enum_cls: Type[E]
    codes: dict[int, E] = field(default_factory=dict)
    synonyms: dict[str, E] = field(default_factory=dict)

    @classmethod
    def from_table(cls, enum_cls: Type[E], table: dict[str, Any] | None) -> "StatusMapper[E]":
        table = table or {}
        codes: dict[int, E] = {}
        synonyms: dict[str, E] = {}
        for raw_code, raw_state in (table.get("codes") or {}).items():
            code = as_code(raw_code)
            state = _enum_value(enum_cls, raw_state)
            if code is None or state is None:
                logger.warning("Skipping %s code entry %r -> %r", enum_cls.__name__, raw_code, raw_state)
                continue
            codes[code] = state
        for raw_word, raw_state in (table.get("synonyms") or {}).items():
            state = _enum_value(enum_cls, raw_state)
            if raw_word is None or state is None:
                logger.warning("Skipping %s synonym %r -> %r", enum_cls.__name__, raw_word, raw_state)
                continue
            synonyms[normalize_token(str(raw_word))] = state
        return cls(enum_cls=enum_cls, codes=codes, synonyms=synonyms)

    @property
    def unknown(self) -> E:
        return self.enum_cls("unknown")

    def __call__(self, value: Any) -> E:
        code = as_code(value)
        if code is not None:
            return self.codes.get(code, self.unknown)
        if isinstance(value, str):
            return self.synonyms.get(normalize_token(value), self.unknown)
        return self.unknown


def _enum_value(enum_cls: Type[E], value: Any) -> E | None:
    try:
        return enum_cls(str(value))
    except ValueError:
        return None


@dataclass
class StatusTables:
    """All status and payment tables used by the normalizers."""

    order: StatusMapper[OrderStatus]
    delivery: StatusMapper[DeliveryStatus]
    payment_methods: dict[int, str] = field(default_factory=dict)


def load_status_tables(templates_path: str | Path | None = None) -> StatusTables:
    """Load tables from `templates_path` or from the packaged defaults."""
    base_path = Path(templates_path) if templates_path else None
    data = _load_yaml(base_path, STATUS_TABLES_FILE)
    if not data:
        logger.warning("No status tables found; every status will map to unknown")

    payment_methods: dict[int, str] = {}
    for raw_code, label in ((data.get("payment_method") or {}).get("codes") or {}).items():
        code = as_code(raw_code)
        if code is not None and label:
            payment_methods[code] = str(label)

    return StatusTables(
        order=StatusMapper.from_table(OrderStatus, data.get("order_status")),
        delivery=StatusMapper.from_table(DeliveryStatus, data.get("delivery_status")),
        payment_methods=payment_methods,
    )


@lru_cache(maxsize=1)
def default_tables() -> StatusTables:
    return load_status_tables()


def map_order_status(value: Any, tables: StatusTables | None = None) -> OrderStatus:
    return (tables or default_tables()).order(value)


def map_delivery_status(value: Any, tables: StatusTables | None = None) -> DeliveryStatus:
    return (tables or default_tables()).delivery(value)


def map_user_status(value: Any) -> UserStatus:
    state = tri_state(value)
    if state is True:
        return UserStatus.ACTIVE
    if state is False:
        return UserStatus.BLOCKED
    return UserStatus.UNKNOWN


def map_availability(value: Any) -> Availability:
    state = tri_state(value)
    if state is True:
        return Availability.AVAILABLE
    if state is False:
        return Availability.UNAVAILABLE
    return Availability.UNKNOWN


def _prettify(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text.replace("_", " "))


def payment_method_label(value: Any, tables: StatusTables | None = None) -> str:
    """
    Human label for a payment method.

    Codes come from the payment table (unknown codes read "Method {code}");
    text such as "credit_card" is prettified to "Credit Card".
    """
    code = as_code(value)
    if code is not None:
        return (tables or default_tables()).payment_methods.get(code, f"Method {code}")
    if isinstance(value, float) and math.isfinite(value):
        return f"Method {value:g}"
    if isinstance(value, str) and value.strip():
        return _prettify(value.strip())
    return UNKNOWN_LABEL


_LABELS = {
    UserStatus.ACTIVE: "Active",
    UserStatus.BLOCKED: "Blocked",
    Availability.AVAILABLE: "Available",
    Availability.UNAVAILABLE: "Unavailable",
}


def status_label(status: Any) -> str:
    """Display label for a canonical status; multi-word states read "In Transit"."""
    if status in _LABELS:
        return _LABELS[status]
    value = getattr(status, "value", None)
    if not value or value == "unknown":
        return UNKNOWN_LABEL
    return _prettify(str(value))
