"""Search, categorical filters and option lists over canonical collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from foodadmin.core.coerce import safe_number
from foodadmin.core.models import Availability, Delivery, Food, Purchase, Record, User, UserStatus
from foodadmin.core.status import status_label

ALL = "all"
CURRENCY_SYMBOL = "₨"
MISSING_LABEL = "—"


def format_price(price: Optional[float], symbol: str = CURRENCY_SYMBOL) -> str:
    if not price:
        return MISSING_LABEL
    return f"{symbol}{price:.0f}"


_SEARCH_STATES = frozenset(
    {Availability.AVAILABLE, Availability.UNAVAILABLE, UserStatus.ACTIVE, UserStatus.BLOCKED}
)


def search_status_label(status: Any) -> str:
    """Status text inside a search blob; unknown states contribute MISSING_LABEL, not a word."""
    if status in _SEARCH_STATES:
        return status_label(status)
    return MISSING_LABEL


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def food_search_fields(food: Food) -> list[str]:
    return [
        _text(food.id),
        _text(food.name),
        _text(food.description),
        _text(food.category),
        _text(food.cuisine),
        search_status_label(food.availability),
        format_price(food.price),
        " ".join(food.ingredients),
        " ".join(food.tags),
        _text(food.added_by),
    ]


def user_search_fields(user: User) -> list[str]:
    return [
        _text(user.id),
        _text(user.first_name),
        _text(user.last_name),
        _text(user.gender),
        search_status_label(user.status),
        _text(user.account_type),
    ]


def purchase_search_fields(purchase: Purchase) -> list[str]:
    return [
        _text(purchase.id),
        _text(purchase.food_name),
        purchase.payment_method,
        _text(purchase.status),
        _text(purchase.added_by),
        _text(purchase.updated_by),
        _text(purchase.description),
        _text(purchase.note),
    ]


def delivery_search_fields(delivery: Delivery) -> list[str]:
    return [
        _text(delivery.id),
        _text(delivery.order_id),
        delivery.customer_name,
        delivery.customer_email,
        delivery.customer_phone,
        delivery.delivery_address,
        _text(delivery.status),
        _text(delivery.driver_name),
        _text(delivery.driver_phone),
        _text(delivery.notes),
    ]


def search_blob(record: Record) -> str:
    """Lowercased, space-joined projection of the searchable fields of a record."""
    if isinstance(record, Food):
        values = food_search_fields(record)
    elif isinstance(record, User):
        values = user_search_fields(record)
    elif isinstance(record, Purchase):
        values = purchase_search_fields(record)
    elif isinstance(record, Delivery):
        values = delivery_search_fields(record)
    else:
        raise TypeError(f"Unsupported record type: {type(record).__name__}")
    return " ".join(values).lower()


def search(records: Iterable[Record], query: Optional[str]) -> list[Record]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    return [r for r in records if needle in search_blob(r)]


def _is_all(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() == ALL)


def apply_filters(records: Iterable[Record], filters: Optional[Mapping[str, Any]]) -> list[Record]:
    """
    Keep records whose attributes equal every filter value (case-insensitive).

    A filter value of "all" (or None) disables that filter.
    """
    active = {k: _text(v).strip().lower() for k, v in (filters or {}).items() if not _is_all(v)}
    if not active:
        return list(records)
    return [
        r
        for r in records
        if all(_text(getattr(r, attr, None)).strip().lower() == value for attr, value in active.items())
    ]


def apply_minimums(records: Iterable[Record], minimums: Optional[Mapping[str, Any]]) -> list[Record]:
    """Keep records whose numeric attributes reach each threshold; missing counts as 0."""
    active: dict[str, float] = {}
    for attr, raw in (minimums or {}).items():
        if _is_all(raw):
            continue
        threshold = safe_number(raw)
        if threshold is None:
            raise ValueError(f"Minimum for {attr!r} is not a number: {raw!r}")
        active[attr] = threshold
    if not active:
        return list(records)
    return [
        r
        for r in records
        if all((safe_number(getattr(r, attr, None)) or 0.0) >= value for attr, value in active.items())
    ]


def distinct_values(records: Iterable[Record], attr: str) -> list[str]:
    """Sorted, non-empty values of `attr` (the options of a categorical filter)."""
    return sorted({_text(getattr(r, attr, None)) for r in records} - {""})


@dataclass
class CollectionQuery:
    """A search box plus any number of categorical and minimum filters."""

    query: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    minimums: dict[str, Any] = field(default_factory=dict)

    def run(self, records: Sequence[Record]) -> list[Record]:
        result = apply_filters(records, self.filters)
        result = apply_minimums(result, self.minimums)
        return search(result, self.query)
