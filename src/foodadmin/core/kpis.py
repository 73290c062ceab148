"""Aggregate indicators (counts, sums, averages, month buckets) per entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from foodadmin.core.coerce import parse_timestamp
from foodadmin.core.models import (
    Availability,
    Delivery,
    DeliveryStatus,
    Food,
    OrderStatus,
    Purchase,
    User,
    UserStatus,
)

T = TypeVar("T")

ORDER_AWAITING = frozenset({OrderStatus.PENDING, OrderStatus.IN_PROGRESS})
DELIVERY_PENDING = frozenset({DeliveryStatus.PENDING, DeliveryStatus.ASSIGNED})
DELIVERY_IN_TRANSIT = frozenset({DeliveryStatus.PICKED_UP, DeliveryStatus.IN_TRANSIT})


def count_where(records: Iterable[T], predicate: Callable[[T], bool]) -> int:
    return sum(1 for r in records if predicate(r))


def sum_where(
    records: Iterable[T],
    value: Callable[[T], Optional[float]],
    predicate: Callable[[T], bool] = lambda _: True,
) -> float:
    return float(sum(value(r) or 0.0 for r in records if predicate(r)))


def average_where(
    records: Iterable[T],
    value: Callable[[T], Optional[float]],
    predicate: Callable[[T], bool] = lambda _: True,
) -> float:
    """Mean of `value` over records passing `predicate`; 0.0 when none pass."""
    values = [value(r) or 0.0 for r in records if predicate(r)]
    if not values:
        return 0.0
    return sum(values) / len(values)


def count_in_month(records: Iterable[T], timestamp: Callable[[T], Optional[str]], now: datetime) -> int:
    """Records whose timestamp parses and falls in the calendar month of `now`."""

    def in_month(record: T) -> bool:
        parsed = parse_timestamp(timestamp(record))
        return parsed is not None and parsed.year == now.year and parsed.month == now.month

    return count_where(records, in_month)


@dataclass(frozen=True)
class FoodKpis:
    total: int
    available: int
    new_this_month: int
    average_price: float
    """Mean over items with a strictly positive price."""


@dataclass(frozen=True)
class UserKpis:
    total: int
    active: int
    blocked: int
    new_this_month: int


@dataclass(frozen=True)
class OrderKpis:
    total: int
    delivered: int
    awaiting: int
    """pending + in_progress."""

    average_order_value: float


@dataclass(frozen=True)
class DeliveryKpis:
    total: int
    delivered: int
    pending: int
    """pending + assigned."""

    in_transit: int
    """picked_up + in_transit."""

    total_revenue: float
    """Sum of fees over delivered deliveries."""


def food_kpis(foods: Sequence[Food], now: Optional[datetime] = None) -> FoodKpis:
    now = now or datetime.now()
    return FoodKpis(
        total=len(foods),
        available=count_where(foods, lambda f: f.availability == Availability.AVAILABLE),
        new_this_month=count_in_month(foods, lambda f: f.created_at, now),
        average_price=average_where(foods, lambda f: f.price, lambda f: (f.price or 0.0) > 0),
    )


def user_kpis(users: Sequence[User], now: Optional[datetime] = None) -> UserKpis:
    now = now or datetime.now()
    return UserKpis(
        total=len(users),
        active=count_where(users, lambda u: u.status == UserStatus.ACTIVE),
        blocked=count_where(users, lambda u: u.status == UserStatus.BLOCKED),
        new_this_month=count_in_month(users, lambda u: u.created_at, now),
    )


def order_kpis(orders: Sequence[Purchase]) -> OrderKpis:
    total = len(orders)
    return OrderKpis(
        total=total,
        delivered=count_where(orders, lambda o: o.status == OrderStatus.DELIVERED),
        awaiting=count_where(orders, lambda o: o.status in ORDER_AWAITING),
        average_order_value=(sum_where(orders, lambda o: o.final_price) / total) if total else 0.0,
    )


def delivery_kpis(deliveries: Sequence[Delivery]) -> DeliveryKpis:
    return DeliveryKpis(
        total=len(deliveries),
        delivered=count_where(deliveries, lambda d: d.status == DeliveryStatus.DELIVERED),
        pending=count_where(deliveries, lambda d: d.status in DELIVERY_PENDING),
        in_transit=count_where(deliveries, lambda d: d.status in DELIVERY_IN_TRANSIT),
        total_revenue=sum_where(
            deliveries, lambda d: d.delivery_fee, lambda d: d.status == DeliveryStatus.DELIVERED
        ),
    )
