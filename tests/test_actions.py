"""Optimistic admin action tests."""

from typing import Any, Optional

import pytest

from foodadmin.actions import (
    cancel_delivery,
    delete_food,
    delete_order,
    toggle_food_availability,
    toggle_user_block,
)
from foodadmin.config import ApiConfig, Endpoints
from foodadmin.core.models import (
    Availability,
    Delivery,
    DeliveryStatus,
    EntityKind,
    Food,
    Purchase,
    User,
    UserStatus,
)
from foodadmin.core.mutations import RecordCollection
from foodadmin.repositories import DeliveryRepository, FoodRepository, OrderRepository, UserRepository
from foodadmin.transport import TransportError


ENDPOINTS = Endpoints.from_config(ApiConfig(server_host="https://api.example.test"))


class FakeTransport:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple] = []

    def get(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self.send("GET", url, params=params)

    def send(self, method: str, url: str, body: Any = None, params: Optional[dict[str, Any]] = None) -> Any:
        self.calls.append((method, url, body, params))
        if self.fail:
            raise TransportError(f"{method} {url} returned 500", status_code=500)
        return None


def _foods() -> RecordCollection[Food]:
    return RecordCollection(
        EntityKind.FOOD,
        [Food(id=1, availability=Availability.AVAILABLE), Food(id=2, availability=Availability.UNKNOWN)],
    )


def test_toggle_food_availability() -> None:
    transport = FakeTransport()
    foods = _foods()
    updated = toggle_food_availability(foods, 1, FoodRepository(transport, ENDPOINTS))
    assert updated.availability is Availability.UNAVAILABLE
    assert transport.calls[-1][2] == {"id": "1", "isAvailable": False}

    unknown = toggle_food_availability(foods, 2, FoodRepository(transport, ENDPOINTS))
    assert unknown.availability is Availability.AVAILABLE
    assert transport.calls[-1][2] == {"id": "2", "isAvailable": True}


def test_toggle_food_rolls_back_on_failure() -> None:
    foods = _foods()
    with pytest.raises(TransportError):
        toggle_food_availability(foods, 1, FoodRepository(FakeTransport(fail=True), ENDPOINTS))
    assert foods.get(1).availability is Availability.AVAILABLE
    assert foods.get(2).availability is Availability.UNKNOWN


def test_toggle_user_block() -> None:
    transport = FakeTransport()
    users = RecordCollection(EntityKind.USER, [User(id=4, status=UserStatus.ACTIVE)])
    repo = UserRepository(transport, ENDPOINTS)

    blocked = toggle_user_block(users, 4, repo, reason="spam", acted_by_user_id=1)
    assert blocked.status is UserStatus.BLOCKED
    assert transport.calls[-1][2] == {"block": True, "reason": "spam", "actedByUserId": 1}

    active = toggle_user_block(users, 4, repo, reason="spam")
    assert active.status is UserStatus.ACTIVE
    assert transport.calls[-1][2] == {"block": False}


def test_delete_actions_restore_on_failure() -> None:
    orders = RecordCollection(EntityKind.PURCHASE, [Purchase(id=1), Purchase(id=2)])
    with pytest.raises(TransportError):
        delete_order(orders, 2, OrderRepository(FakeTransport(fail=True), ENDPOINTS))
    assert [o.id for o in orders] == [1, 2]

    delete_order(orders, 2, OrderRepository(FakeTransport(), ENDPOINTS))
    assert [o.id for o in orders] == [1]

    foods = _foods()
    delete_food(foods, 1, FoodRepository(FakeTransport(), ENDPOINTS))
    assert [f.id for f in foods] == [2]


def test_cancel_delivery() -> None:
    deliveries = RecordCollection(EntityKind.DELIVERY, [Delivery(id=3, status=DeliveryStatus.ASSIGNED)])
    transport = FakeTransport()
    cancelled = cancel_delivery(deliveries, 3, DeliveryRepository(transport, ENDPOINTS))
    assert cancelled.status is DeliveryStatus.CANCELLED
    assert transport.calls[-1][0] == "DELETE"

    failing = RecordCollection(EntityKind.DELIVERY, [Delivery(id=3, status=DeliveryStatus.ASSIGNED)])
    with pytest.raises(TransportError):
        cancel_delivery(failing, 3, DeliveryRepository(FakeTransport(fail=True), ENDPOINTS))
    assert failing.get(3).status is DeliveryStatus.ASSIGNED
