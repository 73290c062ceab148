"""Tests for envelope unwrapping, payload normalization and ordering."""

import json
from pathlib import Path

import pytest

from foodadmin.core.envelope import normalize_payload, sort_newest_first, unwrap_envelope
from foodadmin.core.models import Delivery, EntityKind, Food, OrderStatus, Purchase
from foodadmin.core.registry import EntityRegistry, EntitySchema, default_registry


FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _load(name: str):
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


@pytest.mark.parametrize(
    "payload",
    [
        [{"FoodID": 1}],
        {"Foods": [{"FoodID": 1}]},
        {"Value": {"Foods": [{"FoodID": 1}]}},
    ],
)
def test_unwrap_accepted_shapes(payload) -> None:
    assert unwrap_envelope(payload, "Foods") == [{"FoodID": 1}]


@pytest.mark.parametrize("payload", [{}, None, "text", {"Foods": "nope"}, {"Value": []}, {"Users": []}])
def test_unwrap_unrecognized_shapes(payload) -> None:
    assert unwrap_envelope(payload, "Foods") == []


def test_value_wrapper_checked_first() -> None:
    payload = {"Value": {"Foods": [{"FoodID": 2}]}, "Foods": [{"FoodID": 1}]}
    assert unwrap_envelope(payload, "Foods") == [{"FoodID": 2}]


def test_normalize_payload_from_fixture() -> None:
    foods = normalize_payload(_load("foods.json"), EntityKind.FOOD)
    assert [f.id for f in foods] == [1, 2, 3]
    assert all(isinstance(f, Food) for f in foods)


def test_normalize_payload_accepts_kind_value() -> None:
    orders = normalize_payload(_load("orders.json"), "orders")
    assert len(orders) == 4
    assert orders[2].status is OrderStatus.CANCELLED
    assert orders[2].payment_method == "Method 9"


def test_malformed_rows_become_default_records() -> None:
    deliveries = normalize_payload({"Deliveries": [None, "x", {"DeliveryID": 9}]}, EntityKind.DELIVERY)
    assert deliveries == [Delivery(), Delivery(), Delivery(id=9)]


def test_normalizer_errors_are_contained() -> None:
    def explode(raw, tables=None):
        raise ValueError("broken row")

    registry = EntityRegistry()
    registry.register(EntitySchema(EntityKind.FOOD, "Foods", Food, explode))
    assert normalize_payload({"Foods": [{}]}, EntityKind.FOOD, registry) == [Food()]


def test_sort_newest_first() -> None:
    orders = normalize_payload(_load("orders.json"), EntityKind.PURCHASE)
    ordered = sort_newest_first(orders, "purchase_date")
    assert [o.id for o in ordered] == [101, 100, 103, 102]


def test_sort_mixes_naive_and_aware_timestamps() -> None:
    records = [
        Purchase(id=1, purchase_date="2024-05-01T00:00:00"),
        Purchase(id=2, purchase_date="2024-05-02T00:00:00Z"),
    ]
    assert [r.id for r in sort_newest_first(records, "purchase_date")] == [2, 1]


def test_registry_lookup_and_discovery() -> None:
    registry = default_registry()
    assert registry.get("foods").envelope_key == "Foods"
    assert registry.get(EntityKind.PURCHASE).newest_first_by == "purchase_date"
    assert registry.find_compatible(_load("users.json")).kind is EntityKind.USER
    assert registry.find_compatible(_load("foods.json")).kind is EntityKind.FOOD
    assert registry.find_compatible(_load("orders.json")) is None
    assert set(registry.list_all()) == set(EntityKind)


def test_registry_rejects_unknown_and_duplicate_kinds() -> None:
    registry = default_registry()
    with pytest.raises(ValueError):
        registry.get("menus")
    with pytest.raises(ValueError):
        registry.register(registry.get(EntityKind.FOOD))
    with pytest.raises(ValueError):
        EntityRegistry().get(EntityKind.FOOD)
