"""Tests for field resolution and table-driven extraction."""

from foodadmin.core.coerce import safe_number
from foodadmin.core.fields import MISSING, FieldSpec, extract_fields, resolve_field


def test_first_present_candidate_wins() -> None:
    raw = {"foodName": "b", "FoodName": "a"}
    assert resolve_field(raw, ("FoodName", "foodName")) == "a"
    assert resolve_field(raw, ("Name", "foodName")) == "b"


def test_present_none_is_returned() -> None:
    assert resolve_field({"Price": None, "price": 3}, ("Price", "price")) is None


def test_missing_uses_default() -> None:
    assert resolve_field({}, ("Price",)) is MISSING
    assert resolve_field({}, ("Price",), default=0) == 0
    assert resolve_field("not a mapping", ("Price",), default=1) == 1


def test_extract_fields_degrades_to_defaults() -> None:
    def explode(_value):
        raise ValueError("bad")

    specs = (
        FieldSpec("price", ("Price",), safe_number, default=0.0),
        FieldSpec("weight", ("Weight",), safe_number, default=1.0),
        FieldSpec("name", ("Name",), explode, default="fallback"),
    )
    values = extract_fields({"Price": "oops", "Name": "x"}, specs)
    assert values == {"price": 0.0, "weight": 1.0, "name": "fallback"}
