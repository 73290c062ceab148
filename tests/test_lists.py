"""Tests for list-like field parsing."""

from foodadmin.core.lists import dedupe_casefold, parse_list


def test_json_array_string() -> None:
    assert parse_list('["Rice", "Beans", "rice"]') == ["Rice", "Beans"]


def test_delimited_text() -> None:
    assert parse_list("Rice, Beans\nCorn,,  ") == ["Rice", "Beans", "Corn"]


def test_json_that_is_not_an_array_is_split() -> None:
    assert parse_list('"spicy"') == ['"spicy"']
    assert parse_list("42") == ["42"]


def test_native_sequences() -> None:
    assert parse_list(["a", None, " b ", "A"]) == ["a", "b"]
    assert parse_list(("x", 1)) == ["x", "1"]


def test_empty_and_unsupported_values() -> None:
    assert parse_list(None) == []
    assert parse_list("") == []
    assert parse_list("   ") == []
    assert parse_list({"a": 1}) == []
    assert parse_list(True) == []


def test_dedupe_keeps_first_casing() -> None:
    assert dedupe_casefold(["Egg", "egg", "EGG", "Milk"]) == ["Egg", "Milk"]


def test_case_insensitive_dedup_keeps_first_casing() -> None:
    assert parse_list("a, A, b") == ["a", "b"]


def test_malformed_json_falls_back_to_splitting() -> None:
    assert parse_list('["x", "y"') == ['["x"', '"y"']


def test_parsing_is_idempotent() -> None:
    for raw in ("a, A, b", '["x","y"]', "Rice\nbeans, RICE", ["p", " q ", "P"]):
        once = parse_list(raw)
        assert parse_list(once) == once
