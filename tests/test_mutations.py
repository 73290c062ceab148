"""Tests for the optimistic-update state machine and record collection."""

import dataclasses

import pytest

from foodadmin.core.models import Availability, EntityKind, Food
from foodadmin.core.mutations import (
    InvalidTransition,
    MutationBusy,
    MutationEvent,
    MutationPhase,
    MutationState,
    RecordCollection,
    transition,
)


def _foods() -> list[Food]:
    return [
        Food(id=1, name="Noodles", availability=Availability.AVAILABLE),
        Food(id=2, name="Salad", availability=Availability.UNAVAILABLE),
        Food(id=3, name="Curry", availability=Availability.AVAILABLE),
    ]


def _disable(food: Food) -> Food:
    return dataclasses.replace(food, availability=Availability.UNAVAILABLE)


def _fail(_record) -> None:
    raise RuntimeError("backend down")


def test_transitions() -> None:
    state = MutationState()
    pending = transition(state, MutationEvent.BEGIN, "snap")
    assert pending == MutationState(MutationPhase.PENDING, "snap")
    assert transition(pending, MutationEvent.CONFIRM) == MutationState(MutationPhase.CLEAN, None)
    reverted = transition(pending, MutationEvent.FAIL)
    assert reverted == MutationState(MutationPhase.REVERTED, "snap")
    assert transition(reverted, MutationEvent.BEGIN, "next").phase is MutationPhase.PENDING


@pytest.mark.parametrize("event", [MutationEvent.CONFIRM, MutationEvent.FAIL])
def test_invalid_transitions(event) -> None:
    with pytest.raises(InvalidTransition):
        transition(MutationState(), event)


def test_update_confirms() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())
    committed = []
    updated = collection.update(1, _disable, committed.append)
    assert updated.availability is Availability.UNAVAILABLE
    assert committed == [updated]
    assert collection.get(1) == updated
    assert collection.state.phase is MutationPhase.CLEAN
    assert not collection.is_busy()


def test_failed_update_restores_only_that_record() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())
    before = collection.records
    with pytest.raises(RuntimeError, match="backend down"):
        collection.update(1, _disable, _fail)
    assert collection.records == before
    assert collection.state.phase is MutationPhase.REVERTED
    assert not collection.is_busy()


def test_rollback_keeps_other_changes() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())

    def commit_then_fail(_food: Food) -> None:
        collection._records[2] = dataclasses.replace(collection._records[2], name="Curry v2")
        raise RuntimeError("backend down")

    with pytest.raises(RuntimeError):
        collection.update(1, _disable, commit_then_fail)
    assert collection.get(1).availability is Availability.AVAILABLE
    assert collection.get(3).name == "Curry v2"


def test_busy_rejects_second_mutation() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())
    seen = []

    def nested(_food: Food) -> None:
        assert collection.is_busy(1)
        with pytest.raises(MutationBusy):
            collection.update(2, _disable, seen.append)

    collection.update(1, _disable, nested)
    assert seen == []
    assert collection.get(2).availability is Availability.UNAVAILABLE


def test_change_error_leaves_collection_idle() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())

    def broken(_food: Food) -> Food:
        raise ValueError("bad change")

    with pytest.raises(ValueError):
        collection.update(1, broken, lambda _: None)
    assert not collection.is_busy()
    assert collection.state.phase is MutationPhase.CLEAN


def test_remove_and_restore_position() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())
    with pytest.raises(RuntimeError):
        collection.remove(2, _fail)
    assert [f.id for f in collection] == [1, 2, 3]

    removed = collection.remove(2, lambda _: None)
    assert removed.name == "Salad"
    assert [f.id for f in collection] == [1, 3]
    assert len(collection) == 2


def test_unknown_id_raises_key_error() -> None:
    collection = RecordCollection(EntityKind.FOOD, _foods())
    with pytest.raises(KeyError):
        collection.update(99, _disable, lambda _: None)
    with pytest.raises(KeyError):
        collection.remove(99, lambda _: None)
