"""
Optimistic mutations over an in-memory canonical collection.

A record moves through CLEAN -> PENDING(snapshot) -> CLEAN on confirmation,
or PENDING -> REVERTED(snapshot) when the remote call fails. Only one record
per collection may be in flight (`busy_id`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from foodadmin.core.models import EntityKind

logger = logging.getLogger(__name__)

R = TypeVar("R")


class MutationPhase(str, Enum):
    CLEAN = "clean"
    PENDING = "pending"
    REVERTED = "reverted"


class MutationEvent(str, Enum):
    BEGIN = "begin"
    CONFIRM = "confirm"
    FAIL = "fail"


class InvalidTransition(RuntimeError):
    """Raised for an event the current phase does not accept."""


class MutationBusy(RuntimeError):
    """Raised when a mutation starts while another record is in flight."""


@dataclass(frozen=True)
class MutationState(Generic[R]):
    phase: MutationPhase = MutationPhase.CLEAN
    snapshot: Optional[R] = None


def transition(state: MutationState[R], event: MutationEvent, snapshot: Optional[R] = None) -> MutationState[R]:
    """
    Pure transition function of the optimistic-update state machine.

    Raises:
        InvalidTransition: If `event` is not allowed in `state.phase`
    """
    if event == MutationEvent.BEGIN and state.phase in (MutationPhase.CLEAN, MutationPhase.REVERTED):
        return MutationState(MutationPhase.PENDING, snapshot)
    if event == MutationEvent.CONFIRM and state.phase == MutationPhase.PENDING:
        return MutationState(MutationPhase.CLEAN, None)
    if event == MutationEvent.FAIL and state.phase == MutationPhase.PENDING:
        return MutationState(MutationPhase.REVERTED, state.snapshot)
    raise InvalidTransition(f"Cannot apply {event.value} in phase {state.phase.value}")


class RecordCollection(Generic[R]):
    """
    The in-memory list of canonical records backing one admin view.

    `replace` swaps the whole list after a fetch; `update` and `remove` apply
    a change immediately, call `commit`, and restore the prior record if the
    commit raises.
    """

    def __init__(self, kind: EntityKind, records: Iterable[R] = (), id_attr: str = "id") -> None:
        self.kind = kind
        self.id_attr = id_attr
        self._records: list[R] = list(records)
        self.busy_id: Any = None
        self.state: MutationState[R] = MutationState()

    @property
    def records(self) -> list[R]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))

    def replace(self, records: Iterable[R]) -> None:
        self._records = list(records)

    def get(self, record_id: Any) -> Optional[R]:
        index = self._index_of(record_id)
        return None if index is None else self._records[index]

    def is_busy(self, record_id: Any = None) -> bool:
        if record_id is None:
            return self.busy_id is not None
        return self.busy_id == record_id

    def _index_of(self, record_id: Any) -> Optional[int]:
        for index, record in enumerate(self._records):
            if getattr(record, self.id_attr, None) == record_id:
                return index
        return None

    def _begin(self, record_id: Any, snapshot: R) -> None:
        if self.busy_id is not None:
            raise MutationBusy(f"{self.kind.value} record {self.busy_id!r} is already being updated")
        self.state = transition(self.state, MutationEvent.BEGIN, snapshot)
        self.busy_id = record_id

    def _finish(self, event: MutationEvent) -> None:
        self.state = transition(self.state, event)
        self.busy_id = None

    def update(self, record_id: Any, change: Callable[[R], R], commit: Callable[[R], Any]) -> R:
        """
        Apply `change` to one record now and confirm it with `commit`.

        Returns the updated record. If `commit` raises, the record is restored
        to its prior value and the exception propagates.

        Raises:
            KeyError: If no record has `record_id`
            MutationBusy: If another mutation is in flight
        """
        index = self._index_of(record_id)
        if index is None:
            raise KeyError(record_id)
        before = self._records[index]
        after = change(before)
        self._begin(record_id, before)
        self._records[index] = after
        try:
            commit(after)
        except Exception:
            current = self._index_of(record_id)
            if current is not None:
                self._records[current] = before
            logger.warning("Rolled back %s record %r after failed update", self.kind.value, record_id)
            self._finish(MutationEvent.FAIL)
            raise
        self._finish(MutationEvent.CONFIRM)
        return after

    def remove(self, record_id: Any, commit: Callable[[R], Any]) -> R:
        """
        Drop one record now and confirm with `commit`; re-insert it at its old
        position if `commit` raises.
        """
        index = self._index_of(record_id)
        if index is None:
            raise KeyError(record_id)
        before = self._records[index]
        self._begin(record_id, before)
        del self._records[index]
        try:
            commit(before)
        except Exception:
            self._records.insert(min(index, len(self._records)), before)
            logger.warning("Restored %s record %r after failed delete", self.kind.value, record_id)
            self._finish(MutationEvent.FAIL)
            raise
        self._finish(MutationEvent.CONFIRM)
        return before
