"""View loading: fetch -> unwrap -> normalize -> order -> publish."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Optional

from foodadmin.core.envelope import normalize_payload, sort_newest_first
from foodadmin.core.models import EntityKind, Record
from foodadmin.core.mutations import RecordCollection
from foodadmin.core.registry import EntityRegistry, default_registry
from foodadmin.core.status import StatusTables

logger = logging.getLogger(__name__)


class EntityView:
    """
    One admin view over an entity kind.

    Each refresh builds a brand-new canonical list and replaces the collection
    wholesale. A refresh token guards publication: only the most recently
    started refresh may publish, and nothing publishes once the view is closed.
    """

    def __init__(
        self,
        kind: EntityKind | str,
        fetch: Callable[[], Any],
        registry: Optional[EntityRegistry] = None,
        tables: Optional[StatusTables] = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.schema = self.registry.get(kind)
        self.fetch = fetch
        self.tables = tables
        self.collection: RecordCollection[Record] = RecordCollection(self.schema.kind)
        self.error: Optional[str] = None
        self.loading = False
        self._tokens = itertools.count(1)
        self._latest = 0
        self._closed = False

    @property
    def kind(self) -> EntityKind:
        return self.schema.kind

    @property
    def records(self) -> list[Record]:
        return self.collection.records

    def build(self, payload: Any) -> list[Record]:
        records = normalize_payload(payload, self.schema.kind, self.registry, self.tables)
        if self.schema.newest_first_by:
            records = sort_newest_first(records, self.schema.newest_first_by)
        return records

    def begin_refresh(self) -> int:
        self._latest = next(self._tokens)
        self.loading = True
        self.error = None
        return self._latest

    def is_current(self, token: int) -> bool:
        return not self._closed and token == self._latest

    def publish(self, token: int, payload: Any) -> bool:
        """Replace the collection if `token` is still wanted; returns whether it was applied."""
        if not self.is_current(token):
            logger.debug("Dropping stale %s response (token %s)", self.kind.value, token)
            return False
        self.collection.replace(self.build(payload))
        self.loading = False
        return True

    def fail(self, token: int, exc: Exception) -> None:
        if self.is_current(token):
            self.error = str(exc) or f"Failed to load {self.kind.value}"
            self.loading = False

    def refresh(self) -> list[Record]:
        """
        Fetch and publish a fresh collection.

        Raises:
            Exception: Whatever `fetch` raises; the message is kept in `error`
        """
        token = self.begin_refresh()
        try:
            payload = self.fetch()
        except Exception as exc:
            logger.warning("Failed to load %s: %s", self.kind.value, exc)
            self.fail(token, exc)
            raise
        self.publish(token, payload)
        return self.records

    def close(self) -> None:
        self._closed = True
