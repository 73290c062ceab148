"""Entity schema registry and discovery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from foodadmin.core.interfaces import Normalizer
from foodadmin.core.models import Delivery, EntityKind, Food, Purchase, User
from foodadmin.core.normalizers import (
    normalize_delivery,
    normalize_food,
    normalize_purchase,
    normalize_user,
)


@dataclass(frozen=True)
class EntitySchema:
    """How one entity kind is unwrapped, normalized and ordered."""

    kind: EntityKind
    envelope_key: str
    """List key inside the response envelope (e.g. 'Foods')."""

    record_cls: type
    normalize: Normalizer
    newest_first_by: Optional[str] = None
    """Timestamp attribute used to order a fresh collection, if any."""


class EntityRegistry:
    """
    Registry for entity schemas.

    Schemas are registered by kind and can be discovered from a raw payload's
    envelope key.
    """

    def __init__(self) -> None:
        self._schemas: dict[EntityKind, EntitySchema] = {}

    def register(self, schema: EntitySchema) -> None:
        """
        Register a schema by its kind.

        Raises:
            ValueError: If a schema for the same kind is already registered
        """
        if schema.kind in self._schemas:
            raise ValueError(f"Schema for kind='{schema.kind.value}' is already registered")
        self._schemas[schema.kind] = schema

    def get(self, kind: EntityKind | str) -> EntitySchema:
        """
        Retrieve a schema by kind (enum or its value, e.g. 'foods').

        Raises:
            ValueError: If the kind is unknown or not registered
        """
        try:
            key = EntityKind(kind)
        except ValueError:
            raise ValueError(f"Unknown entity kind: {kind!r}") from None
        schema = self._schemas.get(key)
        if schema is None:
            raise ValueError(f"No schema registered for kind='{key.value}'")
        return schema

    def find_compatible(self, payload: Any) -> Optional[EntitySchema]:
        """
        Find the schema whose envelope key appears in `payload`.

        Looks at `{key: [...]}` and `{"Value": {key: [...]}}`; bare lists carry
        no key and return None.
        """
        if not isinstance(payload, dict):
            return None
        candidates = [payload]
        if isinstance(payload.get("Value"), dict):
            candidates.insert(0, payload["Value"])
        for envelope in candidates:
            for schema in self._schemas.values():
                if isinstance(envelope.get(schema.envelope_key), list):
                    return schema
        return None

    def list_all(self) -> dict[EntityKind, EntitySchema]:
        return dict(self._schemas)


def default_registry() -> EntityRegistry:
    """Registry holding the four built-in entity schemas."""
    registry = EntityRegistry()
    registry.register(EntitySchema(EntityKind.USER, "Users", User, normalize_user))
    registry.register(EntitySchema(EntityKind.FOOD, "Foods", Food, normalize_food))
    registry.register(
        EntitySchema(
            EntityKind.PURCHASE,
            "FoodPurchase",
            Purchase,
            normalize_purchase,
            newest_first_by="purchase_date",
        )
    )
    registry.register(
        EntitySchema(
            EntityKind.DELIVERY,
            "Deliveries",
            Delivery,
            normalize_delivery,
            newest_first_by="created_at",
        )
    )
    return registry
