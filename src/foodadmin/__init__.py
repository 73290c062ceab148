"""foodadmin: normalization, querying and optimistic mutation core for a food-ordering admin."""

__version__ = "0.1.0"

# Core exports
from foodadmin.core.models import (
    EntityKind,
    User,
    Food,
    Purchase,
    Delivery,
    UserStatus,
    Availability,
    OrderStatus,
    DeliveryStatus,
)
from foodadmin.core.envelope import normalize_payload, unwrap_envelope
from foodadmin.core.registry import EntityRegistry, EntitySchema, default_registry
from foodadmin.core.query import CollectionQuery
from foodadmin.core.mutations import RecordCollection, MutationBusy
from foodadmin.core.pipeline import EntityView
from foodadmin.config import ApiConfig, Endpoints
from foodadmin.transport import HttpTransport, TransportError, UnauthorizedError

__all__ = [
    "EntityKind",
    "User",
    "Food",
    "Purchase",
    "Delivery",
    "UserStatus",
    "Availability",
    "OrderStatus",
    "DeliveryStatus",
    "normalize_payload",
    "unwrap_envelope",
    "EntityRegistry",
    "EntitySchema",
    "default_registry",
    "CollectionQuery",
    "RecordCollection",
    "MutationBusy",
    "EntityView",
    "ApiConfig",
    "Endpoints",
    "HttpTransport",
    "TransportError",
    "UnauthorizedError",
]
