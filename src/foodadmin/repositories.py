"""Repositories: one per entity, raw calls plus normalized loading."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from foodadmin.config import Endpoints
from foodadmin.core.envelope import normalize_payload
from foodadmin.core.interfaces import Transport
from foodadmin.core.models import Delivery, DeliveryStatus, EntityKind, Food, Purchase, User
from foodadmin.core.status import StatusTables


class _Repository(ABC):
    kind: EntityKind

    def __init__(
        self,
        transport: Transport,
        endpoints: Endpoints,
        tables: Optional[StatusTables] = None,
    ) -> None:
        self.transport = transport
        self.endpoints = endpoints
        self.tables = tables

    @abstractmethod
    def fetch(self) -> Any:
        """Raw list payload for this entity kind."""

    def _normalize(self, payload: Any) -> list[Any]:
        return normalize_payload(payload, self.kind, tables=self.tables)


class UserRepository(_Repository):
    kind = EntityKind.USER

    def fetch(self) -> Any:
        return self.transport.get(self.endpoints.get_users)

    def load(self) -> list[User]:
        return self._normalize(self.fetch())

    def update_user_status(
        self,
        user_id: Any,
        block: bool,
        reason: Optional[str] = None,
        acted_by_user_id: Optional[Any] = None,
    ) -> Any:
        body: dict[str, Any] = {"block": block}
        if reason:
            body["reason"] = reason
        if acted_by_user_id is not None:
            body["actedByUserId"] = acted_by_user_id
        return self.transport.send(
            "PUT", self.endpoints.update_user_status, body=body, params={"UserId": user_id}
        )

    def update_user(self, user_id: Any, **changes: Any) -> Any:
        return self.transport.send("PUT", self.endpoints.update_user, body={"id": user_id, **changes})

    def delete_user(self, user_id: Any) -> None:
        self.transport.send("DELETE", f"{self.endpoints.delete_user}/{user_id}")

    def add_address(self, user_id: Any, address: str) -> None:
        self.transport.send(
            "POST", self.endpoints.add_address, body={"userId": user_id, "address": address}
        )

    def get_addresses(self, user_id: Any) -> Any:
        return self.transport.get(f"{self.endpoints.get_address}/{user_id}")


class FoodRepository(_Repository):
    kind = EntityKind.FOOD

    def fetch(self) -> Any:
        return self.transport.get(self.endpoints.get_foods, params={"admin": "true"})

    def load(self) -> list[Food]:
        return self._normalize(self.fetch())

    def add_food(
        self,
        name: str,
        price: float,
        description: Optional[str] = None,
        category: Optional[str] = None,
        image_url: Optional[str] = None,
        is_available: Optional[bool] = None,
    ) -> Any:
        body: dict[str, Any] = {"name": name, "price": price}
        optional = {
            "description": description,
            "category": category,
            "imageUrl": image_url,
            "isAvailable": is_available,
        }
        body.update({k: v for k, v in optional.items() if v is not None})
        return self.transport.send("POST", self.endpoints.add_food, body=body)

    def update_food(self, food_id: Any, **changes: Any) -> Any:
        return self.transport.send(
            "PUT", self.endpoints.update_food, body={"id": str(food_id), **changes}
        )

    def set_availability(self, food_id: Any, is_available: bool) -> Any:
        return self.update_food(food_id, isAvailable=is_available)

    def delete_food(self, food_id: Any) -> None:
        self.transport.send("DELETE", f"{self.endpoints.delete_food}/{food_id}")


class OrderRepository(_Repository):
    kind = EntityKind.PURCHASE

    def fetch(self) -> Any:
        return self.transport.get(self.endpoints.get_orders)

    def load(self) -> list[Purchase]:
        return self._normalize(self.fetch())

    def get_order(self, order_id: Any) -> Purchase:
        payload = self.transport.get(f"{self.endpoints.get_order}/{order_id}")
        records = self._normalize([payload] if isinstance(payload, dict) else payload)
        return records[0] if records else Purchase()

    def update_order(self, order_id: Any, status: Optional[str] = None, notes: Optional[str] = None) -> Any:
        body: dict[str, Any] = {"id": order_id}
        if status is not None:
            body["status"] = status
        if notes is not None:
            body["notes"] = notes
        return self.transport.send("PUT", self.endpoints.update_order, body=body)

    def delete_order(self, order_id: Any) -> None:
        self.transport.send("DELETE", f"{self.endpoints.delete_order}/{order_id}")


class DeliveryRepository(_Repository):
    kind = EntityKind.DELIVERY

    def fetch(self) -> Any:
        return self.transport.get(self.endpoints.deliveries)

    def load(self) -> list[Delivery]:
        return self._normalize(self.fetch())

    def get_delivery(self, delivery_id: Any) -> Delivery:
        payload = self.transport.get(f"{self.endpoints.deliveries}/{delivery_id}")
        records = self._normalize([payload] if isinstance(payload, dict) else payload)
        return records[0] if records else Delivery()

    def update_delivery(
        self,
        delivery_id: Any,
        status: DeliveryStatus,
        driver_name: Optional[str] = None,
        driver_phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Any:
        body: dict[str, Any] = {"id": delivery_id, "status": status.value}
        optional = {"driverName": driver_name, "driverPhone": driver_phone, "notes": notes}
        body.update({k: v for k, v in optional.items() if v is not None})
        return self.transport.send("PUT", f"{self.endpoints.deliveries}/{delivery_id}", body=body)

    def cancel_delivery(self, delivery_id: Any) -> None:
        self.transport.send("DELETE", f"{self.endpoints.deliveries}/{delivery_id}")
