"""Optimistic admin actions: change the local record first, confirm remotely."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional

from foodadmin.core.models import Availability, Delivery, DeliveryStatus, Food, Purchase, User, UserStatus
from foodadmin.core.mutations import RecordCollection
from foodadmin.repositories import DeliveryRepository, FoodRepository, OrderRepository, UserRepository


def toggle_food_availability(
    collection: RecordCollection[Food], food_id: Any, repository: FoodRepository
) -> Food:
    """
    Flip a food between available and unavailable.

    Unknown availability is treated as unavailable, so the first toggle makes
    the item available. Rolls back if the update call fails.
    """

    def change(food: Food) -> Food:
        target = Availability.UNAVAILABLE if food.is_available else Availability.AVAILABLE
        return dataclasses.replace(food, availability=target)

    return collection.update(
        food_id,
        change,
        lambda food: repository.set_availability(food_id, food.is_available),
    )


def toggle_user_block(
    collection: RecordCollection[User],
    user_id: Any,
    repository: UserRepository,
    reason: Optional[str] = None,
    acted_by_user_id: Optional[Any] = None,
) -> User:
    """Block an active or unknown user, unblock a blocked one."""

    def change(user: User) -> User:
        target = UserStatus.ACTIVE if user.status == UserStatus.BLOCKED else UserStatus.BLOCKED
        return dataclasses.replace(user, status=target)

    def commit(user: User) -> Any:
        block = user.status == UserStatus.BLOCKED
        return repository.update_user_status(
            user_id,
            block=block,
            reason=reason if block else None,
            acted_by_user_id=acted_by_user_id,
        )

    return collection.update(user_id, change, commit)


def delete_food(collection: RecordCollection[Food], food_id: Any, repository: FoodRepository) -> Food:
    return collection.remove(food_id, lambda _: repository.delete_food(food_id))


def delete_order(
    collection: RecordCollection[Purchase], order_id: Any, repository: OrderRepository
) -> Purchase:
    return collection.remove(order_id, lambda _: repository.delete_order(order_id))


def cancel_delivery(
    collection: RecordCollection[Delivery], delivery_id: Any, repository: DeliveryRepository
) -> Delivery:
    """Mark a delivery cancelled locally and cancel it on the backend."""
    return collection.update(
        delivery_id,
        lambda d: dataclasses.replace(d, status=DeliveryStatus.CANCELLED),
        lambda _: repository.cancel_delivery(delivery_id),
    )
