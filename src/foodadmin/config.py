"""API configuration and endpoint table.

Configuration is an explicit, immutable object handed to the transport and
repositories; nothing here is module-level mutable state.

Env vars read by ApiConfig.from_env() (a local .env file is honoured):
    FOODADMIN_SERVER_HOST      -> API gateway root URL.
    FOODADMIN_USER_PREFIX      -> Path prefix of the user service.
    FOODADMIN_FOOD_PREFIX      -> Path prefix of the food service.
    FOODADMIN_PURCHASE_PREFIX  -> Path prefix of the purchase service.
    FOODADMIN_DELIVERY_PREFIX  -> Path prefix of the delivery service.
    FOODADMIN_TIMEOUT          -> Request timeout in seconds.
    FOODADMIN_ACCESS_TOKEN     -> Static bearer token (service calls).
    FOODADMIN_ID_TOKEN         -> Static id token (user service calls).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional

from dotenv import load_dotenv

TokenProvider = Callable[[], Optional[str]]

DEFAULT_SERVER_HOST = "https://tanawal-apim.azure-api.net/"


@dataclass(frozen=True)
class ApiConfig:
    server_host: str = DEFAULT_SERVER_HOST
    user_prefix: str = "FoodUserManagement"
    food_prefix: str = "food-management"
    purchase_prefix: str = "food-purchase-management"
    delivery_prefix: str = "food-delivery-management"
    timeout: float = 10.0
    access_token: Optional[TokenProvider] = None
    """Returns the bearer token for service calls, or None."""

    id_token: Optional[TokenProvider] = None
    """Returns the id token sent to the user service, or None."""

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "ApiConfig":
        if dotenv:
            load_dotenv()
        access = os.getenv("FOODADMIN_ACCESS_TOKEN")
        id_token = os.getenv("FOODADMIN_ID_TOKEN")
        timeout = os.getenv("FOODADMIN_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else cls.timeout
        except ValueError:
            raise ValueError(f"FOODADMIN_TIMEOUT is not a number: {timeout!r}") from None
        return cls(
            server_host=os.getenv("FOODADMIN_SERVER_HOST", cls.server_host),
            user_prefix=os.getenv("FOODADMIN_USER_PREFIX", cls.user_prefix),
            food_prefix=os.getenv("FOODADMIN_FOOD_PREFIX", cls.food_prefix),
            purchase_prefix=os.getenv("FOODADMIN_PURCHASE_PREFIX", cls.purchase_prefix),
            delivery_prefix=os.getenv("FOODADMIN_DELIVERY_PREFIX", cls.delivery_prefix),
            timeout=timeout_value,
            access_token=(lambda: access) if access else None,
            id_token=(lambda: id_token) if id_token else None,
        )

    def service_url(self, prefix: str) -> str:
        return f"{self.server_host.rstrip('/')}/{prefix.strip('/')}"

    def is_user_service(self, url: str) -> bool:
        return url.startswith(self.service_url(self.user_prefix))


@dataclass(frozen=True)
class Endpoints:
    """Absolute URLs of every backend call the admin uses."""

    get_users: str
    update_user: str
    delete_user: str
    update_user_status: str
    add_address: str
    get_address: str
    get_foods: str
    add_food: str
    update_food: str
    delete_food: str
    get_orders: str
    get_order: str
    update_order: str
    delete_order: str
    deliveries: str

    @classmethod
    def from_config(cls, config: ApiConfig) -> "Endpoints":
        users = config.service_url(config.user_prefix)
        foods = config.service_url(config.food_prefix)
        purchases = config.service_url(config.purchase_prefix)
        deliveries = config.service_url(config.delivery_prefix)
        return cls(
            get_users=f"{users}/GetUserList",
            update_user=f"{users}/UpdateFoodUser",
            delete_user=f"{users}/DeleteFoodUser",
            update_user_status=f"{users}/ChangeUserStatus",
            add_address=f"{users}/AddAddress",
            get_address=f"{users}/GetAddressByUserId",
            get_foods=f"{foods}/GetFoodList",
            add_food=f"{foods}/AddFoodList",
            update_food=f"{foods}/UpdateFoodList",
            delete_food=f"{foods}/DeleteFoodList",
            get_orders=f"{purchases}/GetFoodPurchaseList",
            get_order=f"{purchases}/GetOrderById",
            update_order=f"{purchases}/UpdateOrder",
            delete_order=f"{purchases}/DeleteOrder",
            deliveries=f"{deliveries}/Deliveries",
        )
