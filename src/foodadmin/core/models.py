"""Canonical records and enumerations produced by the normalizers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

Identifier = Union[int, str]


class EntityKind(str, Enum):
    """The four record kinds served by the admin backend."""

    USER = "users"
    FOOD = "foods"
    PURCHASE = "orders"
    DELIVERY = "deliveries"


class UserStatus(str, Enum):
    """Account state: active, blocked, or unknown."""

    ACTIVE = "active"
    BLOCKED = "blocked"
    UNKNOWN = "unknown"


class Availability(str, Enum):
    """Menu availability for a food item."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class OrderStatus(str, Enum):
    """Lifecycle of a purchase."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class DeliveryStatus(str, Enum):
    """Lifecycle of a delivery."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class User:
    """
    Normalized admin view of a platform user.

    Timestamps keep the backend's ISO string and are None when unparseable.
    """

    id: Optional[Identifier] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    status: UserStatus = UserStatus.UNKNOWN
    account_type: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


@dataclass(frozen=True)
class NutritionFacts:
    """Per-item nutrition as reported by the backend. Every value is optional."""

    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    sugar_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    serving_size: Optional[str] = None


@dataclass(frozen=True)
class CalorieEstimate:
    """
    Reported calories next to calories computed from macros.

    Both values are kept so that a disagreement stays visible.
    """

    estimated: Optional[float] = None
    """Calories reported by the backend (EstimatedCalories)."""

    calculated: Optional[int] = None
    """protein*4 + carbs*4 + fat*9, rounded; None when no macro is known."""

    tolerance: float = 0.15
    """Relative difference (against the estimate) above which the values conflict."""

    @property
    def conflicting(self) -> bool:
        if self.estimated is None or self.calculated is None:
            return False
        return abs(self.estimated - self.calculated) / max(1.0, self.estimated) > self.tolerance

    @property
    def preferred(self) -> Optional[float]:
        if self.estimated is not None:
            return self.estimated
        if self.calculated is not None:
            return float(self.calculated)
        return None

    def describe(self) -> str:
        if self.conflicting:
            return f"{_fmt_kcal(self.estimated)} kcal (est), ~{self.calculated} kcal (calc)"
        if self.preferred is None:
            return "Unknown"
        return f"{_fmt_kcal(self.preferred)} kcal"


def _fmt_kcal(value: Optional[float]) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class Food:
    """
    Normalized menu item.

    ingredients are de-duplicated case-insensitively; allergen_flags maps each
    ingredient to whether it matched the allergen keyword list.
    """

    id: Optional[Identifier] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    """Non-negative price, or None when missing or unparseable (distinct from 0)."""

    category: Optional[str] = None
    cuisine: Optional[str] = None
    availability: Availability = Availability.UNKNOWN
    nutrition: NutritionFacts = field(default_factory=NutritionFacts)
    calories: CalorieEstimate = field(default_factory=CalorieEstimate)
    ingredients: list[str] = field(default_factory=list)
    ingredients_raw: Optional[str] = None
    allergen_flags: dict[str, bool] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    rating: float = 0.0
    """Clamped to 0..5; missing ratings default to 0."""

    cooking_time_minutes: Optional[float] = None
    chef_id: Optional[str] = None
    added_by: Optional[str] = None
    confidence: Optional[float] = None
    origin: Optional[str] = None
    disclaimer: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.availability == Availability.AVAILABLE

    @property
    def allergens(self) -> list[str]:
        return [name for name, flagged in self.allergen_flags.items() if flagged]


@dataclass(frozen=True)
class Purchase:
    """Normalized order (a single food purchase)."""

    id: Optional[Identifier] = None
    food_id: Optional[Identifier] = None
    food_name: Optional[str] = None
    final_price: float = 0.0
    is_customized: bool = False
    description: Optional[str] = None
    note: Optional[str] = None
    rating: float = 0.0
    status: OrderStatus = OrderStatus.UNKNOWN
    payment_method: str = "Unknown"
    purchase_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    added_by: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass(frozen=True)
class Delivery:
    """Normalized delivery with customer and optional driver contact."""

    id: Optional[Identifier] = None
    order_id: Optional[Identifier] = None
    customer_name: str = "Unknown Customer"
    customer_email: str = ""
    customer_phone: str = ""
    delivery_address: str = ""
    status: DeliveryStatus = DeliveryStatus.UNKNOWN
    estimated_delivery_time: Optional[str] = None
    actual_delivery_time: Optional[str] = None
    delivery_fee: float = 0.0
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


Record = Union[User, Food, Purchase, Delivery]
