"""
Entity normalizers: raw backend rows -> canonical records.

Each entity is described by a mapping table of FieldSpec rows (target
attribute, candidate raw keys, coercion). Record defaults come from the
dataclasses in models.py, so a field that is missing or fails coercion falls
back to the documented default for that entity.
"""

from __future__ import annotations

import math
from dataclasses import fields as dataclass_fields
from functools import partial
from typing import Any, Iterable, Optional, Type, TypeVar

from foodadmin.core.coerce import (
    clamp_rating,
    identifier,
    is_true,
    non_negative_number,
    optional_text,
    safe_date,
    safe_number,
    text_or_empty,
)
from foodadmin.core.fields import FieldSpec, extract_fields
from foodadmin.core.lists import parse_list
from foodadmin.core.models import (
    CalorieEstimate,
    Delivery,
    Food,
    NutritionFacts,
    Purchase,
    User,
)
from foodadmin.core.status import (
    StatusTables,
    map_availability,
    map_delivery_status,
    map_order_status,
    map_user_status,
    payment_method_label,
)


T = TypeVar("T")

ALLERGEN_KEYWORDS = (
    "milk",
    "cream",
    "butter",
    "cheese",
    "yogurt",
    "lactose",
    "egg",
    "eggs",
    "peanut",
    "peanuts",
    "tree nut",
    "almond",
    "walnut",
    "cashew",
    "pecan",
    "hazelnut",
    "pistachio",
    "soy",
    "soybean",
    "wheat",
    "gluten",
    "flour",
    "fish",
    "salmon",
    "tuna",
    "cod",
    "shellfish",
    "shrimp",
    "prawn",
    "lobster",
    "crab",
    "clam",
    "clams",
    "oyster",
    "mussel",
    "sesame",
)

CALORIE_TOLERANCE = 0.15

CREATED_KEYS = ("DateAdded", "dateAdded", "CreatedAt", "createdAt")
UPDATED_KEYS = ("DateUpdated", "dateUpdated", "UpdatedAt", "updatedAt")


USER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", ("UserID", "UserId", "userId", "id", "Id"), identifier),
    FieldSpec("first_name", ("FirstName", "firstName", "first_name"), optional_text),
    FieldSpec("last_name", ("LastName", "lastName", "last_name"), optional_text),
    FieldSpec("gender", ("Gender", "gender"), optional_text),
    FieldSpec(
        "status",
        ("Status", "status", "IsActive", "isActive", "Active", "active"),
        map_user_status,
    ),
    FieldSpec("account_type", ("Type", "type", "UserType", "userType"), optional_text),
    FieldSpec("created_at", CREATED_KEYS, safe_date),
    FieldSpec("updated_at", UPDATED_KEYS, safe_date),
)

FOOD_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", ("FoodID", "FoodId", "foodId", "id", "Id"), identifier),
    FieldSpec("name", ("FoodName", "foodName", "Name", "name"), optional_text),
    FieldSpec(
        "description",
        ("foodDescription", "FoodDescription", "Description", "description"),
        optional_text,
    ),
    FieldSpec("price", ("Price", "price"), non_negative_number),
    FieldSpec("category", ("FoodType", "foodType", "Category", "category"), optional_text),
    FieldSpec("cuisine", ("Cuisine", "cuisine"), optional_text),
    FieldSpec(
        "availability",
        ("IsAvailable", "isAvailable", "Available", "available", "Status", "status"),
        map_availability,
    ),
    FieldSpec("ingredients", ("Ingredients", "ingredients", "IngredientsRaw"), parse_list),
    FieldSpec("ingredients_raw", ("IngredientsRaw", "Ingredients", "ingredients"), optional_text),
    FieldSpec("tags", ("TagsJson", "tagsJson", "Tags", "tags"), parse_list),
    FieldSpec("rating", ("Rating", "rating"), clamp_rating),
    FieldSpec("cooking_time_minutes", ("cookingTime", "CookingTime"), non_negative_number),
    FieldSpec("chef_id", ("ChefID", "ChefId", "chefId"), optional_text),
    FieldSpec("added_by", ("AddedBy", "addedBy"), optional_text),
    FieldSpec("confidence", ("Confidence", "confidence"), safe_number),
    FieldSpec("origin", ("Origin", "origin"), optional_text),
    FieldSpec("disclaimer", ("Disclaimer", "disclaimer"), optional_text),
    FieldSpec("created_at", CREATED_KEYS, safe_date),
    FieldSpec("updated_at", UPDATED_KEYS, safe_date),
)

NUTRITION_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("protein_g", ("ProteinGrams", "proteinGrams", "Protein"), safe_number),
    FieldSpec("carbs_g", ("CarbsGrams", "carbsGrams", "Carbs"), safe_number),
    FieldSpec("fat_g", ("FatGrams", "fatGrams", "Fat"), safe_number),
    FieldSpec("sugar_g", ("SugarGrams", "sugarGrams", "Sugar"), safe_number),
    FieldSpec("fiber_g", ("Fiber", "fiber", "FiberGrams"), safe_number),
    FieldSpec("sodium_mg", ("Sodium", "sodium", "SodiumMg"), safe_number),
    FieldSpec("serving_size", ("ServingSize", "servingSize"), optional_text),
)

ESTIMATED_CALORIE_KEYS = ("EstimatedCalories", "estimatedCalories", "Calories", "calories")


def purchase_fields(tables: Optional[StatusTables] = None) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec("id", ("PurchaseID", "PurchaseId", "purchaseId", "id", "Id"), identifier),
        FieldSpec("food_id", ("FoodID", "FoodId", "foodId"), identifier),
        FieldSpec("food_name", ("FoodName", "foodName"), optional_text),
        FieldSpec(
            "final_price",
            ("FinalPrice", "finalPrice", "TotalAmount", "totalAmount"),
            safe_number,
        ),
        FieldSpec("is_customized", ("IsCustomized", "isCustomized"), is_true),
        FieldSpec("description", ("Description", "description"), optional_text),
        FieldSpec("note", ("Note", "note", "Notes", "notes"), optional_text),
        FieldSpec("rating", ("Rating", "rating"), clamp_rating),
        FieldSpec(
            "status",
            ("Status", "status", "OrderStatus", "orderStatus"),
            partial(map_order_status, tables=tables),
        ),
        FieldSpec(
            "payment_method",
            ("PaymentMethod", "paymentMethod"),
            partial(payment_method_label, tables=tables),
        ),
        FieldSpec("purchase_date", ("PurchaseDate", "purchaseDate"), safe_date),
        FieldSpec("created_at", CREATED_KEYS, safe_date),
        FieldSpec("updated_at", UPDATED_KEYS, safe_date),
        FieldSpec("added_by", ("AddedBy", "addedBy"), optional_text),
        FieldSpec("updated_by", ("UpdatedBy", "updatedBy"), optional_text),
    )


def delivery_fields(tables: Optional[StatusTables] = None) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec("id", ("DeliveryID", "DeliveryId", "deliveryId", "id", "Id"), identifier),
        FieldSpec("order_id", ("OrderID", "OrderId", "orderId", "PurchaseID"), identifier),
        FieldSpec("customer_name", ("CustomerName", "customerName"), optional_text),
        FieldSpec("customer_email", ("CustomerEmail", "customerEmail"), text_or_empty),
        FieldSpec("customer_phone", ("CustomerPhone", "customerPhone"), text_or_empty),
        FieldSpec(
            "delivery_address",
            ("DeliveryAddress", "deliveryAddress", "Address", "address"),
            text_or_empty,
        ),
        FieldSpec(
            "status",
            ("Status", "status", "DeliveryStatus", "deliveryStatus"),
            partial(map_delivery_status, tables=tables),
        ),
        FieldSpec(
            "estimated_delivery_time",
            ("EstimatedDeliveryTime", "estimatedDeliveryTime"),
            safe_date,
        ),
        FieldSpec("actual_delivery_time", ("ActualDeliveryTime", "actualDeliveryTime"), safe_date),
        FieldSpec("delivery_fee", ("DeliveryFee", "deliveryFee"), safe_number),
        FieldSpec("driver_name", ("DriverName", "driverName"), optional_text),
        FieldSpec("driver_phone", ("DriverPhone", "driverPhone"), optional_text),
        FieldSpec("notes", ("Notes", "notes", "Note", "note"), optional_text),
        FieldSpec("created_at", ("CreatedAt", "createdAt", "DateAdded", "dateAdded"), safe_date),
        FieldSpec("updated_at", ("UpdatedAt", "updatedAt", "DateUpdated", "dateUpdated"), safe_date),
    )


def _build(record_cls: Type[T], values: dict[str, Any]) -> T:
    """Instantiate a record, letting None fall through to the dataclass default."""
    known = {f.name for f in dataclass_fields(record_cls)}  # type: ignore[arg-type]
    return record_cls(**{k: v for k, v in values.items() if k in known and v is not None})


def has_allergen(token: str, keywords: Iterable[str] = ALLERGEN_KEYWORDS) -> bool:
    text = token.lower()
    return any(keyword in text for keyword in keywords)


def flag_allergens(ingredients: Iterable[str], keywords: Iterable[str] = ALLERGEN_KEYWORDS) -> dict[str, bool]:
    keywords = tuple(keywords)
    return {ingredient: has_allergen(ingredient, keywords) for ingredient in ingredients}


def calories_from_macros(
    protein_g: Optional[float], carbs_g: Optional[float], fat_g: Optional[float]
) -> Optional[int]:
    """4/4/9 kcal per gram, rounded half up; None when no macro is known."""
    if protein_g is None and carbs_g is None and fat_g is None:
        return None
    total = (protein_g or 0.0) * 4 + (carbs_g or 0.0) * 4 + (fat_g or 0.0) * 9
    return int(math.floor(total + 0.5))


def reconcile_calories(
    estimated: Optional[float], nutrition: NutritionFacts, tolerance: float = CALORIE_TOLERANCE
) -> CalorieEstimate:
    calculated = calories_from_macros(nutrition.protein_g, nutrition.carbs_g, nutrition.fat_g)
    return CalorieEstimate(estimated=estimated, calculated=calculated, tolerance=tolerance)


def normalize_user(raw: Any, tables: Optional[StatusTables] = None) -> User:
    return _build(User, extract_fields(raw, USER_FIELDS))


def normalize_food(raw: Any, tables: Optional[StatusTables] = None) -> Food:
    values = extract_fields(raw, FOOD_FIELDS)
    nutrition = _build(NutritionFacts, extract_fields(raw, NUTRITION_FIELDS))
    estimated = extract_fields(raw, (FieldSpec("estimated", ESTIMATED_CALORIE_KEYS, safe_number),))
    ingredients = values.get("ingredients") or []

    values["nutrition"] = nutrition
    values["calories"] = reconcile_calories(estimated["estimated"], nutrition)
    values["allergen_flags"] = flag_allergens(ingredients)
    return _build(Food, values)


def normalize_purchase(raw: Any, tables: Optional[StatusTables] = None) -> Purchase:
    return _build(Purchase, extract_fields(raw, purchase_fields(tables)))


def normalize_delivery(raw: Any, tables: Optional[StatusTables] = None) -> Delivery:
    return _build(Delivery, extract_fields(raw, delivery_fields(tables)))
