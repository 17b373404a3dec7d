from typing import Iterable

from menu_service.schemas.food_item import FoodItem


def filter_by_name(items: Iterable[FoodItem], substring: str) -> list[FoodItem]:
    # literal, case-sensitive match
    return [item for item in items if substring in item.name]


def filter_by_price_at_most(items: Iterable[FoodItem], threshold: float) -> list[FoodItem]:
    return [item for item in items if item.price <= threshold]


def filter_by_price_at_least(items: Iterable[FoodItem], threshold: float) -> list[FoodItem]:
    return [item for item in items if item.price >= threshold]
