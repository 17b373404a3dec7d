# Import all models here so SQLAlchemy registers them with Base.metadata
from menu_service.models.food_item import FoodItemRecord, IdCounter

__all__ = [
    "FoodItemRecord",
    "IdCounter",
]
