"""
Two-state availability machine for food items.

    AVAILABLE --order--> UNAVAILABLE --receive--> AVAILABLE

There is no terminal state; an item oscillates until it is deleted.
"""

from enum import Enum

from menu_service.errors import InvalidStateError
from menu_service.schemas.food_item import FoodItem


class Availability(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def of(cls, item: FoodItem) -> "Availability":
        return cls.AVAILABLE if item.available else cls.UNAVAILABLE


class Transition(str, Enum):
    ORDER = "order"
    RECEIVE = "receive"


# transition -> (required source state, resulting state)
_TRANSITIONS = {
    Transition.ORDER: (Availability.AVAILABLE, Availability.UNAVAILABLE),
    Transition.RECEIVE: (Availability.UNAVAILABLE, Availability.AVAILABLE),
}


def apply_transition(item: FoodItem, transition: Transition) -> FoodItem:
    """Return a copy of ``item`` in the target state, or raise InvalidStateError."""
    source, target = _TRANSITIONS[transition]
    if Availability.of(item) is not source:
        raise InvalidStateError(item.id, transition.value)
    return item.model_copy(update={"available": target is Availability.AVAILABLE})
