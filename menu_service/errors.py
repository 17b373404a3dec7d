"""
Errors raised by the menu service.

Every expected failure is a MenuError subclass carrying the offending item id
and an ErrorKind, so callers can branch on ``exc.kind`` (or the class) instead
of parsing messages. IdSpaceExhaustedError sits outside that tree:
it is fatal and ends id issuance for the lifetime of the store.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    RECORD_TOO_LARGE = "record_too_large"


class MenuError(Exception):
    """Base class for expected, typed menu failures."""

    kind: ErrorKind

    def __init__(self, item_id: int, message: str) -> None:
        super().__init__(message)
        self.item_id = item_id
        self.message = message


class FoodItemNotFoundError(MenuError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, item_id: int, action: str = "get") -> None:
        if action == "get":
            message = f"a food item with id={item_id} not found"
        else:
            message = f"couldn't {action} a food item with id={item_id}. item not found"
        super().__init__(item_id, message)
        self.action = action


class InvalidStateError(MenuError):
    """The item exists but is not in the source state of the requested transition."""

    kind = ErrorKind.INVALID_STATE

    _REASONS = {
        "order": "item not available for order",
        "receive": "item already marked as available",
    }

    def __init__(self, item_id: int, transition: str) -> None:
        reason = self._REASONS.get(transition, "item is in the wrong state")
        super().__init__(item_id, f"couldn't {transition} a food item with id={item_id}. {reason}")
        self.transition = transition


class RecordTooLargeError(MenuError):
    kind = ErrorKind.RECORD_TOO_LARGE

    def __init__(self, item_id: int, size: int, limit: int) -> None:
        super().__init__(
            item_id,
            f"food item with id={item_id} encodes to {size} bytes, limit is {limit}",
        )
        self.size = size
        self.limit = limit


class IdSpaceExhaustedError(Exception):
    """The id counter reached its ceiling. No further items can be created."""
