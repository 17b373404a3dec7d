import logging

from menu_service.errors import IdSpaceExhaustedError
from menu_service.storage.base import MAX_KEY, DurableStore

logger = logging.getLogger(__name__)

# The counter is stored in the same column type as the keys it hands out.
ID_CEILING = MAX_KEY


class IdAllocator:
    def __init__(self, store: DurableStore, ceiling: int = ID_CEILING) -> None:
        self._store = store
        self._ceiling = ceiling

    async def next_id(self) -> int:
        """Return the current counter value and persist counter + 1 in the same transaction."""
        current = await self._store.load_counter()
        if current >= self._ceiling:
            logger.critical("Id counter exhausted", extra={"counter": current})
            raise IdSpaceExhaustedError(f"id counter reached its ceiling of {self._ceiling}")
        await self._store.save_counter(current + 1)
        return current
