from menu_service.errors import RecordTooLargeError
from menu_service.schemas.food_item import FoodItem, FoodItemEnvelope
from menu_service.storage.base import DurableStore

DEFAULT_MAX_RECORD_SIZE = 1024


def encode_food_item(item: FoodItem, max_size: int = DEFAULT_MAX_RECORD_SIZE) -> bytes:
    data = FoodItemEnvelope(item=item).model_dump_json().encode("utf-8")
    if len(data) > max_size:
        raise RecordTooLargeError(item.id, len(data), max_size)
    return data


def decode_food_item(data: bytes) -> FoodItem:
    return FoodItemEnvelope.model_validate_json(data).item


class FoodItemStore:
    """Ordered id -> FoodItem mapping on top of a DurableStore."""

    def __init__(self, store: DurableStore, max_record_size: int = DEFAULT_MAX_RECORD_SIZE) -> None:
        self._store = store
        self._max_record_size = max_record_size

    async def get(self, item_id: int) -> FoodItem | None:
        data = await self._store.load(item_id)
        return None if data is None else decode_food_item(data)

    async def insert(self, item: FoodItem) -> None:
        await self._store.save(item.id, encode_food_item(item, self._max_record_size))

    async def remove(self, item_id: int) -> FoodItem | None:
        data = await self._store.delete(item_id)
        return None if data is None else decode_food_item(data)

    async def list(self) -> list[FoodItem]:
        return [decode_food_item(data) async for _, data in self._store.iterate()]
