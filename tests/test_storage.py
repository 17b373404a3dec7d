import json
import math

import pytest

from menu_service.errors import FoodItemNotFoundError, IdSpaceExhaustedError, RecordTooLargeError
from menu_service.schemas.food_item import FoodItem, FoodItemPayload
from menu_service.services.food_item_store import decode_food_item, encode_food_item
from menu_service.services.id_allocator import IdAllocator
from menu_service.services.menu_service import MenuService
from menu_service.storage.memory import MemoryStorageBackend
from menu_service.storage.sql import SqlStorageBackend


def test_encode_rejects_oversized_records() -> None:
    item = FoodItem(id=5, name="x" * 2000)

    with pytest.raises(RecordTooLargeError) as exc_info:
        encode_food_item(item, max_size=1024)

    assert exc_info.value.item_id == 5
    assert exc_info.value.limit == 1024
    assert exc_info.value.size > 1024


def test_decode_ignores_unknown_fields_and_fills_defaults() -> None:
    data = json.dumps(
        {
            "record_version": 2,
            "item": {
                "id": 4,
                "name": "Tea",
                "price": 1.5,
                "created_at": "2024-01-01T00:00:00Z",
                "spice_level": "mild",
            },
            "source": "future-build",
        }
    ).encode()

    item = decode_food_item(data)

    assert (item.id, item.name, item.description, item.price, item.available) == (4, "Tea", "", 1.5, True)


@pytest.mark.anyio
@pytest.mark.parametrize("kind", ["sql", "memory"])
async def test_state_survives_restart(tmp_path, kind, anyio_backend) -> None:
    def open_backend():
        if kind == "sql":
            return SqlStorageBackend(f"sqlite+aiosqlite:///{tmp_path / 'menu.db'}")
        return MemoryStorageBackend(tmp_path / "menu.json")

    first = MenuService(open_backend())
    await first.start()
    for name in ["Pizza", "Soda", "Salad"]:
        await first.add(FoodItemPayload(name=name, description="", price=5.0))
    await first.delete(2)
    await first.order(0)
    before = await first.list_all()
    await first.close()

    second = MenuService(open_backend())
    await second.start()
    try:
        assert await second.list_all() == before
        assert (await second.add(FoodItemPayload(name="Tea", description="", price=1.0))).id == 3
    finally:
        await second.close()


@pytest.mark.anyio
async def test_failed_add_commits_nothing(service) -> None:
    await service.add(FoodItemPayload(name="Pizza", description="", price=9.5))

    with pytest.raises(RecordTooLargeError):
        await service.add(FoodItemPayload(name="Pizza", description="x" * 5000, price=9.5))

    assert [item.id for item in await service.list_all()] == [0]
    assert (await service.add(FoodItemPayload(name="Soda", description="", price=2.0))).id == 1


@pytest.mark.anyio
async def test_failed_update_keeps_previous_record(service) -> None:
    item = await service.add(FoodItemPayload(name="Pizza", description="cheese", price=9.5))

    with pytest.raises(RecordTooLargeError):
        await service.update(item.id, FoodItemPayload(name="Pizza", description="x" * 5000, price=1.0))

    assert await service.get(item.id) == item


@pytest.mark.anyio
async def test_allocator_stops_at_ceiling(anyio_backend) -> None:
    backend = MemoryStorageBackend()
    await backend.start()

    async with backend.transaction() as store:
        allocator = IdAllocator(store, ceiling=2)
        assert [await allocator.next_id(), await allocator.next_id()] == [0, 1]
        with pytest.raises(IdSpaceExhaustedError):
            await allocator.next_id()
        assert await store.load_counter() == 2


@pytest.mark.anyio
async def test_memory_transaction_discards_changes_on_error(anyio_backend) -> None:
    backend = MemoryStorageBackend()

    with pytest.raises(RuntimeError):
        async with backend.transaction() as store:
            await store.save_counter(10)
            await store.save(1, b"payload")
            raise RuntimeError("boom")

    async with backend.transaction() as store:
        assert await store.load_counter() == 0
        assert [pair async for pair in store.iterate()] == []


def test_record_bound_is_inclusive() -> None:
    item = FoodItem(id=9, name="Pizza", description="cheese")
    size = len(encode_food_item(item, max_size=10_000))

    assert decode_food_item(encode_food_item(item, max_size=size)) == item
    with pytest.raises(RecordTooLargeError) as exc_info:
        encode_food_item(item, max_size=size - 1)
    assert exc_info.value.size == size


@pytest.mark.anyio
@pytest.mark.parametrize("price", [math.inf, -math.inf, math.nan, 1e308, -0.0])
async def test_extreme_prices_round_trip(service, price) -> None:
    item = await service.add(FoodItemPayload(name="Pizza", description="", price=price))
    await service.add(FoodItemPayload(name="Soda", description="", price=2.0))

    stored = await service.get(item.id)

    if math.isnan(price):
        assert math.isnan(stored.price)
    else:
        assert stored.price == price
    assert [entry.id for entry in await service.list_all()] == [0, 1]
    assert [entry.id for entry in await service.search_by_name("Soda")] == [1]


@pytest.mark.anyio
@pytest.mark.parametrize("item_id", [2**63, 2**64 - 1, -1])
async def test_out_of_range_ids_are_not_found(service, item_id) -> None:
    await service.add(FoodItemPayload(name="Pizza", description="", price=9.5))

    with pytest.raises(FoodItemNotFoundError):
        await service.get(item_id)
    with pytest.raises(FoodItemNotFoundError):
        await service.update(item_id, FoodItemPayload(name="x", description="", price=1.0))
    with pytest.raises(FoodItemNotFoundError):
        await service.delete(item_id)
    with pytest.raises(FoodItemNotFoundError):
        await service.order(item_id)
    with pytest.raises(FoodItemNotFoundError):
        await service.receive(item_id)


@pytest.mark.anyio
async def test_failed_snapshot_write_commits_nothing(tmp_path, anyio_backend) -> None:
    snapshot_dir = tmp_path / "snapshots"
    service = MenuService(MemoryStorageBackend(snapshot_dir / "menu.json"))
    await service.start()

    # parent directory is missing, so the snapshot write fails
    with pytest.raises(OSError):
        await service.add(FoodItemPayload(name="Pizza", description="", price=9.5))

    snapshot_dir.mkdir()
    assert await service.list_all() == []
    assert (await service.add(FoodItemPayload(name="Soda", description="", price=2.0))).id == 0
    await service.close()

    reopened = MemoryStorageBackend(snapshot_dir / "menu.json")
    await reopened.start()
    async with reopened.transaction() as store:
        assert await store.load_counter() == 1
