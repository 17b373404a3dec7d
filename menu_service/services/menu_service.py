"""
MenuService is the single state container for the menu: it owns the storage
backend and runs every operation under one lock and one storage transaction,
so operations never interleave and a failed call commits nothing.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from opentelemetry import trace

from menu_service.config import Settings
from menu_service.errors import FoodItemNotFoundError, IdSpaceExhaustedError, MenuError
from menu_service.metrics import AVAILABILITY_TRANSITIONS, MENU_OPERATIONS
from menu_service.schemas.food_item import FoodItem, FoodItemPayload
from menu_service.services import search
from menu_service.services.availability import Transition, apply_transition
from menu_service.services.food_item_store import DEFAULT_MAX_RECORD_SIZE, FoodItemStore
from menu_service.services.id_allocator import IdAllocator
from menu_service.storage.base import StorageBackend
from menu_service.storage.memory import MemoryStorageBackend
from menu_service.storage.sql import SqlStorageBackend

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_MENU_SEED = [
    FoodItemPayload(name="Margherita Pizza", description="Classic tomato & mozzarella", price=12.99),
    FoodItemPayload(name="Pepperoni Pizza", description="Loaded with pepperoni", price=14.99),
    FoodItemPayload(name="Caesar Salad", description="Romaine, croutons, parmesan", price=8.99),
    FoodItemPayload(name="Veggie Wrap", description="Grilled vegetables in a tortilla", price=9.49),
    FoodItemPayload(name="Garlic Bread", description="Toasted bread with garlic butter", price=4.99),
    FoodItemPayload(name="Coke", description="330 ml can", price=2.50),
]


def build_backend(settings: Settings) -> StorageBackend:
    if settings.storage_backend == "sql":
        return SqlStorageBackend(settings.database_url)
    if settings.storage_backend == "memory":
        return MemoryStorageBackend(settings.snapshot_path)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend!r}")


class MenuService:
    def __init__(
        self,
        backend: StorageBackend,
        max_record_size: int = DEFAULT_MAX_RECORD_SIZE,
    ) -> None:
        self.backend = backend
        self.max_record_size = max_record_size
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MenuService":
        return cls(build_backend(settings), max_record_size=settings.max_record_size)

    async def start(self) -> None:
        await self.backend.start()

    async def close(self) -> None:
        await self.backend.close()

    async def seed_menu(self) -> int:
        """Add the starter menu if the store is empty. Returns the number of items added."""
        if await self.list_all():
            return 0
        for payload in _MENU_SEED:
            await self.add(payload)
        logger.info("Seeded %d menu items", len(_MENU_SEED))
        return len(_MENU_SEED)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[tuple[FoodItemStore, IdAllocator]]:
        async with self._lock:
            with tracer.start_as_current_span(f"menu.{name}"):
                try:
                    async with self.backend.transaction() as store:
                        yield FoodItemStore(store, self.max_record_size), IdAllocator(store)
                except MenuError as exc:
                    MENU_OPERATIONS.labels(name, exc.kind.value).inc()
                    logger.warning(
                        "Menu operation rejected",
                        extra={"operation": name, "item_id": exc.item_id, "error": exc.message},
                    )
                    raise
                except IdSpaceExhaustedError:
                    MENU_OPERATIONS.labels(name, "fatal").inc()
                    raise
            MENU_OPERATIONS.labels(name, "ok").inc()

    async def _transition(self, item_id: int, transition: Transition) -> None:
        async with self._operation(transition.value) as (items, _):
            item = await items.get(item_id)
            if item is None:
                raise FoodItemNotFoundError(item_id, transition.value)
            await items.insert(apply_transition(item, transition))
        AVAILABILITY_TRANSITIONS.labels(transition.value).inc()
        logger.info(
            "Food item availability changed",
            extra={"item_id": item_id, "transition": transition.value},
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def add(self, payload: FoodItemPayload) -> FoodItem:
        async with self._operation("add") as (items, allocator):
            item = FoodItem(
                id=await allocator.next_id(),
                name=payload.name,
                description=payload.description,
                price=payload.price,
                available=True,
                created_at=datetime.now(timezone.utc),
            )
            await items.insert(item)
        logger.info("Food item added", extra={"item_id": item.id, "item_name": item.name})
        return item

    async def get(self, item_id: int) -> FoodItem:
        async with self._operation("get") as (items, _):
            item = await items.get(item_id)
            if item is None:
                raise FoodItemNotFoundError(item_id, "get")
        return item

    async def update(self, item_id: int, payload: FoodItemPayload) -> FoodItem:
        async with self._operation("update") as (items, _):
            item = await items.get(item_id)
            if item is None:
                raise FoodItemNotFoundError(item_id, "update")
            item = item.model_copy(
                update={
                    "name": payload.name,
                    "description": payload.description,
                    "price": payload.price,
                }
            )
            await items.insert(item)
        logger.info("Food item updated", extra={"item_id": item_id})
        return item

    async def delete(self, item_id: int) -> FoodItem:
        async with self._operation("delete") as (items, _):
            item = await items.remove(item_id)
            if item is None:
                raise FoodItemNotFoundError(item_id, "delete")
        logger.info("Food item deleted", extra={"item_id": item_id})
        return item

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_all(self) -> list[FoodItem]:
        async with self._operation("list_all") as (items, _):
            return await items.list()

    async def search_by_name(self, substring: str) -> list[FoodItem]:
        async with self._operation("search_by_name") as (items, _):
            return search.filter_by_name(await items.list(), substring)

    async def search_by_price_at_most(self, threshold: float) -> list[FoodItem]:
        async with self._operation("search_by_price_at_most") as (items, _):
            return search.filter_by_price_at_most(await items.list(), threshold)

    async def search_by_price_at_least(self, threshold: float) -> list[FoodItem]:
        async with self._operation("search_by_price_at_least") as (items, _):
            return search.filter_by_price_at_least(await items.list(), threshold)

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    async def order(self, item_id: int) -> None:
        await self._transition(item_id, Transition.ORDER)

    async def receive(self, item_id: int) -> None:
        await self._transition(item_id, Transition.RECEIVE)
