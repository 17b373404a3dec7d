import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from menu_service.database import Base, create_engine
from menu_service.models import FoodItemRecord, IdCounter
from menu_service.storage.base import DurableStore, StorageBackend, key_in_range

logger = logging.getLogger(__name__)

COUNTER_NAME = "food_items"


class SqlDurableStore(DurableStore):
    def __init__(self, session: AsyncSession, counter_name: str = COUNTER_NAME) -> None:
        self._session = session
        self._counter_name = counter_name

    async def load_counter(self) -> int:
        counter = await self._session.get(IdCounter, self._counter_name)
        return 0 if counter is None else counter.value

    async def save_counter(self, value: int) -> None:
        counter = await self._session.get(IdCounter, self._counter_name)
        if counter is None:
            self._session.add(IdCounter(name=self._counter_name, value=value))
        else:
            counter.value = value
        await self._session.flush()

    async def load(self, key: int) -> bytes | None:
        if not key_in_range(key):
            return None
        record = await self._session.get(FoodItemRecord, key)
        return None if record is None else record.payload

    async def save(self, key: int, value: bytes) -> None:
        await self._session.merge(FoodItemRecord(id=key, payload=value))
        await self._session.flush()

    async def delete(self, key: int) -> bytes | None:
        if not key_in_range(key):
            return None
        record = await self._session.get(FoodItemRecord, key)
        if record is None:
            return None
        payload = record.payload
        await self._session.delete(record)
        await self._session.flush()
        return payload

    async def iterate(self) -> AsyncIterator[tuple[int, bytes]]:
        result = await self._session.execute(select(FoodItemRecord).order_by(FoodItemRecord.id))
        for record in result.scalars():
            yield record.id, record.payload


class SqlStorageBackend(StorageBackend):
    """Stores both regions in SQL tables through an async SQLAlchemy engine."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine, self._sessionmaker = create_engine(database_url)

    async def start(self) -> None:
        logger.info("Creating storage tables", extra={"database": self.engine.url.render_as_string()})
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DurableStore]:
        async with self._sessionmaker() as session:
            async with session.begin():
                yield SqlDurableStore(session)
