"""
Abstract durable key-value storage.

A backend exposes two regions: a scalar counter cell and an ordered table of
integer keys to encoded bytes. Work happens inside ``backend.transaction()``,
which yields a DurableStore and commits on clean exit or discards everything
when the block raises.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import AsyncIterator


class DurableStore(ABC):
    """Transaction-scoped view of both storage regions."""

    @abstractmethod
    async def load_counter(self) -> int:
        """Current counter value, 0 if never written."""

    @abstractmethod
    async def save_counter(self, value: int) -> None: ...

    @abstractmethod
    async def load(self, key: int) -> bytes | None: ...

    @abstractmethod
    async def save(self, key: int, value: bytes) -> None:
        """Insert or overwrite the value stored under ``key``."""

    @abstractmethod
    async def delete(self, key: int) -> bytes | None:
        """Remove ``key`` and return its previous value, if any."""

    @abstractmethod
    def iterate(self) -> AsyncIterator[tuple[int, bytes]]:
        """Yield every (key, value) pair in ascending key order."""


class StorageBackend(ABC):
    @abstractmethod
    async def start(self) -> None:
        """Prepare the underlying storage (create tables, load snapshots)."""

    @abstractmethod
    async def close(self) -> None: ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[DurableStore]: ...


# Keys live in signed 64-bit BIGINT columns.
MAX_KEY = 2**63 - 1


def key_in_range(key: int) -> bool:
    return 0 <= key <= MAX_KEY
