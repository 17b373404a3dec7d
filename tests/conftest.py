"""Shared fixtures: a MenuService on each storage backend, started and closed per test."""

import pytest

from menu_service.services.menu_service import MenuService
from menu_service.storage.memory import MemoryStorageBackend
from menu_service.storage.sql import SqlStorageBackend


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _backend(kind: str):
    if kind == "sql":
        return SqlStorageBackend("sqlite+aiosqlite:///:memory:")
    return MemoryStorageBackend()


@pytest.fixture(params=["sql", "memory"])
async def service(request, anyio_backend):
    menu_service = MenuService(_backend(request.param))
    await menu_service.start()
    yield menu_service
    await menu_service.close()
