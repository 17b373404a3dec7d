import base64
import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from menu_service.storage.base import DurableStore, StorageBackend

logger = logging.getLogger(__name__)


class MemoryDurableStore(DurableStore):
    """Works on a private copy of the backend state until the transaction commits."""

    def __init__(self, counter: int, records: dict[int, bytes]) -> None:
        self.counter = counter
        self.records = records

    async def load_counter(self) -> int:
        return self.counter

    async def save_counter(self, value: int) -> None:
        self.counter = value

    async def load(self, key: int) -> bytes | None:
        return self.records.get(key)

    async def save(self, key: int, value: bytes) -> None:
        self.records[key] = value

    async def delete(self, key: int) -> bytes | None:
        return self.records.pop(key, None)

    async def iterate(self) -> AsyncIterator[tuple[int, bytes]]:
        for key in sorted(self.records):
            yield key, self.records[key]


class MemoryStorageBackend(StorageBackend):
    """
    Keeps both regions in process memory.

    With ``snapshot_path`` set, the full state is written to a JSON file after
    every committed transaction and read back on start, so it survives restarts.
    """

    def __init__(self, snapshot_path: str | Path | None = None) -> None:
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._counter = 0
        self._records: dict[int, bytes] = {}

    async def start(self) -> None:
        if self.snapshot_path is None or not self.snapshot_path.exists():
            return
        data = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
        self._counter = int(data["counter"])
        self._records = {
            int(key): base64.b64decode(value) for key, value in data["records"].items()
        }
        logger.info(
            "Loaded storage snapshot",
            extra={"path": str(self.snapshot_path), "records": len(self._records)},
        )

    async def close(self) -> None:
        self._write_snapshot(self._counter, self._records)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DurableStore]:
        store = MemoryDurableStore(self._counter, dict(self._records))
        yield store
        # only reached when the block did not raise; a failed snapshot write leaves memory untouched
        self._write_snapshot(store.counter, store.records)
        self._counter = store.counter
        self._records = store.records

    def _write_snapshot(self, counter: int, records: dict[int, bytes]) -> None:
        if self.snapshot_path is None:
            return
        data = {
            "counter": counter,
            "records": {
                str(key): base64.b64encode(value).decode("ascii")
                for key, value in sorted(records.items())
            },
        }
        tmp_path = self.snapshot_path.with_suffix(self.snapshot_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.snapshot_path)
