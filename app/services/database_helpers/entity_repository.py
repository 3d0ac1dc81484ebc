# /app/services/database_helpers/entity_repository.py

"""
In-memory record store for a single entity type.

The repository owns its collection outright: callers only ever receive deep
copies, so mutating a returned record never changes stored state. Ids are
issued from a monotonic counter and are never reused, even after a delete.

Every operation is a coroutine that awaits a short, deterministic delay to
mimic a remote backend. Writes are serialized per collection with an
`asyncio.Lock`, so concurrent writers cannot interleave mid-operation.
"""

import asyncio
import copy
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import NotFoundError

logger = logging.getLogger(__name__)

# Base delay per operation, in milliseconds, before scaling.
OPERATION_LATENCY_MS = {
    "get_all": 300,
    "get_by_id": 200,
    "create": 400,
    "update": 400,
    "delete": 300,
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def simulate_latency(operation: str, scale: float) -> None:
    """Sleeps for the operation's base delay times `scale`. A scale of 0 still yields once."""
    delay = OPERATION_LATENCY_MS[operation] * max(scale, 0.0) / 1000
    await asyncio.sleep(delay)


def load_fixture(path: Path) -> List[Dict]:
    """Reads a JSON array of records from disk."""
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Fixture {path} must contain a JSON array.")
    return records


class EntityRepository:
    def __init__(
        self,
        entity: str,
        defaults: Optional[Dict[str, Any]] = None,
        initial_records: Optional[Iterable[Dict]] = None,
        stamp_timestamps: bool = False,
        latency_scale: float = 0.0,
    ):
        self.entity = entity
        self.defaults = dict(defaults or {})
        self.stamp_timestamps = stamp_timestamps
        self.latency_scale = latency_scale
        self._records: List[Dict] = [copy.deepcopy(r) for r in (initial_records or [])]
        self._last_id = max((r["Id"] for r in self._records), default=0)
        self._write_lock = asyncio.Lock()
        # Held by services that look a record up and then create or update it.
        self.upsert_lock = asyncio.Lock()

    # --- Internal Helpers ---

    def _index_of(self, record_id: int) -> int:
        for index, record in enumerate(self._records):
            if record["Id"] == record_id:
                return index
        raise NotFoundError(self.entity, record_id)

    def _next_id(self) -> int:
        # Honour ids already present in the collection as well as ids issued before a delete.
        self._last_id = max(self._last_id, max((r["Id"] for r in self._records), default=0)) + 1
        return self._last_id

    # --- Read Operations ---

    async def get_all(self) -> List[Dict]:
        await simulate_latency("get_all", self.latency_scale)
        return copy.deepcopy(self._records)

    async def get_by_id(self, record_id: int) -> Dict:
        await simulate_latency("get_by_id", self.latency_scale)
        return copy.deepcopy(self._records[self._index_of(record_id)])

    # --- Write Operations ---

    async def create(self, data: Dict) -> Dict:
        async with self._write_lock:
            await simulate_latency("create", self.latency_scale)
            payload = {k: v for k, v in copy.deepcopy(data).items() if k != "Id"}
            record = {**copy.deepcopy(self.defaults), **payload, "Id": self._next_id()}
            if self.stamp_timestamps:
                now = utc_timestamp()
                record["createdAt"] = now
                record["updatedAt"] = now
            self._records.append(record)
            logger.info("Created %s %s", self.entity, record["Id"])
            return copy.deepcopy(record)

    async def update(self, record_id: int, data: Dict) -> Dict:
        async with self._write_lock:
            await simulate_latency("update", self.latency_scale)
            index = self._index_of(record_id)
            changes = {k: v for k, v in copy.deepcopy(data).items() if k != "Id"}
            record = {**self._records[index], **changes}
            if self.stamp_timestamps:
                record["updatedAt"] = utc_timestamp()
            self._records[index] = record
            logger.info("Updated %s %s (%s)", self.entity, record_id, ", ".join(sorted(changes)) or "no fields")
            return copy.deepcopy(record)

    async def delete(self, record_id: int) -> bool:
        async with self._write_lock:
            await simulate_latency("delete", self.latency_scale)
            index = self._index_of(record_id)
            del self._records[index]
            logger.info("Deleted %s %s", self.entity, record_id)
            return True
