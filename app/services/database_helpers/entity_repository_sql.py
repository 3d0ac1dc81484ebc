# /app/services/database_helpers/entity_repository_sql.py

"""
SQLAlchemy-backed record store for a single entity type.

Satisfies the same contract as the in-memory `EntityRepository`: plain dict
records in, deep-copied plain dict records out, monotonic ids, shallow-merge
updates, hard deletes, and `NotFoundError` for unknown ids. Each write commits
on its own, so an operation either lands completely or not at all.
"""

import asyncio
import copy
import logging
import weakref
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.db.models.record_models import EntityRecord, EntitySequence
from ..errors import NotFoundError
from .entity_repository import simulate_latency, utc_timestamp

logger = logging.getLogger(__name__)

# Repositories are built per request, so their locks live here: one write lock
# and one upsert lock per entity type, shared by every repository on the same
# event loop. asyncio locks cannot be shared across loops.
_LOCKS: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, Dict[Tuple[str, str], asyncio.Lock]]" = (
    weakref.WeakKeyDictionary()
)


def shared_lock(entity: str, purpose: str) -> asyncio.Lock:
    """The lock every repository for `entity` shares on the running event loop."""
    locks = _LOCKS.setdefault(asyncio.get_running_loop(), {})
    return locks.setdefault((entity, purpose), asyncio.Lock())


class EntityRepositorySQL:
    def __init__(
        self,
        db_session: Session,
        entity: str,
        defaults: Optional[Dict[str, Any]] = None,
        stamp_timestamps: bool = False,
        latency_scale: float = 0.0,
    ):
        self.db = db_session
        self.entity = entity
        self.defaults = dict(defaults or {})
        self.stamp_timestamps = stamp_timestamps
        self.latency_scale = latency_scale

    @property
    def _write_lock(self) -> asyncio.Lock:
        return shared_lock(self.entity, "write")

    @property
    def upsert_lock(self) -> asyncio.Lock:
        # Held by services that look a record up and then create or update it.
        return shared_lock(self.entity, "upsert")

    # --- Internal Helpers ---

    def _query(self):
        return self.db.query(EntityRecord).filter(EntityRecord.entity_type == self.entity)

    def _get_row(self, record_id: int) -> EntityRecord:
        row = self._query().filter(EntityRecord.record_id == record_id).first()
        if row is None:
            raise NotFoundError(self.entity, record_id)
        return row

    def _next_id(self) -> int:
        sequence = self.db.get(EntitySequence, self.entity)
        if sequence is None:
            sequence = EntitySequence(entity_type=self.entity, last_id=0)
            self.db.add(sequence)
        current_max = max((row.record_id for row in self._query().all()), default=0)
        sequence.last_id = max(sequence.last_id or 0, current_max) + 1
        return sequence.last_id

    @staticmethod
    def _to_record(row: EntityRecord) -> Dict:
        return {**copy.deepcopy(row.payload), "Id": row.record_id}

    # --- Read Operations ---

    async def get_all(self) -> List[Dict]:
        await simulate_latency("get_all", self.latency_scale)
        rows = self._query().order_by(EntityRecord.row_id).all()
        return [self._to_record(row) for row in rows]

    async def get_by_id(self, record_id: int) -> Dict:
        await simulate_latency("get_by_id", self.latency_scale)
        return self._to_record(self._get_row(record_id))

    # --- Write Operations ---

    async def create(self, data: Dict) -> Dict:
        async with self._write_lock:
            await simulate_latency("create", self.latency_scale)
            try:
                new_id = self._next_id()
                payload = {k: v for k, v in copy.deepcopy(data).items() if k != "Id"}
                payload = {**copy.deepcopy(self.defaults), **payload}
                if self.stamp_timestamps:
                    now = utc_timestamp()
                    payload["createdAt"] = now
                    payload["updatedAt"] = now
                row = EntityRecord(entity_type=self.entity, record_id=new_id, payload=payload)
                self.db.add(row)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            self.db.refresh(row)
            logger.info("Created %s %s", self.entity, new_id)
            return self._to_record(row)

    async def update(self, record_id: int, data: Dict) -> Dict:
        async with self._write_lock:
            await simulate_latency("update", self.latency_scale)
            row = self._get_row(record_id)
            changes = {k: v for k, v in copy.deepcopy(data).items() if k != "Id"}
            # Assign a fresh dict so SQLAlchemy sees the JSON column as changed.
            payload = {**copy.deepcopy(row.payload), **changes}
            if self.stamp_timestamps:
                payload["updatedAt"] = utc_timestamp()
            try:
                row.payload = payload
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            self.db.refresh(row)
            logger.info("Updated %s %s (%s)", self.entity, record_id, ", ".join(sorted(changes)) or "no fields")
            return self._to_record(row)

    async def delete(self, record_id: int) -> bool:
        async with self._write_lock:
            await simulate_latency("delete", self.latency_scale)
            row = self._get_row(record_id)
            try:
                self.db.delete(row)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            logger.info("Deleted %s %s", self.entity, record_id)
            return True
