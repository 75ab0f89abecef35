"""
Read-through cache for place metadata.

A `place-info` row is served as long as its `updated_at` is inside the
freshness window. Otherwise the upstream is asked once, the row is upserted
and the row the store hands back is returned.
"""
# app/services/place_info_service.py
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, Optional

from app.config import WritePolicy
from app.core.errors import PreconditionError, StoreWriteError
from app.models import PlaceInfo, PlaceInfoPayload
from app.services.db import PlaceInfoStore
from app.services.place_source import PlaceInfoSource

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW = timedelta(hours=24)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_fresh(record: Optional[PlaceInfo], now: datetime, window: timedelta = FRESHNESS_WINDOW) -> bool:
    """True when the record was written less than `window` before `now`.

    Only `updated_at` counts; `created_at` is ignored. A record without a
    readable `updated_at` is stale.
    """
    if record is None or record.updated_at is None:
        return False
    updated_at = record.updated_at
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    return now - updated_at < window


class RefreshRegistry:
    """In-flight refreshes keyed by place id.

    Shared across requests so concurrent callers of a stale id can wait on
    one upstream fetch instead of each issuing their own.
    """

    def __init__(self):
        self._pending: Dict[str, "asyncio.Future[PlaceInfo]"] = {}

    def __contains__(self, place_id: str) -> bool:
        return place_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    async def run(self, place_id: str, refresh: Callable[[], Awaitable[PlaceInfo]]) -> PlaceInfo:
        pending = self._pending.get(place_id)
        if pending is not None:
            logger.info(f"Joining in-flight refresh for place {place_id}")
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(refresh())
        self._pending[place_id] = task
        task.add_done_callback(lambda done: self._forget(place_id, done))
        return await asyncio.shield(task)

    def _forget(self, place_id: str, done: "asyncio.Future[PlaceInfo]") -> None:
        self._pending.pop(place_id, None)
        # read the outcome so a failure nobody awaited is not reported as lost
        if not done.cancelled():
            done.exception()


class PlaceInfoService:
    def __init__(
        self,
        store: PlaceInfoStore,
        source: PlaceInfoSource,
        freshness_window: timedelta = FRESHNESS_WINDOW,
        write_policy: WritePolicy = WritePolicy.FAIL,
        registry: Optional[RefreshRegistry] = None,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.source = source
        self.freshness_window = freshness_window
        self.write_policy = write_policy
        self.registry = registry
        self.clock = clock

    async def get(self, place_id: Optional[str]) -> PlaceInfo:
        if not place_id:
            raise PreconditionError()

        # store errors propagate; a failed read is not a miss
        cached = await self.store.find(place_id)
        if is_fresh(cached, self.clock(), self.freshness_window):
            logger.info(f"Cache hit for place {place_id}")
            return cached

        if cached is None:
            logger.info(f"Cache miss for place {place_id}")
        else:
            logger.info(f"Cache stale for place {place_id} (updated_at={cached.updated_at})")

        if self.registry is not None:
            return await self.registry.run(place_id, lambda: self._refresh(place_id))
        return await self._refresh(place_id)

    async def _refresh(self, place_id: str) -> PlaceInfo:
        payload = await self.source.fetch(place_id)
        now = self.clock()
        try:
            return await self.store.upsert(place_id, payload, now)
        except StoreWriteError as e:
            if self.write_policy is WritePolicy.FAIL:
                raise
            logger.warning(f"Serving unpersisted place info {place_id}: {e.message}")
            return self._unpersisted(place_id, payload, now)

    @staticmethod
    def _unpersisted(place_id: str, payload: PlaceInfoPayload, now: datetime) -> PlaceInfo:
        return PlaceInfo(id=place_id, updated_at=now, **payload.model_dump())
