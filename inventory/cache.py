"""In-process TTL cache for the vehicle feed.

One slot holds the latest :class:`InventorySnapshot`. Reads inside the TTL are
served from it; a stale or empty slot triggers a single shared refresh that
every concurrent reader awaits. Failed refreshes leave the slot as it was and
raise to the caller; there is no stale-on-error fallback.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from inventory.config import cache_ttl_seconds
from inventory.ingest.feed import load_vehicles
from inventory.ingest.models import InventorySnapshot, VehicleRecord

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Sequence[VehicleRecord]]]


class FeedCache:
    def __init__(
        self,
        loader: Loader,
        *,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl = cache_ttl_seconds() if ttl is None else ttl
        self._clock = clock
        self._snapshot: InventorySnapshot | None = None
        self._refresh: asyncio.Task[InventorySnapshot] | None = None
        # Bumped on every clear so a refresh started earlier cannot store its result.
        self._generation = 0

    @property
    def snapshot(self) -> InventorySnapshot | None:
        return self._snapshot

    def snapshot_age(self) -> float | None:
        snapshot = self._snapshot
        return None if snapshot is None else snapshot.age(self._clock())

    def _fresh_snapshot(self) -> InventorySnapshot | None:
        snapshot = self._snapshot
        if snapshot is not None and snapshot.age(self._clock()) < self.ttl:
            return snapshot
        return None

    async def get_vehicles(self) -> tuple[VehicleRecord, ...]:
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            logger.debug("Returning %s cached vehicles", len(snapshot.records))
            return snapshot.records
        if self._refresh is None:
            logger.info("Vehicle cache empty or expired; fetching feed")
            self._refresh = asyncio.create_task(self._run_refresh(self._generation))
        # Shielded so a cancelled reader does not cancel the refresh for the others.
        snapshot = await asyncio.shield(self._refresh)
        return snapshot.records

    async def _run_refresh(self, generation: int) -> InventorySnapshot:
        try:
            records = tuple(await self._loader())
            snapshot = InventorySnapshot(records=records, captured_at=self._clock())
            if generation == self._generation:
                self._snapshot = snapshot
                logger.info("Cached %s vehicles", len(records))
            else:
                logger.info("Cache cleared during refresh; result not stored")
            return snapshot
        finally:
            if self._refresh is asyncio.current_task():
                self._refresh = None

    async def get_vehicle_by_id(self, vehicle_id: str) -> VehicleRecord | None:
        for vehicle in await self.get_vehicles():
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    async def search(self, query: str) -> list[VehicleRecord]:
        """Case-insensitive substring match on manufacturer, model and stock number."""
        needle = query.lower()
        return [
            vehicle
            for vehicle in await self.get_vehicles()
            if needle in vehicle.manufacturer.lower()
            or needle in vehicle.model.lower()
            or needle in vehicle.stock_no.lower()
        ]

    def clear_cache(self) -> None:
        self._snapshot = None
        self._refresh = None
        self._generation += 1
        logger.info("Vehicle cache cleared")


_default_cache: FeedCache | None = None


def default_cache() -> FeedCache:
    """Process-wide cache backed by the configured feed URL."""
    global _default_cache
    if _default_cache is None:
        _default_cache = FeedCache(load_vehicles)
    return _default_cache
