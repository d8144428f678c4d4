"""
Time-to-live cache over the normalized merch catalog.

Reads trigger refreshes (there is no background timer). A refresh fetches the
catalog and inventory, normalizes them, and swaps in a new immutable
``CacheSnapshot``. Readers therefore never see a half-built snapshot.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from menu_site.error_handler import ConfigurationIncomplete, SourceUnavailable
from menu_site.integrations.contracts.catalog import CatalogSource, CatalogVariation
from menu_site.integrations.contracts.merch import CacheSnapshot
from menu_site.merch.normalizer import ASSUME_IN_STOCK_WHEN_UNTRACKED, normalize
from menu_site.utils.single_flight import SingleFlight

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class CatalogCache:
    def __init__(
        self,
        source: CatalogSource,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        assume_in_stock: bool = ASSUME_IN_STOCK_WHEN_UNTRACKED,
    ) -> None:
        self._source = source
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._assume_in_stock = assume_in_stock
        self._snapshot = CacheSnapshot()
        self._flight = SingleFlight()
        self._refresh_key = ("catalog-refresh", id(self))

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def current(self) -> CacheSnapshot:
        """The snapshot as it is right now, without triggering a refresh."""
        return self._snapshot

    def is_stale(self) -> bool:
        snapshot = self._snapshot
        if snapshot.is_empty or snapshot.fetched_at is None:
            return True
        return (self._clock() - snapshot.fetched_at) > self._ttl

    def invalidate(self) -> None:
        """Force the next read to refresh, keeping the current items readable."""
        snapshot = self._snapshot
        self._snapshot = CacheSnapshot(items=snapshot.items, fetched_at=None)

    async def refresh_if_stale(self) -> CacheSnapshot:
        """Refresh when stale. Provider failures propagate; the old snapshot stays."""
        if not self.is_stale():
            return self._snapshot
        return await self._flight.do(self._refresh_key, self._refresh)

    async def get_snapshot(self) -> CacheSnapshot:
        try:
            return await self.refresh_if_stale()
        except SourceUnavailable as e:
            if self._snapshot.is_empty:
                raise
            logger.warning("Catalog refresh failed, serving stale snapshot: %s", e)
            return self._snapshot

    async def _refresh(self) -> CacheSnapshot:
        started = self._clock()
        objects = await self._source.fetch_catalog_objects()
        variation_ids = {o.id for o in objects if isinstance(o, CatalogVariation)}
        try:
            inventory = await self._source.fetch_inventory(variation_ids)
        except ConfigurationIncomplete as e:
            logger.warning("Inventory lookup skipped, stock defaults apply: %s", e)
            inventory = {}

        items = normalize(objects, inventory, assume_in_stock=self._assume_in_stock)
        snapshot = CacheSnapshot(items=tuple(items), fetched_at=self._clock())
        self._snapshot = snapshot
        logger.info(
            "Catalog refreshed: %d items, %d variations, %d inventory records (%.2fs)",
            len(snapshot.items),
            len(variation_ids),
            len(inventory),
            snapshot.fetched_at - started,
        )
        return snapshot
