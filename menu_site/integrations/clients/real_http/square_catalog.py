"""
Square Catalog + Inventory HTTP Client.

Purpose:
- Lists every ITEM, ITEM_VARIATION and IMAGE object, following cursors
- Batch-retrieves IN_STOCK counts for the variations at the shop's location

Important:
- This client should be the ONLY place that reads catalog data from Square.
- It does not retry; the catalog cache decides when to fetch again.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

import httpx

from menu_site.error_handler import ConfigurationIncomplete, SourceUnavailable
from menu_site.integrations.clients.real_http.square_http import SquareHTTP
from menu_site.integrations.contracts.catalog import CatalogObject, CatalogSource, InventoryRecord
from menu_site.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    normalize_catalog_page,
    normalize_inventory_page,
)
from menu_site.utils.site_config_loader import SquareConfig

logger = logging.getLogger(__name__)

CATALOG_TYPES = "ITEM,ITEM_VARIATION,IMAGE"
INVENTORY_BATCH_SIZE = 1000


class SquareCatalogClient(CatalogSource):
    def __init__(
        self,
        access_token: str,
        *,
        location_id: Optional[str] = None,
        environment: str = "sandbox",
        api_version: str = "2024-10-17",
        timeout_seconds: float = 15.0,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.location_id = (location_id or "").strip() or None
        self.http = SquareHTTP(
            access_token,
            environment=environment,
            api_version=api_version,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
            transport=transport,
        )

    @classmethod
    def from_config(cls, cfg: SquareConfig, **kwargs) -> "SquareCatalogClient":
        kwargs.setdefault("base_url", cfg.base_url)
        return cls(
            cfg.access_token,
            location_id=cfg.location_id,
            environment=cfg.environment,
            api_version=cfg.api_version,
            timeout_seconds=cfg.timeout_seconds,
            **kwargs,
        )

    async def fetch_catalog_objects(self) -> List[CatalogObject]:
        objects: List[CatalogObject] = []
        seen: Set[str] = set()
        cursor: Optional[str] = None
        pages = 0

        async with self.http.client() as client:
            while True:
                params = {"types": CATALOG_TYPES}
                if cursor:
                    params["cursor"] = cursor
                raw = await self.http.request(
                    client, "GET", "/v2/catalog/list", params=params, error_cls=SourceUnavailable
                )
                try:
                    page, next_cursor = normalize_catalog_page(raw)
                except IntegrationResponseError as e:
                    raise SourceUnavailable(f"Malformed catalog page: {e}") from e

                for obj in page:
                    if obj.id in seen:
                        continue
                    seen.add(obj.id)
                    objects.append(obj)
                pages += 1

                if not next_cursor:
                    break
                if next_cursor == cursor:
                    raise SourceUnavailable("Square returned the same catalog cursor twice")
                cursor = next_cursor

        logger.info("Fetched %d catalog objects from Square in %d page(s)", len(objects), pages)
        return objects

    async def fetch_inventory(self, variation_ids: Set[str]) -> Dict[str, InventoryRecord]:
        if not self.location_id:
            raise ConfigurationIncomplete("SQUARE_LOCATION_ID is not set", context={"variations": len(variation_ids)})
        if not variation_ids:
            return {}

        ids = sorted(variation_ids)
        records: Dict[str, InventoryRecord] = {}
        async with self.http.client() as client:
            for start in range(0, len(ids), INVENTORY_BATCH_SIZE):
                batch = ids[start:start + INVENTORY_BATCH_SIZE]
                records.update(await self._fetch_inventory_batch(client, batch))

        logger.info("Fetched inventory for %d of %d variations", len(records), len(ids))
        return records

    async def _fetch_inventory_batch(self, client: httpx.AsyncClient, batch: List[str]) -> Dict[str, InventoryRecord]:
        records: Dict[str, InventoryRecord] = {}
        cursor: Optional[str] = None
        while True:
            body = {
                "catalog_object_ids": batch,
                "location_ids": [self.location_id],
                "states": ["IN_STOCK"],
            }
            if cursor:
                body["cursor"] = cursor
            raw = await self.http.request(
                client, "POST", "/v2/inventory/counts/batch-retrieve", json=body, error_cls=SourceUnavailable
            )
            try:
                page, next_cursor = normalize_inventory_page(raw)
            except IntegrationResponseError as e:
                raise SourceUnavailable(f"Malformed inventory page: {e}") from e

            for variation_id, record in page.items():
                previous = records.get(variation_id)
                if previous is not None:
                    qty = previous.quantity + record.quantity
                    record = InventoryRecord(variation_id=variation_id, quantity=qty, in_stock=qty > 0)
                records[variation_id] = record

            if not next_cursor or next_cursor == cursor:
                return records
            cursor = next_cursor
