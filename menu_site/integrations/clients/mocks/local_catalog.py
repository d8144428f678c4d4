"""
Local Catalog Source (Mock/Local).

Purpose:
- Development-time catalog source when Square credentials are not available
- Serves a fixed, in-memory set of items, variations, images and inventory
- Does NOT make any network calls

Swap:
Replaced by clients/real_http/square_catalog.py when SQUARE_ACCESS_TOKEN is set
(selection happens in api/dependencies.py only).
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from menu_site.error_handler import SourceUnavailable
from menu_site.integrations.contracts.catalog import (
    CatalogImage,
    CatalogItem,
    CatalogObject,
    CatalogSource,
    CatalogVariation,
    InventoryRecord,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_SEED_OBJECTS: List[CatalogObject] = [
    CatalogImage(id="IMG-CHAPSTICK", url="/images/merch/tee_black.png"),
    CatalogImage(id="IMG-TEE-WHITE", url="/images/merch/tee_white.png"),
    CatalogImage(id="IMG-HOODIE", url="/images/merch/hoodie_logo.png"),
    CatalogItem(id="ITEM-CHAPSTICK", name="Chapstick", image_ids=("IMG-CHAPSTICK",)),
    CatalogItem(id="ITEM-TEE-WHITE", name="Classic MENU Tee (White)", image_ids=("IMG-TEE-WHITE",)),
    CatalogItem(id="ITEM-HOODIE", name="Logo Hoodie", image_ids=("IMG-HOODIE",)),
    CatalogVariation(id="chapstick", item_id="ITEM-CHAPSTICK", label="", price_cents=500),
    CatalogVariation(id="tee-classic-white-s", item_id="ITEM-TEE-WHITE", label="S", price_cents=3000),
    CatalogVariation(id="tee-classic-white-m", item_id="ITEM-TEE-WHITE", label="M", price_cents=3000),
    CatalogVariation(id="tee-classic-white-l", item_id="ITEM-TEE-WHITE", label="L", price_cents=3000),
    CatalogVariation(id="hoodie-logo", item_id="ITEM-HOODIE", label="", price_cents=5500),
]

_SEED_INVENTORY: Dict[str, InventoryRecord] = {
    "tee-classic-white-s": InventoryRecord("tee-classic-white-s", quantity=12, in_stock=True),
    "tee-classic-white-m": InventoryRecord("tee-classic-white-m", quantity=4, in_stock=True),
    "tee-classic-white-l": InventoryRecord("tee-classic-white-l", quantity=0, in_stock=False),
}


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class LocalCatalogSource(CatalogSource):
    """
    In-memory catalog source.

    Parameters
    ----------
    objects, inventory : optional overrides of the seed data
    fail : when True every fetch raises ``SourceUnavailable``
    """

    def __init__(
        self,
        objects: Optional[Sequence[CatalogObject]] = None,
        inventory: Optional[Dict[str, InventoryRecord]] = None,
        *,
        fail: bool = False,
    ) -> None:
        self.objects: List[CatalogObject] = list(_SEED_OBJECTS if objects is None else objects)
        self.inventory: Dict[str, InventoryRecord] = dict(_SEED_INVENTORY if inventory is None else inventory)
        self.fail = fail
        self.catalog_calls = 0
        self.inventory_calls = 0

    async def fetch_catalog_objects(self) -> List[CatalogObject]:
        self.catalog_calls += 1
        if self.fail:
            raise SourceUnavailable("local catalog configured to fail")
        logger.debug("[MOCK] Serving %d catalog objects", len(self.objects))
        return list(self.objects)

    async def fetch_inventory(self, variation_ids: Set[str]) -> Dict[str, InventoryRecord]:
        self.inventory_calls += 1
        if self.fail:
            raise SourceUnavailable("local inventory configured to fail")
        return {vid: rec for vid, rec in self.inventory.items() if vid in variation_ids}
