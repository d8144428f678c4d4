"""Read contract over the catalog cache, shared by the listing and checkout endpoints."""

import logging
from typing import Optional, Tuple

from menu_site.integrations.contracts.merch import FlatMerchInfo, MerchItem
from menu_site.merch.catalog_cache import CatalogCache

logger = logging.getLogger(__name__)

NAME_SEPARATOR = " – "


class MerchLookupService:
    def __init__(self, cache: CatalogCache) -> None:
        self.cache = cache

    async def list_items(self) -> Tuple[MerchItem, ...]:
        snapshot = await self.cache.get_snapshot()
        return snapshot.items

    async def find_variation(self, variation_id: str) -> Optional[FlatMerchInfo]:
        """
        Resolve a variation id to a flat, priced record.

        The display name carries the variation label only when the item has
        more than one variation.
        """
        if not variation_id:
            return None
        snapshot = await self.cache.get_snapshot()
        for item in snapshot.items:
            for variation in item.variations:
                if variation.id != variation_id:
                    continue
                if len(item.variations) > 1:
                    name = f"{item.name}{NAME_SEPARATOR}{variation.label}"
                else:
                    name = item.name
                return FlatMerchInfo(
                    id=variation.id,
                    name=name,
                    price_cents=variation.price_cents,
                    price=variation.price,
                    image_url=item.image_url,
                    in_stock=variation.in_stock,
                    quantity=variation.quantity,
                )
        logger.debug("Variation %s not found in catalog snapshot", variation_id)
        return None
