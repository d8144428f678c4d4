"""
Catalog normalizer.

Joins raw catalog objects (items, variations, images) with inventory counts
into the grouped ``MerchItem`` model served by the site.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional

from menu_site.integrations.contracts.catalog import (
    CatalogImage,
    CatalogItem,
    CatalogObject,
    CatalogVariation,
    InventoryRecord,
)
from menu_site.integrations.contracts.merch import MerchItem, MerchVariation

logger = logging.getLogger(__name__)

# Variations the provider does not track inventory for are sellable.
ASSUME_IN_STOCK_WHEN_UNTRACKED = True

DEFAULT_VARIATION_LABEL = "Default"
UNKNOWN_ITEM_NAME = "Unknown item"


def normalize(
    objects: Iterable[CatalogObject],
    inventory: Mapping[str, InventoryRecord],
    *,
    assume_in_stock: bool = ASSUME_IN_STOCK_WHEN_UNTRACKED,
) -> List[MerchItem]:
    """
    Build the grouped merch list.

    Items appear in the order their first priced variation appears; variations
    keep source order. Variations without a parent item or a positive price
    are dropped, and items left with no variations are omitted.
    """
    items: Dict[str, CatalogItem] = {}
    variations: List[CatalogVariation] = []
    image_urls: Dict[str, str] = {}
    seen_variations = set()

    for obj in objects:
        if isinstance(obj, CatalogItem):
            items.setdefault(obj.id, obj)
        elif isinstance(obj, CatalogVariation):
            if obj.id in seen_variations:
                continue
            seen_variations.add(obj.id)
            variations.append(obj)
        elif isinstance(obj, CatalogImage):
            image_urls[obj.id] = obj.url

    groups: "OrderedDict[str, dict]" = OrderedDict()
    skipped = 0

    for variation in variations:
        if not variation.item_id or not variation.price_cents or variation.price_cents <= 0:
            skipped += 1
            continue

        parent = items.get(variation.item_id)
        label = variation.label.strip() or DEFAULT_VARIATION_LABEL
        image_url = _resolve_image(parent, variation, image_urls)

        record = inventory.get(variation.id)
        if record is not None:
            quantity: Optional[float] = record.quantity
            in_stock = record.in_stock
        else:
            quantity = None
            in_stock = assume_in_stock

        group = groups.get(variation.item_id)
        if group is None:
            group = {
                "name": (parent.name.strip() if parent else "") or UNKNOWN_ITEM_NAME,
                "image_url": None,
                "variations": [],
                "parent": parent,
            }
            groups[variation.item_id] = group
        if group["image_url"] is None and image_url:
            group["image_url"] = image_url

        group["variations"].append(
            MerchVariation(
                id=variation.id,
                label=label,
                price_cents=int(variation.price_cents),
                quantity=quantity,
                in_stock=in_stock,
            )
        )

    if skipped:
        logger.debug("Skipped %d unpriced or orphaned variations", skipped)

    result: List[MerchItem] = []
    for item_id, group in groups.items():
        merch_variations = tuple(group["variations"])
        result.append(
            MerchItem(
                item_id=item_id,
                name=group["name"],
                image_url=group["image_url"],
                variations=merch_variations,
                item_sold_out=not any(v.in_stock for v in merch_variations),
                gallery_image_urls=_gallery(group["parent"], group["image_url"], image_urls),
            )
        )
    return result


def _resolve_image(
    parent: Optional[CatalogItem],
    variation: CatalogVariation,
    image_urls: Mapping[str, str],
) -> Optional[str]:
    # Parent's first image wins over the variation's own.
    image_id = None
    if parent and parent.image_ids:
        image_id = parent.image_ids[0]
    elif variation.image_ids:
        image_id = variation.image_ids[0]
    if image_id is None:
        return None
    return image_urls.get(image_id)


def _gallery(parent: Optional[CatalogItem], primary: Optional[str], image_urls: Mapping[str, str]) -> tuple:
    if parent is None:
        return ()
    out: List[str] = []
    for image_id in parent.image_ids:
        url = image_urls.get(image_id)
        if url and url != primary and url not in out:
            out.append(url)
    return tuple(out)
