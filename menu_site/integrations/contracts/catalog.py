"""
Catalog source contracts.

Defines the shapes the merch pipeline reads from a catalog provider:
- catalog objects (items, variations, images)
- inventory counts keyed by variation id

These contracts must be used by both:
- clients/mocks/local_catalog.py (in-memory catalog for development/testing)
- clients/real_http/square_catalog.py (Square Catalog + Inventory APIs)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Union


# ---------------------------------------------------------------------------
# Catalog objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    image_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CatalogVariation:
    id: str
    item_id: Optional[str]
    label: str
    price_cents: Optional[int]             # minor currency units; None = variable pricing
    image_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CatalogImage:
    id: str
    url: str


CatalogObject = Union[CatalogItem, CatalogVariation, CatalogImage]


@dataclass(frozen=True)
class InventoryRecord:
    variation_id: str
    quantity: Union[int, float]
    in_stock: bool


# ---------------------------------------------------------------------------
# Abstract source interface
# ---------------------------------------------------------------------------

class CatalogSource(ABC):
    """Every catalog provider client must implement this interface."""

    @abstractmethod
    async def fetch_catalog_objects(self) -> List[CatalogObject]:
        """Return every item, variation and image, all pages concatenated."""

    @abstractmethod
    async def fetch_inventory(self, variation_ids: Set[str]) -> Dict[str, InventoryRecord]:
        """Return inventory records for the given variations.

        Variations the provider does not track are simply absent. Raises
        ``ConfigurationIncomplete`` when the source cannot look up stock at all.
        """
