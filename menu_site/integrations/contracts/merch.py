"""
Merch contracts.

Internal, provider-independent shapes produced by the normalizer and served by
the catalog cache. Everything here is immutable: a snapshot is replaced, never
edited.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class MerchVariation:
    id: str
    label: str
    price_cents: int
    quantity: Optional[float]             # None = provider does not track stock
    in_stock: bool

    @property
    def price(self) -> float:
        return self.price_cents / 100


@dataclass(frozen=True)
class MerchItem:
    item_id: str
    name: str
    image_url: Optional[str]
    variations: Tuple[MerchVariation, ...]
    item_sold_out: bool
    gallery_image_urls: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CacheSnapshot:
    items: Tuple[MerchItem, ...] = field(default_factory=tuple)
    fetched_at: Optional[float] = None    # clock reading of the last successful fetch

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class FlatMerchInfo:
    """A single variation resolved to a display name and price."""
    id: str
    name: str
    price_cents: int
    price: float
    image_url: Optional[str]
    in_stock: bool = True
    quantity: Optional[float] = None
