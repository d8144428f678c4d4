"""
Integrations layer.
This package contains all code used to communicate with external systems:
- Square Catalog / Inventory APIs (merch listing)
- Square Online Checkout (hosted payment links)
- Spotify Web API (latest release)

Key rule:
- Merch and checkout services MUST NOT call external APIs directly.
- They call integration clients (under menu_site/integrations/clients).
- MOCK clients are used during development; REAL_HTTP clients when credentials exist.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (menu_site/api/dependencies.py).
"""

from .contracts.catalog import (
    CatalogImage,
    CatalogItem,
    CatalogObject,
    CatalogSource,
    CatalogVariation,
    InventoryRecord,
)
from .contracts.checkout import (
    CartLine,
    CheckoutLineItem,
    CheckoutSession,
    PaymentLinkProvider,
    PaymentLinkRequest,
    PaymentLinkResponse,
)
from .contracts.merch import CacheSnapshot, FlatMerchInfo, MerchItem, MerchVariation

__all__ = [
    # catalog
    "CatalogImage", "CatalogItem", "CatalogObject", "CatalogSource",
    "CatalogVariation", "InventoryRecord",
    # checkout
    "CartLine", "CheckoutLineItem", "CheckoutSession", "PaymentLinkProvider",
    "PaymentLinkRequest", "PaymentLinkResponse",
    # merch
    "CacheSnapshot", "FlatMerchInfo", "MerchItem", "MerchVariation",
]
