import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from menu_site.checkout.cart_resolver import CheckoutAssembler
from menu_site.integrations.clients.mocks.local_catalog import LocalCatalogSource
from menu_site.integrations.clients.mocks.payment_links import MockPaymentLinkClient
from menu_site.integrations.clients.real_http.spotify import SpotifyClient
from menu_site.integrations.clients.real_http.square_catalog import SquareCatalogClient
from menu_site.integrations.clients.real_http.square_checkout import SquarePaymentLinkClient
from menu_site.integrations.contracts.catalog import CatalogSource
from menu_site.integrations.contracts.checkout import PaymentLinkProvider
from menu_site.merch.catalog_cache import CatalogCache
from menu_site.merch.lookup import MerchLookupService
from menu_site.utils.site_config_loader import SiteConfig

logger = logging.getLogger(__name__)


@dataclass
class SiteServices:
    config: SiteConfig
    cache: CatalogCache
    lookup: MerchLookupService
    checkout: CheckoutAssembler
    spotify: SpotifyClient
    integrations_mode: str


def should_use_real_integrations(cfg: SiteConfig) -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(cfg.square.access_token)


def build_services(
    cfg: SiteConfig,
    *,
    catalog_source: Optional[CatalogSource] = None,
    payment_links: Optional[PaymentLinkProvider] = None,
    spotify: Optional[SpotifyClient] = None,
) -> SiteServices:
    """Wire the merch pipeline. This is the only place mock vs real clients are chosen."""
    use_real = should_use_real_integrations(cfg)
    if catalog_source is None:
        catalog_source = SquareCatalogClient.from_config(cfg.square) if use_real else LocalCatalogSource()
    if payment_links is None:
        payment_links = SquarePaymentLinkClient.from_config(cfg.square) if use_real else MockPaymentLinkClient()
    if spotify is None:
        spotify = SpotifyClient.from_config(cfg.spotify)

    cache = CatalogCache(
        catalog_source,
        ttl_seconds=cfg.merch.cache_ttl_seconds,
        assume_in_stock=cfg.merch.assume_in_stock_without_inventory,
    )
    lookup = MerchLookupService(cache)
    checkout = CheckoutAssembler(
        lookup,
        payment_links,
        currency=cfg.checkout.currency,
        redirect_url=cfg.checkout.redirect_url,
        block_out_of_stock=cfg.merch.block_out_of_stock_at_checkout,
    )
    mode = "real" if use_real else "mock"
    logger.info(
        "Integrations: %s (catalog=%s, payments=%s)",
        mode,
        type(catalog_source).__name__,
        type(payment_links).__name__,
    )
    return SiteServices(
        config=cfg,
        cache=cache,
        lookup=lookup,
        checkout=checkout,
        spotify=spotify,
        integrations_mode=mode,
    )


def get_services(request: Request) -> SiteServices:
    return request.app.state.services
