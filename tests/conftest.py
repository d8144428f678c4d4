"""Pytest fixtures for the merch pipeline tests."""

import pytest

from menu_site.checkout.cart_resolver import CheckoutAssembler
from menu_site.integrations.clients.mocks.local_catalog import LocalCatalogSource
from menu_site.integrations.clients.mocks.payment_links import MockPaymentLinkClient
from menu_site.integrations.contracts.catalog import (
    CatalogImage,
    CatalogItem,
    CatalogVariation,
    InventoryRecord,
)
from menu_site.merch.catalog_cache import CatalogCache
from menu_site.merch.lookup import MerchLookupService


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def tee_catalog():
    """One "Tee" item with S (in stock) and L (sold out), plus a single-variation mug."""
    objects = [
        CatalogImage(id="IMG-TEE", url="https://img.example/tee.png"),
        CatalogImage(id="IMG-TEE-BACK", url="https://img.example/tee-back.png"),
        CatalogItem(id="ITEM-TEE", name="Tee", image_ids=("IMG-TEE", "IMG-TEE-BACK")),
        CatalogItem(id="ITEM-MUG", name="Mug"),
        CatalogVariation(id="S", item_id="ITEM-TEE", label="S", price_cents=2000),
        CatalogVariation(id="L", item_id="ITEM-TEE", label="L", price_cents=2000),
        CatalogVariation(id="MUG", item_id="ITEM-MUG", label="Regular", price_cents=500),
    ]
    inventory = {
        "S": InventoryRecord("S", quantity=3, in_stock=True),
        "L": InventoryRecord("L", quantity=0, in_stock=False),
    }
    return objects, inventory


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source(tee_catalog):
    objects, inventory = tee_catalog
    return LocalCatalogSource(objects, inventory)


@pytest.fixture
def cache(source, clock):
    return CatalogCache(source, ttl_seconds=300, clock=clock)


@pytest.fixture
def lookup(cache):
    return MerchLookupService(cache)


@pytest.fixture
def payment_links():
    return MockPaymentLinkClient()


@pytest.fixture
def assembler(lookup, payment_links):
    return CheckoutAssembler(lookup, payment_links, currency="USD", redirect_url="https://menuband.com")
