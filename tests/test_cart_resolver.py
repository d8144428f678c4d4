import pytest

from menu_site.checkout.cart_resolver import CheckoutAssembler, coerce_quantity, parse_cart_line
from menu_site.error_handler import (
    CheckoutSessionFailed,
    EmptyCart,
    InvalidLineItem,
    NoValidItems,
)
from menu_site.integrations.clients.mocks.local_catalog import LocalCatalogSource
from menu_site.integrations.clients.mocks.payment_links import MockPaymentLinkClient
from menu_site.merch.catalog_cache import CatalogCache
from menu_site.merch.lookup import MerchLookupService


@pytest.mark.parametrize(
    "raw, expected",
    [(2, 2), ("3", 3), ("4 shirts", 4), (2.9, 2), ("abc", 0), (None, 0), (True, 0), (-1, -1), (float("nan"), 0)],
)
def test_coerce_quantity_takes_integer_prefix(raw, expected):
    assert coerce_quantity(raw) == expected


def test_parse_cart_line_rejects_missing_id_and_non_positive_quantity():
    with pytest.raises(InvalidLineItem):
        parse_cart_line({"qty": 1})
    with pytest.raises(InvalidLineItem):
        parse_cart_line({"id": "S", "qty": 0})
    with pytest.raises(InvalidLineItem):
        parse_cart_line("S")

    line = parse_cart_line({"id": " S ", "qty": "2"})
    assert (line.variation_id, line.quantity) == ("S", 2)


@pytest.mark.asyncio
async def test_checkout_uses_server_price_and_name_not_client_values(assembler, payment_links):
    session = await assembler.build_checkout_session(
        [{"id": "S", "qty": 2, "price": 1, "priceCents": 1, "name": "Free stuff"}]
    )

    [line] = session.line_items
    assert line.unit_price_cents == 2000
    assert line.quantity == 2
    assert line.name == "Tee – S"
    assert line.catalog_reference_id == "S"

    [sent] = payment_links.requests
    assert sent.line_items[0].unit_price_cents == 2000
    assert sent.currency == "USD"
    assert sent.redirect_url == "https://menuband.com"
    assert session.url.endswith(session.idempotency_key)


@pytest.mark.asyncio
@pytest.mark.parametrize("cart", [[], None, {"id": "S", "qty": 1}, "S"])
async def test_empty_or_malformed_cart_is_rejected_without_provider_call(assembler, payment_links, cart):
    with pytest.raises(EmptyCart):
        await assembler.build_checkout_session(cart)
    assert payment_links.requests == []


@pytest.mark.asyncio
async def test_bad_lines_are_skipped_and_good_ones_kept(assembler):
    session = await assembler.build_checkout_session(
        [
            {"id": "UNKNOWN", "qty": 1},
            {"id": "MUG", "qty": 0},
            {"qty": 3},
            {"id": "MUG", "qty": "3"},
        ]
    )

    assert [(li.catalog_reference_id, li.quantity) for li in session.line_items] == [("MUG", 3)]


@pytest.mark.asyncio
async def test_only_unknown_ids_fails_with_no_valid_items(assembler, payment_links):
    with pytest.raises(NoValidItems):
        await assembler.build_checkout_session([{"id": "UNKNOWN", "qty": 1}])
    assert payment_links.requests == []


@pytest.mark.asyncio
async def test_out_of_stock_variation_is_blocked_at_checkout(assembler):
    with pytest.raises(NoValidItems):
        await assembler.build_checkout_session([{"id": "L", "qty": 1}])


@pytest.mark.asyncio
async def test_out_of_stock_blocking_can_be_disabled(lookup, payment_links):
    assembler = CheckoutAssembler(lookup, payment_links, block_out_of_stock=False)

    session = await assembler.build_checkout_session([{"id": "L", "qty": 1}])

    assert session.line_items[0].name == "Tee – L"


@pytest.mark.asyncio
async def test_each_call_gets_a_fresh_idempotency_key(assembler, payment_links):
    cart = [{"id": "S", "qty": 1}]
    first = await assembler.build_checkout_session(cart)
    second = await assembler.build_checkout_session(cart)

    assert first.idempotency_key != second.idempotency_key
    assert len(payment_links.requests) == 2


@pytest.mark.asyncio
async def test_client_idempotency_key_is_passed_through(assembler, payment_links):
    session = await assembler.build_checkout_session([{"id": "S", "qty": 1}], idempotency_key="cart-123")

    assert session.idempotency_key == "cart-123"
    assert payment_links.requests[0].idempotency_key == "cart-123"


@pytest.mark.asyncio
async def test_oversized_idempotency_key_is_replaced(assembler):
    session = await assembler.build_checkout_session([{"id": "S", "qty": 1}], idempotency_key="x" * 500)

    assert session.idempotency_key != "x" * 500
    assert len(session.idempotency_key) == 36


@pytest.mark.asyncio
async def test_provider_failure_surfaces_as_checkout_session_failed(lookup):
    assembler = CheckoutAssembler(lookup, MockPaymentLinkClient(fail=True))

    with pytest.raises(CheckoutSessionFailed):
        await assembler.build_checkout_session([{"id": "S", "qty": 1}])


@pytest.mark.asyncio
async def test_catalog_outage_during_checkout_is_a_checkout_failure(clock, payment_links):
    lookup = MerchLookupService(CatalogCache(LocalCatalogSource(fail=True), clock=clock))
    assembler = CheckoutAssembler(lookup, payment_links)

    with pytest.raises(CheckoutSessionFailed):
        await assembler.build_checkout_session([{"id": "S", "qty": 1}])
    assert payment_links.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_key", [123, ["k"], {"k": 1}])
async def test_non_string_idempotency_key_is_replaced(assembler, payment_links, bad_key):
    session = await assembler.build_checkout_session([{"id": "S", "qty": 1}], idempotency_key=bad_key)

    assert isinstance(session.idempotency_key, str)
    assert len(session.idempotency_key) == 36
    assert payment_links.requests[0].idempotency_key == session.idempotency_key
