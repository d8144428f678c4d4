import pytest


@pytest.mark.asyncio
async def test_list_items_returns_snapshot_items(lookup, cache):
    items = await lookup.list_items()

    assert items is cache.current.items
    assert [i.name for i in items] == ["Tee", "Mug"]


@pytest.mark.asyncio
async def test_multi_variation_item_name_includes_label(lookup):
    info = await lookup.find_variation("S")

    assert info.name == "Tee – S"
    assert info.price_cents == 2000
    assert info.price == 20.0
    assert info.image_url == "https://img.example/tee.png"
    assert info.in_stock is True


@pytest.mark.asyncio
async def test_single_variation_item_name_is_item_name(lookup):
    info = await lookup.find_variation("MUG")

    assert info.name == "Mug"
    assert info.price_cents == 500
    assert info.quantity is None


@pytest.mark.asyncio
async def test_unknown_or_blank_id_is_not_found(lookup, source):
    assert await lookup.find_variation("NOPE") is None
    assert await lookup.find_variation("") is None


@pytest.mark.asyncio
async def test_two_listings_within_ttl_fetch_once(lookup, source, clock):
    first = await lookup.list_items()
    clock.advance(10)
    second = await lookup.list_items()

    assert first is second
    assert source.catalog_calls == 1
