"""Identity resolver: seller codes and message-id lookups."""

from __future__ import annotations

import pytest

from partner_deals.errors import NotFoundError, ValidationError
from tests.factories import seed_order, seed_seller


# ── Seller codes ─────────────────────────────────────────────────


def test_normalize_digits(resolver):
    assert resolver.normalize_seller_code(" 00007 ") == "SE-00007"


@pytest.mark.parametrize("raw", ["abc12", "SE-00007", "12 34", "", "٣٤"])
def test_normalize_rejects_non_digits(resolver, raw):
    with pytest.raises(ValidationError, match="digits only"):
        resolver.normalize_seller_code(raw)


def test_normalize_accepts_prefixed_when_allowed(resolver):
    assert resolver.normalize_seller_code("SE-00001", allow_prefixed=True) == "SE-00001"
    assert resolver.normalize_seller_code("00001", allow_prefixed=True) == "SE-00001"


async def test_resolve_seller(resolver, store):
    record = await seed_seller(store, "SE-00007", webhook_url="https://hooks.example/s7")

    seller = await resolver.resolve_seller("00007")

    assert seller.record_id == record.id
    assert seller.code == "SE-00007"
    assert seller.webhook_url == "https://hooks.example/s7"


async def test_resolve_seller_first_match_wins(resolver, store):
    first = await seed_seller(store, "SE-00007")
    await seed_seller(store, "SE-00007")

    seller = await resolver.resolve_seller("00007")
    assert seller.record_id == first.id


async def test_unknown_seller_is_not_found(resolver, store):
    await seed_seller(store, "SE-00007")

    with pytest.raises(NotFoundError) as info:
        await resolver.resolve_seller("00008")
    assert str(info.value) == (
        "Could not find a seller with ID `SE-00008` in Sellers Database."
    )


async def test_invalid_code_makes_no_store_call(resolver, store):
    with pytest.raises(ValidationError):
        await resolver.resolve_seller("abc12")
    assert store.calls == []


# ── Orders by message ────────────────────────────────────────────


async def test_resolve_order_matches_any_posted_copy(resolver, store):
    order = await seed_order(
        store, message_ids=["1300000000000000011", "1300000000000000022"]
    )

    found = await resolver.resolve_order_by_message("1300000000000000022")

    assert found is not None
    assert found.id == order.id


async def test_resolve_order_unknown_message(resolver, store):
    await seed_order(store, message_ids=["1300000000000000011"])
    assert await resolver.resolve_order_by_message("1300000000000000099") is None


async def test_get_order_not_found(resolver):
    with pytest.raises(NotFoundError, match="order"):
        await resolver.get_order("recMissing")
