"""Outbound claim webhooks."""

from __future__ import annotations

import json

import httpx

from partner_deals.models.records import ClaimReceipt
from partner_deals.notify.webhooks import CONFIRMED_COLOR, WebhookNotifier, seller_payload


def make_receipt(**overrides) -> ClaimReceipt:
    defaults = dict(
        inventory_record_id="recInv",
        seller_code="SE-00007",
        seller_record_id="recSeller",
        order_id="recOrder",
        deal_id="1001",
        product_name="Shoe A",
        sku="SKU1",
        size="42",
        brand="B",
        purchase_price=100.0,
    )
    defaults.update(overrides)
    return ClaimReceipt(**defaults)


def recording_transport(status: int = 204):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status)

    return httpx.MockTransport(handler), seen


def test_seller_payload():
    body = seller_payload(make_receipt())

    assert body["content"] == "New deal claimed by `SE-00007` • Order ID: `1001`"
    (embed,) = body["embeds"]
    assert embed["title"] == "✅ DEAL CONFIRMED ✅"
    assert embed["description"] == "**Shoe A**\nSKU1\n42\nB"
    assert embed["color"] == CONFIRMED_COLOR
    assert embed["fields"][0] == {
        "name": "Confirmed Deal Price",
        "value": "€100.00",
        "inline": False,
    }


async def test_notify_seller_posts_embed():
    transport, seen = recording_transport()
    notifier = WebhookNotifier(transport=transport)

    assert await notifier.notify_seller("https://hooks.example/s7", make_receipt())

    (req,) = seen
    assert str(req.url) == "https://hooks.example/s7"
    assert json.loads(req.content)["embeds"][0]["title"] == "✅ DEAL CONFIRMED ✅"


async def test_notify_automation():
    transport, seen = recording_transport(200)
    notifier = WebhookNotifier("https://hook.example/make", transport=transport)

    assert await notifier.notify_automation("recOrder")
    assert json.loads(seen[0].content) == {"orderRecordId": "recOrder"}


async def test_automation_skipped_without_url():
    transport, seen = recording_transport()
    notifier = WebhookNotifier(transport=transport)

    assert not await notifier.notify_automation("recOrder")
    assert seen == []


async def test_failures_are_reported_not_raised():
    transport, _ = recording_transport(500)
    notifier = WebhookNotifier("https://hook.example/make", transport=transport)
    assert not await notifier.notify_automation("recOrder")

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    notifier = WebhookNotifier(transport=httpx.MockTransport(refuse))
    assert not await notifier.notify_seller("https://hooks.example/s7", make_receipt())
