"""Outbound claim notifications over plain JSON webhooks."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from partner_deals.models.records import ClaimReceipt
from partner_deals.money import format_money

log = logging.getLogger(__name__)

CONFIRMED_COLOR = 16776960  # yellow


def seller_payload(receipt: ClaimReceipt, symbol: str = "€") -> dict[str, Any]:
    """Discord-webhook body confirming a claim to the seller."""
    content = f"New deal claimed by `{receipt.seller_code}`"
    if receipt.deal_id:
        content += f" • Order ID: `{receipt.deal_id}`"
    return {
        "content": content,
        "embeds": [
            {
                "title": "✅ DEAL CONFIRMED ✅",
                "description": (
                    f"**{receipt.product_name}**\n"
                    f"{receipt.sku}\n"
                    f"{receipt.size}\n"
                    f"{receipt.brand}"
                ),
                "color": CONFIRMED_COLOR,
                "fields": [
                    {
                        "name": "Confirmed Deal Price",
                        "value": format_money(receipt.purchase_price, symbol),
                        "inline": False,
                    }
                ],
            }
        ],
    }


class WebhookNotifier:
    """Best-effort ClaimNotifier. Failures are logged and reported as False."""

    def __init__(
        self,
        automation_url: str | None = None,
        timeout: int = 10,
        currency_symbol: str = "€",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._automation_url = automation_url or None
        self._timeout = timeout
        self._symbol = currency_symbol
        self._transport = transport

    async def notify_seller(self, webhook_url: str, receipt: ClaimReceipt) -> bool:
        if not webhook_url:
            return False
        return await self._post(webhook_url, seller_payload(receipt, self._symbol), "seller")

    async def notify_automation(self, order_id: str) -> bool:
        if not self._automation_url:
            log.debug("No automation webhook configured, skipping")
            return False
        if not order_id:
            log.warning("No order id for automation webhook, skipping")
            return False
        return await self._post(self._automation_url, {"orderRecordId": order_id}, "automation")

    async def _post(self, url: str, body: dict[str, Any], target: str) -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, json=body)
        except Exception as exc:
            log.warning("Failed to send %s claim webhook: %s", target, exc)
            return False
        if resp.is_error:
            log.warning(
                "%s claim webhook returned %d: %s", target, resp.status_code, resp.text[:200]
            )
            return False
        log.info("%s claim webhook status: %d", target, resp.status_code)
        return True
