"""ClaimNotifier protocol - best-effort outbound notifications after a claim."""

from __future__ import annotations

from typing import Protocol

from partner_deals.models.records import ClaimReceipt


class ClaimNotifier(Protocol):
    """Tells the seller and the automation system about a claim."""

    async def notify_seller(self, webhook_url: str, receipt: ClaimReceipt) -> bool:
        """Post a confirmation to the seller's private endpoint."""
        ...

    async def notify_automation(self, order_id: str) -> bool:
        """Tell the downstream automation which order was claimed."""
        ...
