"""Claim transition - the lifecycle of a deal from open to claimed or disabled.

Each operation runs its steps strictly in order:

    validate -> resolve -> lock -> ensure open -> persist -> fan-out -> notify

Validation, resolution and the state check abort before anything is
written. Once a record is persisted it is never rolled back: fan-out,
the disabled flag and notifications are best-effort and only logged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from partner_deals.claims.fanout import CardFanOut, split_message_ids
from partner_deals.claims.guard import ClaimGuard, KeyedLock
from partner_deals.errors import (
    AlreadyClaimedError,
    ArbitrationRejectedError,
    ClaimInProgressError,
    DealClosedError,
    ValidationError,
)
from partner_deals.identity.resolver import IdentityResolver
from partner_deals.interfaces.notifier import ClaimNotifier
from partner_deals.interfaces.store import RecordStore
from partner_deals.models.config import TableNames
from partner_deals.models.deal import CardContext, DealState, Seller
from partner_deals.models.fields import (
    CLAIM_DEFAULTS,
    InventoryFields,
    OrderFields,
    PartnerOfferFields,
)
from partner_deals.models.query import LinksTo
from partner_deals.models.records import (
    ClaimReceipt,
    DisableReport,
    FanOutReport,
    OfferReceipt,
    Record,
)
from partner_deals.money import parse_amount, parse_numeric_field, payment_note
from partner_deals.policy.arbitration import UndercutArbitrator

log = logging.getLogger(__name__)

MISSING_DETAILS_MESSAGE = "Missing deal details."


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class ClaimTransition:
    """Drives claims, offers, disables and resets against the record store."""

    def __init__(
        self,
        store: RecordStore,
        resolver: IdentityResolver,
        arbitrator: UndercutArbitrator,
        fanout: CardFanOut,
        notifier: ClaimNotifier | None = None,
        tables: TableNames | None = None,
        currency_symbol: str = "€",
        guard: ClaimGuard | None = None,
        offer_locks: KeyedLock | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._arbitrator = arbitrator
        self._fanout = fanout
        self._notifier = notifier
        self._tables = tables or TableNames()
        self._symbol = currency_symbol
        self._guard = guard or ClaimGuard()
        self._offer_locks = offer_locks or KeyedLock()

    # ── State ──────────────────────────────────────────────

    async def state_of(self, order: Record) -> DealState:
        """Derive the deal state from the store. Nothing else records it.

        On Airtable the claim lookup is a paged scan of the inventory table
        (link cells cannot be matched by record id in a formula), narrowed
        to the link column. Every claim and offer pays for one such scan.
        """
        claims = await self._store.find(
            self._tables.inventory,
            LinksTo(InventoryFields.ORDER, order.id),
            max_records=1,
            fields=[InventoryFields.ORDER],
        )
        if claims:
            return DealState.CLAIMED
        if order.get(OrderFields.BUTTONS_DISABLED):
            return DealState.DISABLED
        return DealState.OPEN

    async def _ensure_open(self, order_id: str) -> Record:
        # Re-read under the lock; the caller's copy may predate a competing write.
        order = await self._resolver.get_order(order_id)
        state = await self.state_of(order)
        if state is DealState.CLAIMED:
            log.info("Order %s is already claimed", order_id)
            raise AlreadyClaimedError(order_id)
        if state is DealState.DISABLED:
            log.info("Order %s is closed", order_id)
            raise DealClosedError(order_id)
        return order

    # ── Claims ─────────────────────────────────────────────

    async def request_claim(self, raw_code: str, card: CardContext) -> ClaimReceipt:
        """Claim the deal shown on a posted card for the seller behind raw_code."""
        self._resolver.normalize_seller_code(raw_code)
        details = card.fields
        if not details.product_name or details.start_payout is None:
            raise ValidationError(MISSING_DETAILS_MESSAGE)

        seller = await self._resolver.resolve_seller(raw_code)
        order = await self._resolver.resolve_order_by_message(card.message_id)
        key = order.id if order else f"message:{card.message_id}"

        async with self._guard.hold(key), self._offer_locks.hold(key):
            if order is not None:
                order = await self._ensure_open(order.id)
            receipt = await self._persist_claim(
                seller,
                order_id=order.id if order else None,
                deal_id=details.deal_id or card.message_id,
                product_name=details.product_name,
                sku=details.sku,
                size=details.size,
                brand=details.brand,
                price=details.start_payout,
            )
            if order is not None:
                receipt.fanout = await self._close_order(order)
            else:
                receipt.fanout = await self._fanout.disable_one(
                    card.channel_id, card.message_id
                )

        await self._notify(seller, receipt)
        return receipt

    async def claim_order(self, order_id: str, raw_code: str) -> ClaimReceipt:
        """Claim an order directly, as requested by the external automation."""
        self._resolver.normalize_seller_code(raw_code, allow_prefixed=True)
        seller = await self._resolver.resolve_seller(raw_code, allow_prefixed=True)
        order = await self._resolver.get_order(order_id)

        price = parse_numeric_field(order.get(OrderFields.TARGET_PRICE))
        if price is None:
            raise ValidationError(
                "Invalid or missing Target Outsource Buying Price on order record."
            )

        async with self._guard.hold(order.id), self._offer_locks.hold(order.id):
            order = await self._ensure_open(order.id)
            receipt = await self._persist_claim(
                seller,
                order_id=order.id,
                deal_id=str(order.get(OrderFields.ORDER_ID) or order.id),
                product_name=order.get(OrderFields.PRODUCT_NAME) or "",
                sku=order.get(OrderFields.SKU) or "",
                size=order.get(OrderFields.SIZE) or "",
                brand=order.get(OrderFields.BRAND) or "",
                price=price,
            )
            receipt.fanout = await self._close_order(order)

        await self._notify(seller, receipt)
        return receipt

    async def _persist_claim(
        self,
        seller: Seller,
        *,
        order_id: str | None,
        deal_id: str,
        product_name: str,
        sku: str,
        size: str,
        brand: str,
        price: float,
    ) -> ClaimReceipt:
        fields: dict[str, Any] = {
            InventoryFields.PRODUCT_NAME: product_name,
            InventoryFields.SKU: sku,
            InventoryFields.SIZE: size,
            InventoryFields.BRAND: brand,
            InventoryFields.PURCHASE_PRICE: price,
            InventoryFields.TICKET_NUMBER: deal_id,
            InventoryFields.PURCHASE_DATE: _today(),
            InventoryFields.PAYMENT_NOTE: payment_note(price),
            InventoryFields.SELLER: [seller.record_id],
            **CLAIM_DEFAULTS,
        }
        if order_id:
            fields[InventoryFields.ORDER] = [order_id]

        record = await self._store.create(self._tables.inventory, fields)
        log.info(
            "Claim persisted: %s by %s for order %s (%s)",
            record.id,
            seller.code,
            order_id or "-",
            deal_id,
        )
        return ClaimReceipt(
            inventory_record_id=record.id,
            seller_code=seller.code,
            seller_record_id=seller.record_id,
            order_id=order_id,
            deal_id=deal_id,
            product_name=product_name,
            sku=sku,
            size=size,
            brand=brand,
            purchase_price=price,
        )

    async def _notify(self, seller: Seller, receipt: ClaimReceipt) -> None:
        if self._notifier is None:
            return
        if seller.webhook_url:
            try:
                await self._notifier.notify_seller(seller.webhook_url, receipt)
            except Exception as exc:
                log.warning("Seller notification for %s failed: %s", seller.code, exc)
        if receipt.order_id:
            try:
                await self._notifier.notify_automation(receipt.order_id)
            except Exception as exc:
                log.warning(
                    "Automation notification for %s failed: %s", receipt.order_id, exc
                )

    # ── Offers ─────────────────────────────────────────────

    async def request_offer(
        self, raw_code: str, raw_amount: str, card: CardContext
    ) -> OfferReceipt:
        """Record a counter-offer if it undercuts every earlier offer."""
        self._resolver.normalize_seller_code(raw_code)
        amount = parse_amount(raw_amount, self._symbol)

        seller = await self._resolver.resolve_seller(raw_code)
        order = await self._resolver.resolve_order_by_message(card.message_id)
        if order is None:
            return await self._persist_offer(seller, amount, None, card)

        async with self._offer_locks.hold(order.id):
            if self._guard.is_held(order.id):
                raise ClaimInProgressError(order.id)
            await self._ensure_open(order.id)
            result = await self._arbitrator.evaluate(amount, order.id)
            if result.reason == "invalid_amount":
                raise ValidationError("Please enter a valid positive offer amount.")
            if not result.accepted:
                raise ArbitrationRejectedError(
                    result.floor,
                    result.ceiling,
                    self._arbitrator.step,
                    self._symbol,
                )
            return await self._persist_offer(seller, amount, order.id, card)

    async def _persist_offer(
        self,
        seller: Seller,
        amount: float,
        order_id: str | None,
        card: CardContext,
    ) -> OfferReceipt:
        fields: dict[str, Any] = {
            PartnerOfferFields.AMOUNT: amount,
            PartnerOfferFields.OFFER_DATE: _today(),
            PartnerOfferFields.SELLER: [seller.record_id],
        }
        if order_id:
            fields[PartnerOfferFields.ORDER] = [order_id]
        record = await self._store.create(self._tables.partner_offers, fields)
        log.info(
            "Offer persisted: %s by %s, %.2f on order %s",
            record.id,
            seller.code,
            amount,
            order_id or "-",
        )
        return OfferReceipt(
            offer_record_id=record.id,
            seller_code=seller.code,
            seller_record_id=seller.record_id,
            order_id=order_id,
            amount=amount,
            product_name=card.fields.product_name,
            size=card.fields.size,
        )

    # ── Disable / reset ────────────────────────────────────

    async def disable(self, order_id: str) -> DisableReport:
        """Disable every posted copy of an order's card and set its flag.

        A no-op when the flag is already set.
        """
        order = await self._resolver.get_order(order_id)
        if order.get(OrderFields.BUTTONS_DISABLED):
            log.info("Order %s already disabled, skipping fan-out", order_id)
            return DisableReport(order_id=order_id, skipped=True)
        fanout = await self._close_order(order)
        return DisableReport(order_id=order_id, fanout=fanout)

    async def check_repost(self, order_id: str) -> None:
        """Refuse a fresh posting for an order that already has a claim.

        A disabled order without a claim may be re-posted; reset() reopens it.
        Unknown orders are left to the caller.
        """
        order = await self._store.get(self._tables.orders, order_id)
        if order is None:
            log.warning("Order %s not found, posting without bookkeeping", order_id)
            return
        if await self.state_of(order) is DealState.CLAIMED:
            log.info("Refusing to re-post claimed order %s", order_id)
            raise AlreadyClaimedError(order_id)

    async def reset(self, order_id: str, message_ids: list[str]) -> None:
        """Point the order at a fresh posting and reopen it."""
        await self._store.update(
            self._tables.orders,
            order_id,
            {
                OrderFields.MESSAGE_IDS: ",".join(message_ids),
                OrderFields.BUTTONS_DISABLED: False,
            },
        )
        log.info("Order %s reset to %d posted cards", order_id, len(message_ids))

    async def _close_order(self, order: Record) -> FanOutReport:
        message_ids = split_message_ids(order.get(OrderFields.MESSAGE_IDS))
        if message_ids:
            report = await self._fanout.disable_all(message_ids)
        else:
            log.info("Order %s has no posted cards to disable", order.id)
            report = FanOutReport()
        try:
            await self._store.update(
                self._tables.orders, order.id, {OrderFields.BUTTONS_DISABLED: True}
            )
        except Exception as exc:
            log.warning("Failed to set disabled flag on order %s: %s", order.id, exc)
        return report
