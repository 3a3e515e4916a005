"""Command dispatcher - routes triggers and UI interactions to the claim core.

Two inbound shapes arrive here:

1. Automation commands (create, disable, claim) carried by the HTTP
   listener. Errors propagate to the caller, which maps them to statuses.
2. Chat interactions (button presses, prompt submissions). Every path
   produces exactly one acknowledgement to the user; errors never escape.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from partner_deals.cards.codec import parse_card, render_card
from partner_deals.claims.transition import MISSING_DETAILS_MESSAGE, ClaimTransition
from partner_deals.errors import (
    ChannelUnavailableError,
    DealError,
    ExpiredInteractionError,
    NoBroadcastTargetError,
    ValidationError,
)
from partner_deals.interfaces.board import DealBoard
from partner_deals.interfaces.responder import Responder
from partner_deals.models.deal import CardContext, Deal
from partner_deals.models.interactions import (
    ButtonPress,
    InteractionKind,
    Prompt,
    PromptInput,
    Submission,
)
from partner_deals.models.records import ClaimReceipt, DisableReport, PostResult
from partner_deals.money import format_money, parse_numeric_field

log = logging.getLogger(__name__)

CLAIM_BUTTON = "partner_claim"
OFFER_BUTTON = "partner_offer"
CLAIM_PROMPT = "partner_claim_modal"
OFFER_PROMPT = "partner_offer_modal"

SELLER_INPUT = "seller_id"
OFFER_INPUT = "offer_price"

GENERIC_FAILURE = "❌ Something went wrong handling this interaction."
NO_CARD = "❌ No deal embed found."

_REQUIRED = ("productName", "sku", "size", "brand")


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def deal_from_payload(payload: Mapping[str, Any], offer_only: bool = False) -> Deal:
    """Build a Deal from an automation payload. Raises ValidationError."""
    payout = parse_numeric_field(payload.get("startPayout"))
    if any(not _text(payload.get(key)) for key in _REQUIRED) or not payout or payout <= 0:
        raise ValidationError("Missing required fields in payload.")
    return Deal(
        product_name=_text(payload["productName"]),
        sku=_text(payload["sku"]),
        size=_text(payload["size"]),
        brand=_text(payload["brand"]),
        start_payout=payout,
        deal_id=_text(payload.get("dealId")) or None,
        image_url=_text(payload.get("imageUrl")) or None,
        record_id=_text(payload.get("recordId")) or None,
        offer_only=offer_only,
    )


def build_prompt(kind: InteractionKind, message_id: str, symbol: str = "€") -> Prompt:
    seller = PromptInput(SELLER_INPUT, "Seller ID (e.g. 00001)", placeholder="00001")
    if kind is InteractionKind.CLAIM:
        return Prompt(f"{CLAIM_PROMPT}:{message_id}", "Enter Seller ID", (seller,))
    offer = PromptInput(OFFER_INPUT, f"Your Offer ({symbol})", placeholder="140")
    return Prompt(f"{OFFER_PROMPT}:{message_id}", "Enter Seller ID & Offer", (seller, offer))


class CommandDispatcher:
    """Entry point for every inbound command and interaction."""

    def __init__(
        self,
        transition: ClaimTransition,
        board: DealBoard,
        channel_ids: Sequence[int],
        currency_symbol: str = "€",
    ) -> None:
        self._transition = transition
        self._board = board
        self._channel_ids = list(channel_ids)
        self._symbol = currency_symbol

    # ── Automation commands ────────────────────────────────

    async def create_deal(
        self, payload: Mapping[str, Any], offer_only: bool = False
    ) -> PostResult:
        """Render and broadcast a deal card to every configured channel."""
        deal = deal_from_payload(payload, offer_only=offer_only)
        card = render_card(deal, self._symbol)
        if deal.record_id:
            await self._transition.check_repost(deal.record_id)

        message_ids: list[str] = []
        for channel_id in self._channel_ids:
            try:
                message_ids.append(await self._board.post_card(channel_id, card))
            except ChannelUnavailableError as exc:
                log.warning("%s", exc)

        if not message_ids:
            raise NoBroadcastTargetError()

        log.info(
            "Deal posted: %s (%s) to %d channels%s",
            deal.product_name,
            deal.size,
            len(message_ids),
            " [offer only]" if offer_only else "",
        )

        if deal.record_id:
            try:
                await self._transition.reset(deal.record_id, message_ids)
            except Exception as exc:
                log.warning(
                    "Failed to record message ids on order %s: %s", deal.record_id, exc
                )

        return PostResult(message_ids=message_ids, record_id=deal.record_id)

    async def disable_deal(self, payload: Mapping[str, Any]) -> DisableReport:
        record_id = _text(payload.get("recordId"))
        if not record_id:
            raise ValidationError("Missing recordId.")
        return await self._transition.disable(record_id)

    async def claim_from_automation(self, payload: Mapping[str, Any]) -> ClaimReceipt:
        order_id = _text(payload.get("orderRecordId"))
        seller_code = _text(payload.get("sellerCode"))
        if not order_id or not seller_code:
            raise ValidationError("Missing orderRecordId or sellerCode.")
        return await self._transition.claim_order(order_id, seller_code)

    # ── Chat interactions ──────────────────────────────────

    def accepts(self, channel_id: int | None, custom_id: str) -> bool:
        """True for interactions this dispatcher owns."""
        if channel_id not in self._channel_ids:
            return False
        if custom_id in (CLAIM_BUTTON, OFFER_BUTTON):
            return True
        prefix, sep, message_id = custom_id.partition(":")
        return bool(sep and message_id) and prefix in (CLAIM_PROMPT, OFFER_PROMPT)

    async def handle_button(self, press: ButtonPress, responder: Responder) -> None:
        try:
            if not press.has_card:
                await responder.reply(NO_CARD)
                return
            if press.custom_id == CLAIM_BUTTON:
                kind = InteractionKind.CLAIM
            elif press.custom_id == OFFER_BUTTON:
                kind = InteractionKind.OFFER
            else:
                log.debug("Ignoring button %s", press.custom_id)
                return
            await responder.show_prompt(build_prompt(kind, press.message_id, self._symbol))
        except ExpiredInteractionError:
            log.warning("Interaction expired before prompt for %s", press.message_id)
        except Exception:
            log.error("Button handling failed for %s", press.message_id, exc_info=True)
            await self._reply_quietly(responder, GENERIC_FAILURE)

    async def handle_submission(self, submission: Submission, responder: Responder) -> None:
        prefix, _, message_id = submission.custom_id.partition(":")
        if prefix not in (CLAIM_PROMPT, OFFER_PROMPT) or not message_id:
            log.debug("Ignoring submission %s", submission.custom_id)
            return

        try:
            await responder.defer()
            text = await self._board.fetch_card_text(submission.channel_id, message_id)
            if not text:
                await responder.reply(f"❌ {MISSING_DETAILS_MESSAGE}")
                return
            card = CardContext(
                channel_id=submission.channel_id,
                message_id=message_id,
                fields=parse_card(text),
            )
            if prefix == CLAIM_PROMPT:
                content = await self._claim(submission, card)
            else:
                content = await self._offer(submission, card)
            await responder.reply(content)
        except ExpiredInteractionError:
            log.warning("Interaction expired while handling %s", submission.custom_id)
        except DealError as exc:
            log.info("Rejected %s: %s", submission.custom_id, exc)
            await self._reply_quietly(responder, f"❌ {exc}")
        except Exception:
            log.error("Interaction error for %s", submission.custom_id, exc_info=True)
            await self._reply_quietly(responder, GENERIC_FAILURE)

    async def _claim(self, submission: Submission, card: CardContext) -> str:
        receipt = await self._transition.request_claim(submission.value(SELLER_INPUT), card)
        return (
            f"✅ Deal claimed for **{receipt.product_name} ({receipt.size})**.\n"
            f"Seller: `{receipt.seller_code}`"
        )

    async def _offer(self, submission: Submission, card: CardContext) -> str:
        receipt = await self._transition.request_offer(
            submission.value(SELLER_INPUT), submission.value(OFFER_INPUT), card
        )
        return (
            f"✅ Offer submitted for **{receipt.product_name} ({receipt.size})**.\n"
            f"Seller: `{receipt.seller_code}`\n"
            f"Offer: {format_money(receipt.amount, self._symbol)}"
        )

    async def _reply_quietly(self, responder: Responder, content: str) -> None:
        try:
            await responder.reply(content)
        except ExpiredInteractionError:
            log.warning("Interaction expired, could not send: %s", content)
        except Exception:
            log.error("Failed to acknowledge interaction", exc_info=True)
