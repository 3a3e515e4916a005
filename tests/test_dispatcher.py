"""Command dispatcher: automation commands and UI interaction routing."""

from __future__ import annotations

import pytest

from partner_deals.cards.codec import TITLE_OFFER_ONLY, render_card
from partner_deals.dispatch.dispatcher import GENERIC_FAILURE, NO_CARD
from partner_deals.errors import NoBroadcastTargetError, ValidationError
from partner_deals.models.interactions import ButtonPress, Submission
from tests.conftest import CHANNEL_A, CHANNEL_B
from tests.factories import make_deal, make_payload
from tests.mocks import MockResponder


def claim_submission(message_id: str, code: str, channel_id: int = CHANNEL_A) -> Submission:
    return Submission(
        custom_id=f"partner_claim_modal:{message_id}",
        channel_id=channel_id,
        values={"seller_id": code},
    )


# ── Test 1: Deal creation ────────────────────────────────────────


async def test_create_deal_posts_to_every_channel(dispatcher, board):
    result = await dispatcher.create_deal(make_payload(dealId="1001", imageUrl="https://img/x.png"))

    assert len(result.message_ids) == 2
    channels = {board.cards[mid].channel_id for mid in result.message_ids}
    assert channels == {CHANNEL_A, CHANNEL_B}
    card = board.cards[result.message_ids[0]].card
    assert "**Payout:** €100.00" in card.description
    assert card.image_url == "https://img/x.png"


@pytest.mark.parametrize(
    "overrides",
    [{"productName": None}, {"brand": ""}, {"startPayout": 0}, {"startPayout": "free"}],
)
async def test_create_deal_requires_fields(dispatcher, board, overrides):
    with pytest.raises(ValidationError, match="Missing required fields"):
        await dispatcher.create_deal(make_payload(**overrides))
    assert board.cards == {}


async def test_unavailable_channel_is_skipped(dispatcher, board):
    board.unavailable.add(CHANNEL_A)

    result = await dispatcher.create_deal(make_payload())

    assert [board.cards[mid].channel_id for mid in result.message_ids] == [CHANNEL_B]


async def test_no_reachable_channel(dispatcher, board):
    board.unavailable.update({CHANNEL_A, CHANNEL_B})

    with pytest.raises(NoBroadcastTargetError):
        await dispatcher.create_deal(make_payload())


async def test_offer_only_deal(dispatcher, board):
    result = await dispatcher.create_deal(make_payload(), offer_only=True)

    card = board.cards[result.message_ids[0]].card
    assert card.offer_only
    assert card.title == TITLE_OFFER_ONLY


# ── Test 2: Routing filter ───────────────────────────────────────


def test_accepts_only_deal_channels_and_known_ids(dispatcher):
    assert dispatcher.accepts(CHANNEL_A, "partner_claim")
    assert dispatcher.accepts(CHANNEL_B, "partner_offer_modal:123")
    assert not dispatcher.accepts(999, "partner_claim")
    assert not dispatcher.accepts(CHANNEL_A, "partner_claim_modal:")
    assert not dispatcher.accepts(CHANNEL_A, "something_else")


# ── Test 3: Button presses ───────────────────────────────────────


async def test_claim_button_opens_seller_prompt(dispatcher, responder):
    await dispatcher.handle_button(ButtonPress("partner_claim", CHANNEL_A, "555", True), responder)

    (prompt,) = responder.prompts
    assert prompt.custom_id == "partner_claim_modal:555"
    assert [i.custom_id for i in prompt.inputs] == ["seller_id"]
    assert prompt.inputs[0].label == "Seller ID (e.g. 00001)"


async def test_offer_button_opens_offer_prompt(dispatcher, responder):
    await dispatcher.handle_button(ButtonPress("partner_offer", CHANNEL_A, "555", True), responder)

    (prompt,) = responder.prompts
    assert prompt.custom_id == "partner_offer_modal:555"
    assert [i.custom_id for i in prompt.inputs] == ["seller_id", "offer_price"]
    assert prompt.inputs[1].label == "Your Offer (€)"


async def test_button_without_card(dispatcher, responder):
    await dispatcher.handle_button(ButtonPress("partner_claim", CHANNEL_A, "555", False), responder)
    assert responder.replies == [NO_CARD]


async def test_button_on_expired_interaction_is_suppressed(dispatcher):
    responder = MockResponder(expired=True)
    await dispatcher.handle_button(ButtonPress("partner_claim", CHANNEL_A, "555", True), responder)
    assert responder.acknowledgements == 0


# ── Test 4: Submissions ──────────────────────────────────────────


async def test_non_digit_code_rejected_without_store_call(dispatcher, board, store, responder):
    message_id = board.add_card(CHANNEL_A, render_card(make_deal()))

    await dispatcher.handle_submission(claim_submission(message_id, "abc12"), responder)

    assert responder.replies == [
        "❌ Seller Number must contain digits only (no SE-, just the digits). Please try again."
    ]
    assert store.calls == []


async def test_unknown_seller_reply_names_the_code(dispatcher, board, responder):
    message_id = board.add_card(CHANNEL_A, render_card(make_deal()))

    await dispatcher.handle_submission(claim_submission(message_id, "00042"), responder)

    assert responder.replies == [
        "❌ Could not find a seller with ID `SE-00042` in Sellers Database."
    ]


async def test_missing_card_reply(dispatcher, responder):
    await dispatcher.handle_submission(claim_submission("1300000000000000999", "00007"), responder)
    assert responder.replies == ["❌ Missing deal details."]


async def test_unexpected_error_gets_generic_reply(dispatcher, board, responder, monkeypatch):
    async def boom(channel_id, message_id):
        raise RuntimeError("gateway hiccup")

    monkeypatch.setattr(board, "fetch_card_text", boom)

    await dispatcher.handle_submission(claim_submission("1", "00007"), responder)

    assert responder.replies == [GENERIC_FAILURE]


async def test_expired_submission_is_suppressed(dispatcher, board, store):
    message_id = board.add_card(CHANNEL_A, render_card(make_deal()))
    responder = MockResponder(expired=True)

    await dispatcher.handle_submission(claim_submission(message_id, "00007"), responder)

    assert responder.acknowledgements == 0
    assert store.calls == []


async def test_unknown_prefix_is_ignored(dispatcher, responder):
    await dispatcher.handle_submission(
        Submission(custom_id="other_modal:1", channel_id=CHANNEL_A), responder
    )
    assert not responder.deferred
    assert responder.acknowledgements == 0
