"""Discord adapters: components, responder and interaction routing."""

from __future__ import annotations

from types import SimpleNamespace

import discord
import pytest

from partner_deals.chat.bot import DealBotClient
from partner_deals.chat.responder import DiscordResponder
from partner_deals.chat.views import deal_view, modal_values, prompt_modal
from partner_deals.dispatch.dispatcher import build_prompt
from partner_deals.errors import ChatError, ExpiredInteractionError
from partner_deals.models.interactions import InteractionKind
from tests.conftest import CHANNEL_A


class FakeResponse:
    def __init__(self, error: Exception | None = None) -> None:
        self.done = False
        self.error = error
        self.sent: list[tuple[str, object]] = []

    def is_done(self) -> bool:
        return self.done

    def _act(self, kind: str, payload: object) -> None:
        if self.error:
            raise self.error
        self.done = True
        self.sent.append((kind, payload))

    async def defer(self, ephemeral: bool = False, thinking: bool = False) -> None:
        self._act("defer", ephemeral)

    async def send_message(self, content: str, ephemeral: bool = False) -> None:
        self._act("message", content)

    async def send_modal(self, modal) -> None:
        self._act("modal", modal)


class FakeFollowup:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content: str, ephemeral: bool = False) -> None:
        self.sent.append(content)


def fake_interaction(**overrides) -> SimpleNamespace:
    values = dict(
        response=FakeResponse(),
        followup=FakeFollowup(),
        data={},
        channel_id=CHANNEL_A,
        type=discord.InteractionType.component,
        message=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def http_error(code: int) -> discord.HTTPException:
    response = SimpleNamespace(status=404, reason="Not Found")
    return discord.HTTPException(response, {"code": code, "message": "Unknown interaction"})


class RecordingDispatcher:
    def __init__(self) -> None:
        self.buttons = []
        self.submissions = []

    def accepts(self, channel_id, custom_id) -> bool:
        return channel_id == CHANNEL_A and custom_id != "foreign"

    async def handle_button(self, press, responder) -> None:
        self.buttons.append(press)

    async def handle_submission(self, submission, responder) -> None:
        self.submissions.append(submission)


# ── Test 1: Components ───────────────────────────────────────────


def test_modal_values_both_layouts():
    rows = {
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": "seller_id", "value": "00007"}]},
            {"type": 18, "component": {"type": 4, "custom_id": "offer_price", "value": "97,50"}},
        ]
    }
    assert modal_values(rows) == {"seller_id": "00007", "offer_price": "97,50"}
    assert modal_values({}) == {}


async def test_deal_view_buttons():
    full = deal_view()
    assert [item.custom_id for item in full.children] == ["partner_claim", "partner_offer"]
    assert not any(item.disabled for item in full.children)

    offer_only = deal_view(offer_only=True, disabled=True)
    assert [item.custom_id for item in offer_only.children] == ["partner_offer"]
    assert all(item.disabled for item in offer_only.children)


async def test_prompt_modal_inputs():
    modal = prompt_modal(build_prompt(InteractionKind.OFFER, "555"))

    assert modal.title == "Enter Seller ID & Offer"
    assert modal.custom_id == "partner_offer_modal:555"
    assert [item.custom_id for item in modal.children] == ["seller_id", "offer_price"]


# ── Test 2: Responder ────────────────────────────────────────────


async def test_reply_uses_followup_after_defer():
    interaction = fake_interaction()
    responder = DiscordResponder(interaction)

    await responder.defer()
    await responder.reply("✅ done")

    assert interaction.response.sent == [("defer", True)]
    assert interaction.followup.sent == ["✅ done"]


async def test_reply_without_defer_answers_directly():
    interaction = fake_interaction()

    await DiscordResponder(interaction).reply("❌ No deal embed found.")

    assert interaction.response.sent == [("message", "❌ No deal embed found.")]


@pytest.mark.parametrize("code, expected", [(10062, ExpiredInteractionError), (50013, ChatError)])
async def test_http_errors_are_translated(code, expected):
    interaction = fake_interaction(response=FakeResponse(error=http_error(code)))

    with pytest.raises(expected):
        await DiscordResponder(interaction).defer()


# ── Test 3: Interaction routing ──────────────────────────────────


async def test_button_press_is_routed():
    client = DealBotClient()
    dispatcher = RecordingDispatcher()
    client.bind(dispatcher)
    message = SimpleNamespace(id=555, embeds=[object()])

    await client.on_interaction(
        fake_interaction(data={"custom_id": "partner_claim"}, message=message)
    )

    (press,) = dispatcher.buttons
    assert press.message_id == "555"
    assert press.has_card


async def test_modal_submit_is_routed():
    client = DealBotClient()
    dispatcher = RecordingDispatcher()
    client.bind(dispatcher)
    data = {
        "custom_id": "partner_claim_modal:555",
        "components": [{"components": [{"custom_id": "seller_id", "value": "00007"}]}],
    }

    await client.on_interaction(
        fake_interaction(data=data, type=discord.InteractionType.modal_submit)
    )

    (submission,) = dispatcher.submissions
    assert submission.value("seller_id") == "00007"


async def test_foreign_interactions_are_ignored():
    client = DealBotClient()
    dispatcher = RecordingDispatcher()
    client.bind(dispatcher)

    await client.on_interaction(fake_interaction(data={"custom_id": "foreign"}))
    await client.on_interaction(fake_interaction(data={"custom_id": "partner_claim"}, channel_id=1))

    assert dispatcher.buttons == []
