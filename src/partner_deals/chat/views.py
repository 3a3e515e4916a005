"""discord.py components for deal cards and seller prompts.

Views here only render components. They are stopped before sending so
discord.py does not track them; interactions are routed by custom id in
DealBotClient.on_interaction, which keeps old cards working after a
restart.
"""

from __future__ import annotations

import discord
from discord import ui

from partner_deals.dispatch.dispatcher import CLAIM_BUTTON, OFFER_BUTTON
from partner_deals.models.interactions import Prompt

PROMPT_TIMEOUT = 900  # seconds a prompt stays routable


def deal_view(offer_only: bool = False, disabled: bool = False) -> ui.View:
    """Claim and Offer buttons, or only Offer for offer-only deals."""
    view = ui.View(timeout=None)
    if not offer_only:
        view.add_item(
            ui.Button(
                label="Claim Deal",
                style=discord.ButtonStyle.success,
                custom_id=CLAIM_BUTTON,
                disabled=disabled,
            )
        )
    view.add_item(
        ui.Button(
            label="Offer",
            style=discord.ButtonStyle.secondary,
            custom_id=OFFER_BUTTON,
            disabled=disabled,
        )
    )
    view.stop()
    return view


def disabled_copy(message: discord.Message) -> ui.View:
    """The message's current components with every control disabled."""
    view = ui.View.from_message(message, timeout=None)
    for item in view.children:
        if hasattr(item, "disabled"):
            item.disabled = True
    view.stop()
    return view


def prompt_modal(prompt: Prompt) -> ui.Modal:
    modal = ui.Modal(title=prompt.title, custom_id=prompt.custom_id, timeout=PROMPT_TIMEOUT)
    for field in prompt.inputs:
        modal.add_item(
            ui.TextInput(
                label=field.label,
                custom_id=field.custom_id,
                placeholder=field.placeholder or None,
                required=field.required,
                style=discord.TextStyle.short,
            )
        )
    return modal


def modal_values(data: dict) -> dict[str, str]:
    """Extract submitted text values from a modal-submit payload.

    Inputs arrive wrapped in action rows ("components") or, in newer
    layouts, in labels ("component").
    """
    values: dict[str, str] = {}
    for row in data.get("components", []):
        children = list(row.get("components") or [])
        if "component" in row:
            children.append(row["component"])
        for child in children:
            custom_id = child.get("custom_id")
            if custom_id:
                values[custom_id] = child.get("value") or ""
    return values
