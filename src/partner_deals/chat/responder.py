"""Responder over a discord.py interaction."""

from __future__ import annotations

import discord

from partner_deals.chat.views import prompt_modal
from partner_deals.errors import ChatError, ExpiredInteractionError
from partner_deals.models.interactions import Prompt

# Unknown interaction, unknown webhook (expired follow-up token)
EXPIRED_CODES = {10062, 10015}


class DiscordResponder:
    """Ephemeral acknowledgements for one interaction."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self._interaction = interaction

    async def defer(self) -> None:
        if self._interaction.response.is_done():
            return
        try:
            await self._interaction.response.defer(ephemeral=True, thinking=True)
        except discord.HTTPException as exc:
            raise self._translate(exc) from exc

    async def reply(self, content: str) -> None:
        try:
            if self._interaction.response.is_done():
                await self._interaction.followup.send(content, ephemeral=True)
            else:
                await self._interaction.response.send_message(content, ephemeral=True)
        except discord.HTTPException as exc:
            raise self._translate(exc) from exc

    async def show_prompt(self, prompt: Prompt) -> None:
        try:
            await self._interaction.response.send_modal(prompt_modal(prompt))
        except discord.HTTPException as exc:
            raise self._translate(exc) from exc

    @staticmethod
    def _translate(exc: discord.HTTPException) -> Exception:
        if exc.code in EXPIRED_CODES:
            return ExpiredInteractionError(str(exc))
        return ChatError(str(exc))
