"""Discord client that hands deal interactions to the dispatcher."""

from __future__ import annotations

import logging

import discord

from partner_deals.chat.responder import DiscordResponder
from partner_deals.chat.views import modal_values
from partner_deals.dispatch.dispatcher import CommandDispatcher
from partner_deals.models.interactions import ButtonPress, Submission

log = logging.getLogger(__name__)


class DealBotClient(discord.Client):
    """Gateway connection for the deal channels.

    The dispatcher is bound after construction because it needs a board
    built on this client.
    """

    def __init__(self) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        super().__init__(intents=intents)
        self._dispatcher: CommandDispatcher | None = None

    def bind(self, dispatcher: CommandDispatcher) -> None:
        self._dispatcher = dispatcher

    async def on_ready(self) -> None:
        log.info("Partner deal bot logged in as %s", self.user)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if self._dispatcher is None or interaction.data is None:
            return
        custom_id = str(interaction.data.get("custom_id", ""))
        if not self._dispatcher.accepts(interaction.channel_id, custom_id):
            return

        responder = DiscordResponder(interaction)
        if interaction.type == discord.InteractionType.component:
            message = interaction.message
            press = ButtonPress(
                custom_id=custom_id,
                channel_id=interaction.channel_id,
                message_id=str(message.id) if message else "",
                has_card=bool(message and message.embeds),
            )
            await self._dispatcher.handle_button(press, responder)
        elif interaction.type == discord.InteractionType.modal_submit:
            submission = Submission(
                custom_id=custom_id,
                channel_id=interaction.channel_id,
                values=modal_values(interaction.data),
            )
            await self._dispatcher.handle_submission(submission, responder)
