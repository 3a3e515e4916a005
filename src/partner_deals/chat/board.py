"""DealBoard over discord.py channels."""

from __future__ import annotations

import logging

import discord

from partner_deals.chat.views import deal_view, disabled_copy
from partner_deals.errors import ChannelUnavailableError, ChatError
from partner_deals.models.deal import DealCard

log = logging.getLogger(__name__)


class DiscordDealBoard:
    """Posts, reads and disables deal cards in text channels."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def _channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._client.fetch_channel(channel_id)
            except discord.HTTPException as exc:
                log.debug("fetch_channel(%s) failed: %s", channel_id, exc)
                raise ChannelUnavailableError(channel_id) from exc
        if not isinstance(channel, discord.abc.Messageable):
            raise ChannelUnavailableError(channel_id)
        return channel

    async def post_card(self, channel_id: int, card: DealCard) -> str:
        channel = await self._channel(channel_id)
        embed = discord.Embed(
            title=card.title,
            description=card.description,
            color=card.color,
        )
        if card.image_url:
            embed.set_image(url=card.image_url)
        try:
            message = await channel.send(embed=embed, view=deal_view(card.offer_only))
        except discord.Forbidden as exc:
            raise ChannelUnavailableError(channel_id) from exc
        except discord.HTTPException as exc:
            raise ChatError(f"posting card to {channel_id} failed: {exc}") from exc
        log.debug("Posted card %s in channel %s", message.id, channel_id)
        return str(message.id)

    async def _message(self, channel_id: int, message_id: str) -> discord.Message | None:
        channel = await self._channel(channel_id)
        try:
            return await channel.fetch_message(int(message_id))
        except (discord.NotFound, ValueError):
            return None
        except discord.HTTPException as exc:
            raise ChatError(f"fetching {message_id} from {channel_id} failed: {exc}") from exc

    async def fetch_card_text(self, channel_id: int, message_id: str) -> str | None:
        message = await self._message(channel_id, message_id)
        if message is None or not message.embeds:
            return None
        return message.embeds[0].description

    async def disable_card(self, channel_id: int, message_id: str) -> bool:
        try:
            message = await self._message(channel_id, message_id)
        except ChannelUnavailableError:
            return False
        if message is None:
            return False
        try:
            await message.edit(view=disabled_copy(message))
        except discord.HTTPException as exc:
            raise ChatError(f"editing {message_id} failed: {exc}") from exc
        return True
