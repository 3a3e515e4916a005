"""DealBoard protocol - posts and edits deal cards on the chat platform."""

from __future__ import annotations

from typing import Protocol

from partner_deals.models.deal import DealCard


class DealBoard(Protocol):
    """What the core needs from the chat platform's channels."""

    async def post_card(self, channel_id: int, card: DealCard) -> str:
        """Post a card with live controls. Returns the message id.

        Raises ChannelUnavailableError if the channel cannot receive cards.
        """
        ...

    async def fetch_card_text(self, channel_id: int, message_id: str) -> str | None:
        """Return the card's text block, or None if the card is gone."""
        ...

    async def disable_card(self, channel_id: int, message_id: str) -> bool:
        """Replace the card's controls with disabled copies.

        Returns False when the message is not in that channel.
        """
        ...
