"""Responder protocol - acknowledges a single UI interaction."""

from __future__ import annotations

from typing import Protocol

from partner_deals.models.interactions import Prompt


class Responder(Protocol):
    """Acknowledgement channel for one interaction.

    Every method raises ExpiredInteractionError once the platform no
    longer accepts a response.
    """

    async def defer(self) -> None:
        """Acknowledge now, reply later."""
        ...

    async def reply(self, content: str) -> None:
        """Send a private message to the user who interacted."""
        ...

    async def show_prompt(self, prompt: Prompt) -> None:
        """Open a short-text form."""
        ...
