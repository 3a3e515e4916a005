"""Deal card codec."""

from partner_deals.cards.codec import CARD_SCHEMA, parse_card, render_card

__all__ = ["CARD_SCHEMA", "parse_card", "render_card"]
