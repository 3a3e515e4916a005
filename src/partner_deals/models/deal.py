"""Deal, card and seller models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DealState(str, Enum):
    """Lifecycle of a deal, keyed by its upstream order reference."""

    OPEN = "open"
    CLAIMED = "claimed"  # terminal
    DISABLED = "disabled"  # terminal, closed without a claim


@dataclass(frozen=True)
class Deal:
    """An open trading opportunity as requested by the automation system."""

    product_name: str
    sku: str
    size: str
    brand: str
    start_payout: float
    deal_id: str | None = None  # external order id, shown on the card
    image_url: str | None = None
    record_id: str | None = None  # upstream order record in the store
    offer_only: bool = False


@dataclass(frozen=True)
class DealCard:
    """A rendered deal ready to be posted by a chat adapter."""

    title: str
    description: str
    image_url: str | None = None
    offer_only: bool = False
    color: int = 0xF1C40F


@dataclass(frozen=True)
class CardFields:
    """Fields recovered from a posted card. Absent labels stay empty."""

    product_name: str = ""
    sku: str = ""
    size: str = ""
    brand: str = ""
    start_payout: float | None = None
    deal_id: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CardContext:
    """A posted card as seen from an interaction that refers to it."""

    channel_id: int
    message_id: str
    fields: CardFields


@dataclass(frozen=True)
class Seller:
    """A resolved seller identity."""

    record_id: str
    code: str  # canonical, e.g. "SE-00007"
    webhook_url: str | None = None
