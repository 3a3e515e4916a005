"""Deal card codec - renders deals into labeled text lines and parses them back.

The card text is the only copy of a deal's data the service keeps, so the
label strings below are a wire format. Render and parse are both driven by
CARD_SCHEMA; change a label there and both directions follow.

    **Product Name:** Shoe A
    **SKU:** SKU1
    **Size:** 42
    **Brand:** B
    **Payout:** €100.00
    **Order ID:** 1001          (only when present)
"""

from __future__ import annotations

from dataclasses import dataclass

from partner_deals.models.deal import CardFields, Deal, DealCard
from partner_deals.money import format_money, parse_numeric_field

TITLE = "🧨 NEW DEAL 🧨"
TITLE_OFFER_ONLY = "🧨 NEW DEAL (OFFER ONLY) 🧨"


@dataclass(frozen=True)
class CardLabel:
    attr: str  # attribute on Deal and CardFields
    label: str
    required: bool = True
    money: bool = False


CARD_SCHEMA: tuple[CardLabel, ...] = (
    CardLabel("product_name", "**Product Name:**"),
    CardLabel("sku", "**SKU:**"),
    CardLabel("size", "**Size:**"),
    CardLabel("brand", "**Brand:**"),
    CardLabel("start_payout", "**Payout:**", money=True),
    CardLabel("deal_id", "**Order ID:**", required=False),
)


def _one_line(value: object) -> str:
    # A newline inside a value would start a new, unlabeled line.
    return str(value).replace("\r", " ").replace("\n", " ")


def render_lines(deal: Deal, symbol: str = "€") -> list[str]:
    lines = []
    for entry in CARD_SCHEMA:
        value = getattr(deal, entry.attr)
        if value is None or value == "":
            if entry.required:
                raise ValueError(f"deal is missing {entry.attr}")
            continue
        text = format_money(float(value), symbol) if entry.money else _one_line(value)
        lines.append(f"{entry.label} {text}")
    return lines


def render_card(deal: Deal, symbol: str = "€") -> DealCard:
    """Render a deal into a postable card."""
    return DealCard(
        title=TITLE_OFFER_ONLY if deal.offer_only else TITLE,
        description="\n".join(render_lines(deal, symbol)),
        image_url=deal.image_url or None,
        offer_only=deal.offer_only,
    )


def value_for_label(lines: list[str], label: str) -> str:
    """Trailing text of the first line starting with label, or ""."""
    for line in lines:
        if line.startswith(label):
            return line[len(label):].strip()
    return ""


def parse_card(text: str | None, image_url: str | None = None) -> CardFields:
    """Recover deal fields from a card's text. Never raises.

    Missing labels produce empty strings (or None for the payout and the
    optional fields); the caller decides which absences it tolerates.
    """
    lines = (text or "").split("\n")
    values: dict[str, object] = {}
    for entry in CARD_SCHEMA:
        raw = value_for_label(lines, entry.label)
        if entry.money:
            values[entry.attr] = parse_numeric_field(raw) if raw else None
        elif entry.required:
            values[entry.attr] = raw
        else:
            values[entry.attr] = raw or None
    return CardFields(image_url=image_url or None, **values)  # type: ignore[arg-type]
