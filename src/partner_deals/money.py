"""Currency parsing and formatting helpers."""

from __future__ import annotations

import math
import re
from typing import Any

from partner_deals.errors import ValidationError

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def format_money(amount: float, symbol: str = "€") -> str:
    return f"{symbol}{amount:.2f}"


def parse_numeric_field(value: Any) -> float | None:
    """Read a number from a store cell that may be a number or a string.

    Strings may carry a currency symbol and a single decimal comma
    ("€100,50"). Returns None when nothing numeric is found.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value.replace(",", ".", 1))
        try:
            number = float(cleaned)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def parse_amount(raw: str, symbol: str = "€") -> float:
    """Parse a user-entered amount. Raises ValidationError unless positive."""
    text = (raw or "").strip()
    if symbol:
        text = text.replace(symbol, "")
    text = text.strip().replace(",", ".", 1)
    try:
        amount = float(text)
    except ValueError:
        raise ValidationError("Please enter a valid positive offer amount.") from None
    if not math.isfinite(amount):
        raise ValidationError("Please enter a valid positive offer amount.")
    amount = round(amount, 2)
    if amount <= 0:
        raise ValidationError("Please enter a valid positive offer amount.")
    return amount


def payment_note(amount: float) -> str:
    """Decimal-comma rendering used by the bookkeeping team."""
    return f"{amount:.2f}".replace(".", ",")
