"""Store records and operation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Record:
    """A row of the external record store."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: str = ""

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


@dataclass
class ArbitrationResult:
    """Result of evaluating a counter-offer against the current floor."""

    accepted: bool
    reason: str  # "accepted", "no_offers", "too_high", "invalid_amount"
    amount: float
    floor: float | None = None  # lowest existing offer
    ceiling: float | None = None  # highest amount that would be accepted


@dataclass
class FanOutReport:
    """Outcome of disabling every posted copy of a card."""

    message_ids: list[str] = field(default_factory=list)
    disabled: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)  # not found in any channel
    errors: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> bool:
        return bool(self.message_ids)


@dataclass
class DisableReport:
    order_id: str
    skipped: bool = False  # flag was already set, no fan-out performed
    fanout: FanOutReport | None = None


@dataclass
class ClaimReceipt:
    """A persisted claim."""

    inventory_record_id: str
    seller_code: str
    seller_record_id: str
    order_id: str | None
    deal_id: str
    product_name: str
    sku: str
    size: str
    brand: str
    purchase_price: float
    fanout: FanOutReport | None = None


@dataclass
class OfferReceipt:
    """A persisted counter-offer."""

    offer_record_id: str
    seller_code: str
    seller_record_id: str
    order_id: str | None
    amount: float
    product_name: str = ""
    size: str = ""


@dataclass
class PostResult:
    """Identifiers of the cards posted for one deal."""

    message_ids: list[str]
    record_id: str | None = None
