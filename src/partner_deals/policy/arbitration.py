"""Offer arbitration - strict undercut auction over an order's offers."""

from __future__ import annotations

import logging
from typing import Iterable

from partner_deals.interfaces.store import RecordStore
from partner_deals.models.config import TableNames
from partner_deals.models.fields import PartnerOfferFields
from partner_deals.models.query import LinksTo
from partner_deals.models.records import ArbitrationResult
from partner_deals.money import parse_numeric_field

log = logging.getLogger(__name__)

MIN_UNDERCUT_STEP = 2.5
EPSILON = 1e-9  # absorbs float rounding at the ceiling


def arbitrate(
    amount: float,
    existing: Iterable[float],
    step: float = MIN_UNDERCUT_STEP,
    epsilon: float = EPSILON,
) -> ArbitrationResult:
    """Accept amount only if it is at least step below every existing offer."""
    if amount is None or not amount > 0:
        return ArbitrationResult(accepted=False, reason="invalid_amount", amount=amount)

    amounts = [a for a in existing if a is not None]
    if not amounts:
        return ArbitrationResult(accepted=True, reason="no_offers", amount=amount)

    floor = min(amounts)
    ceiling = round(floor - step, 2)
    if amount > floor - step + epsilon:
        return ArbitrationResult(
            accepted=False,
            reason="too_high",
            amount=amount,
            floor=floor,
            ceiling=ceiling,
        )
    return ArbitrationResult(
        accepted=True,
        reason="accepted",
        amount=amount,
        floor=floor,
        ceiling=ceiling,
    )


class UndercutArbitrator:
    """Evaluates counter-offers against the offers already stored for an order.

    No index on offers is assumed: every offer linked to the order is
    read with a scan of the offers table.
    """

    def __init__(
        self,
        store: RecordStore,
        tables: TableNames | None = None,
        step: float = MIN_UNDERCUT_STEP,
    ) -> None:
        self._store = store
        self._tables = tables or TableNames()
        self._step = step

    @property
    def step(self) -> float:
        return self._step

    async def existing_amounts(self, order_id: str) -> list[float]:
        records = await self._store.find(
            self._tables.partner_offers,
            LinksTo(PartnerOfferFields.ORDER, order_id),
            fields=[PartnerOfferFields.AMOUNT, PartnerOfferFields.ORDER],
        )
        amounts = []
        for record in records:
            value = parse_numeric_field(record.get(PartnerOfferFields.AMOUNT))
            if value is None:
                log.warning("Ignoring offer %s with unreadable amount", record.id)
                continue
            amounts.append(value)
        return amounts

    async def lowest_offer(self, order_id: str) -> float | None:
        amounts = await self.existing_amounts(order_id)
        return min(amounts) if amounts else None

    async def evaluate(self, amount: float, order_id: str) -> ArbitrationResult:
        """Evaluate an offer against the current floor for order_id."""
        result = arbitrate(amount, await self.existing_amounts(order_id), self._step)
        if result.accepted:
            log.info(
                "Offer %.2f accepted for order %s (floor %s)",
                amount,
                order_id,
                "none" if result.floor is None else f"{result.floor:.2f}",
            )
        else:
            log.info(
                "Offer %.2f rejected for order %s: %s (ceiling %s)",
                amount,
                order_id,
                result.reason,
                result.ceiling,
            )
        return result
