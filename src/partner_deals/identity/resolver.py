"""Identity resolver - seller codes and posted messages to store records."""

from __future__ import annotations

import logging

from partner_deals.errors import NotFoundError, ValidationError
from partner_deals.interfaces.store import RecordStore
from partner_deals.models.config import TableNames
from partner_deals.models.deal import Seller
from partner_deals.models.fields import OrderFields, SellerFields
from partner_deals.models.query import FieldContains, FieldEquals
from partner_deals.models.records import Record

log = logging.getLogger(__name__)

DIGITS_ONLY_MESSAGE = (
    "Seller Number must contain digits only (no SE-, just the digits). "
    "Please try again."
)


class IdentityResolver:
    """Maps user-supplied seller codes and card message ids to records.

    Sellers are resolved, never created. The store is expected to keep
    seller codes unique; the first match wins.
    """

    def __init__(
        self,
        store: RecordStore,
        tables: TableNames | None = None,
        prefix: str = "SE-",
    ) -> None:
        self._store = store
        self._tables = tables or TableNames()
        self._prefix = prefix

    def normalize_seller_code(self, raw: str, allow_prefixed: bool = False) -> str:
        """Return the canonical seller code for raw user input.

        Raises ValidationError unless the input is digits only. With
        allow_prefixed, an already canonical code ("SE-00001") is accepted.
        """
        code = (raw or "").strip()
        if allow_prefixed and code.upper().startswith(self._prefix.upper()):
            code = code[len(self._prefix):].strip()
        if not code or not (code.isascii() and code.isdigit()):
            raise ValidationError(DIGITS_ONLY_MESSAGE)
        return f"{self._prefix}{code}"

    async def resolve_seller(self, raw: str, allow_prefixed: bool = False) -> Seller:
        code = self.normalize_seller_code(raw, allow_prefixed=allow_prefixed)
        records = await self._store.find(
            self._tables.sellers,
            FieldEquals(SellerFields.CODE, code),
            max_records=1,
        )
        if not records:
            raise NotFoundError(
                "seller",
                code,
                f"Could not find a seller with ID `{code}` in {self._tables.sellers}.",
            )
        record = records[0]
        log.debug("Resolved seller %s -> %s", code, record.id)
        return Seller(
            record_id=record.id,
            code=code,
            webhook_url=record.get(SellerFields.WEBHOOK_URL) or None,
        )

    async def resolve_order_by_message(self, message_id: str) -> Record | None:
        """Find the order whose posted-message set contains message_id."""
        records = await self._store.find(
            self._tables.orders,
            FieldContains(OrderFields.MESSAGE_IDS, str(message_id)),
            max_records=1,
        )
        if not records:
            log.info("No order references message %s", message_id)
            return None
        return records[0]

    async def get_order(self, order_id: str) -> Record:
        record = await self._store.get(self._tables.orders, order_id)
        if record is None:
            raise NotFoundError("order", order_id)
        return record
