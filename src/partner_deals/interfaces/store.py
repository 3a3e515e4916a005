"""RecordStore protocol - the external tabular store that is the system of record."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from partner_deals.models.query import RecordFilter
from partner_deals.models.records import Record


class RecordStore(Protocol):
    """Create/read/update/find over named tables of loosely typed records."""

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Open connections. Must be called before any other method."""
        ...

    async def close(self) -> None:
        ...

    # ── Records ────────────────────────────────────────────

    async def create(self, table: str, fields: dict[str, Any]) -> Record:
        ...

    async def get(self, table: str, record_id: str) -> Record | None:
        """Return the record, or None if it does not exist."""
        ...

    async def update(self, table: str, record_id: str, fields: dict[str, Any]) -> Record:
        """Patch the given fields, leaving the others untouched."""
        ...

    async def find(
        self,
        table: str,
        *filters: RecordFilter,
        max_records: int | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]:
        """Return records matching every filter, oldest first."""
        ...
