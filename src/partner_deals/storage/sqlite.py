"""SQLite implementation of the RecordStore protocol.

Holds one JSON document per record so any table layout fits. Filters are
evaluated in Python with the same semantics as the hosted store.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

import aiosqlite

from partner_deals.errors import StoreError
from partner_deals.models.query import RecordFilter
from partner_deals.models.records import Record

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id TEXT PRIMARY KEY,
    table_name TEXT NOT NULL,
    fields TEXT NOT NULL,
    seq INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_records_table ON records(table_name, seq);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return "rec" + uuid.uuid4().hex[:14]


class SQLiteRecordStore:
    """SQLite-backed implementation of the RecordStore protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path if db_path == ":memory:" else str(Path(db_path).expanduser())
        self._db: aiosqlite.Connection | None = None
        self._seq = 0

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()
        async with self._db.execute("SELECT COALESCE(MAX(seq), 0) AS seq FROM records") as cur:
            row = await cur.fetchone()
            self._seq = row["seq"]

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    # ── Records ────────────────────────────────────────────

    async def create(self, table: str, fields: dict[str, Any]) -> Record:
        record_id = _new_id()
        now = _now()
        self._seq += 1
        await self.db.execute(
            "INSERT INTO records (id, table_name, fields, seq, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (record_id, table, json.dumps(fields), self._seq, now, now),
        )
        await self.db.commit()
        return Record(id=record_id, fields=dict(fields), created_time=now)

    async def get(self, table: str, record_id: str) -> Record | None:
        async with self.db.execute(
            "SELECT * FROM records WHERE id=? AND table_name=?", (record_id, table)
        ) as cur:
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def update(self, table: str, record_id: str, fields: dict[str, Any]) -> Record:
        current = await self.get(table, record_id)
        if current is None:
            raise StoreError(f"{table}: record {record_id} not found")
        merged = {**current.fields, **fields}
        await self.db.execute(
            "UPDATE records SET fields=?, updated_at=? WHERE id=?",
            (json.dumps(merged), _now(), record_id),
        )
        await self.db.commit()
        return Record(id=record_id, fields=merged, created_time=current.created_time)

    async def find(
        self,
        table: str,
        *filters: RecordFilter,
        max_records: int | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]:
        results: list[Record] = []
        async with self.db.execute(
            "SELECT * FROM records WHERE table_name=? ORDER BY seq", (table,)
        ) as cur:
            async for row in cur:
                record = self._row_to_record(row)
                if not all(f.matches(record.fields) for f in filters):
                    continue
                if fields is not None:
                    record.fields = {k: v for k, v in record.fields.items() if k in fields}
                results.append(record)
                if max_records is not None and len(results) >= max_records:
                    break
        return results

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> Record:
        return Record(
            id=row["id"],
            fields=json.loads(row["fields"]),
            created_time=row["created_at"],
        )
