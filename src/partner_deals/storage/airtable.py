"""Airtable REST implementation of the RecordStore protocol."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from partner_deals.errors import StoreError
from partner_deals.models.query import FieldContains, FieldEquals, LinksTo, RecordFilter
from partner_deals.models.records import Record

log = logging.getLogger(__name__)

PAGE_SIZE = 100  # Airtable's maximum


def _quote_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def to_formula(flt: RecordFilter) -> str | None:
    """Translate a filter into an Airtable formula.

    Returns None for filters Airtable cannot evaluate server-side: linked
    record cells are matched by primary field text in formulas, not by id.
    """
    if isinstance(flt, FieldEquals):
        return f"{{{flt.field}}} = {_quote_string(flt.value)}"
    if isinstance(flt, FieldContains):
        return f"SEARCH({_quote_string(flt.value)}, {{{flt.field}}})"
    return None


def _to_record(data: dict[str, Any]) -> Record:
    return Record(
        id=data["id"],
        fields=data.get("fields") or {},
        created_time=data.get("createdTime", ""),
    )


class AirtableRecordStore:
    """RecordStore over the Airtable REST API (v0).

    One shared httpx.AsyncClient per store. Rate limiting (429) and server
    errors are retried with exponential backoff; anything else raises
    StoreError.
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = f"{api_url.rstrip('/')}/{base_id}"
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._retry_backoff = retry_backoff
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(self._timeout, connect=10),
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        assert self._client is not None, "Store not initialized. Call initialize() first."
        return self._client

    # ── Transport ──────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        allow_404: bool = False,
    ) -> dict[str, Any] | None:
        for attempt in range(1, self._max_retries + 1):
            try:
                resp = await self.client.request(method, path, params=params, json=json)
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                if attempt < self._max_retries:
                    log.warning(
                        "Airtable %s %s failed (attempt %d/%d): %s",
                        method, path, attempt, self._max_retries, exc,
                    )
                    await asyncio.sleep(self._retry_backoff * 2 ** (attempt - 1))
                    continue
                raise StoreError(f"Airtable {method} {path}: {exc}") from exc

            if resp.status_code == 404 and allow_404:
                return None
            if resp.status_code == 429 or resp.status_code >= 500:
                if attempt < self._max_retries:
                    log.warning(
                        "Airtable %s %s returned %d (attempt %d/%d)",
                        method, path, resp.status_code, attempt, self._max_retries,
                    )
                    await asyncio.sleep(self._retry_backoff * 2 ** (attempt - 1))
                    continue
            if resp.is_error:
                raise StoreError(
                    f"Airtable {method} {path}: HTTP {resp.status_code}: {resp.text[:200]}"
                )
            return resp.json()

        raise StoreError(f"Airtable {method} {path}: retries exhausted")

    @staticmethod
    def _path(table: str, record_id: str | None = None) -> str:
        path = "/" + quote(table, safe="")
        if record_id:
            path += "/" + quote(record_id, safe="")
        return path

    # ── Records ────────────────────────────────────────────

    async def create(self, table: str, fields: dict[str, Any]) -> Record:
        data = await self._request("POST", self._path(table), json={"fields": fields})
        record = _to_record(data)
        log.debug("Created %s record %s", table, record.id)
        return record

    async def get(self, table: str, record_id: str) -> Record | None:
        data = await self._request("GET", self._path(table, record_id), allow_404=True)
        return _to_record(data) if data else None

    async def update(self, table: str, record_id: str, fields: dict[str, Any]) -> Record:
        data = await self._request(
            "PATCH", self._path(table, record_id), json={"fields": fields}
        )
        return _to_record(data)

    async def find(
        self,
        table: str,
        *filters: RecordFilter,
        max_records: int | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[Record]:
        formulas = []
        local = []
        for flt in filters:
            formula = to_formula(flt)
            if formula is None:
                local.append(flt)
            else:
                formulas.append(formula)

        params: list[tuple[str, Any]] = [("pageSize", PAGE_SIZE)]
        if formulas:
            formula = formulas[0] if len(formulas) == 1 else f"AND({', '.join(formulas)})"
            params.append(("filterByFormula", formula))
        if max_records is not None and not local:
            params.append(("maxRecords", max_records))
        if fields is not None:
            wanted = list(fields)
            # Client-side filters need their own columns.
            for flt in local:
                if isinstance(flt, LinksTo) and flt.field not in wanted:
                    wanted.append(flt.field)
            params.extend(("fields[]", name) for name in wanted)

        results: list[Record] = []
        offset: str | None = None
        while True:
            page_params = params + ([("offset", offset)] if offset else [])
            data = await self._request("GET", self._path(table), params=page_params)
            for item in data.get("records", []):
                record = _to_record(item)
                if all(f.matches(record.fields) for f in local):
                    results.append(record)
                    if max_records is not None and len(results) >= max_records:
                        return results
            offset = data.get("offset")
            if not offset:
                return results
