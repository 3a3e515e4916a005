"""Typed record-store filters.

Each filter knows how to test a record's fields in Python. Backends that
have their own query language translate the filter; others call matches().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


def _link_ids(value: Any) -> list[str]:
    """Normalize a linked-record cell to a list of record ids.

    Links arrive either as plain id strings or as {"id": ..., "name": ...}.
    """
    if not isinstance(value, list):
        return []
    ids = []
    for link in value:
        if isinstance(link, str):
            ids.append(link)
        elif isinstance(link, dict) and "id" in link:
            ids.append(str(link["id"]))
    return ids


@dataclass(frozen=True)
class FieldEquals:
    """Field value equals the given string."""

    field: str
    value: str

    def matches(self, fields: dict[str, Any]) -> bool:
        current = fields.get(self.field)
        return current is not None and str(current) == self.value


@dataclass(frozen=True)
class FieldContains:
    """Field text contains the given substring.

    Used for membership in comma-joined message-id sets. This is only
    sound while ids cannot be substrings of one another (fixed-width
    snowflakes).
    """

    field: str
    value: str

    def matches(self, fields: dict[str, Any]) -> bool:
        current = fields.get(self.field)
        return current is not None and self.value in str(current)


@dataclass(frozen=True)
class LinksTo:
    """Linked-record field contains the given record id."""

    field: str
    record_id: str

    def matches(self, fields: dict[str, Any]) -> bool:
        return self.record_id in _link_ids(fields.get(self.field))


RecordFilter = Union[FieldEquals, FieldContains, LinksTo]
