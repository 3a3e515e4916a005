"""Local SQLite record store."""

from __future__ import annotations

import pytest

from partner_deals.errors import StoreError
from partner_deals.models.query import FieldContains, FieldEquals, LinksTo
from partner_deals.storage.sqlite import SQLiteRecordStore


async def test_create_and_get(sqlite_store):
    created = await sqlite_store.create("Sellers Database", {"Seller ID": "SE-00007"})

    assert created.id.startswith("rec")
    fetched = await sqlite_store.get("Sellers Database", created.id)
    assert fetched.fields == {"Seller ID": "SE-00007"}
    assert fetched.created_time


async def test_get_is_scoped_to_table(sqlite_store):
    created = await sqlite_store.create("Sellers Database", {"Seller ID": "SE-00007"})
    assert await sqlite_store.get("Partner Offers", created.id) is None


async def test_update_merges_fields(sqlite_store):
    created = await sqlite_store.create("Orders", {"Message IDs": "1", "Buttons Disabled": True})

    updated = await sqlite_store.update("Orders", created.id, {"Buttons Disabled": False})

    assert updated.fields == {"Message IDs": "1", "Buttons Disabled": False}
    assert (await sqlite_store.get("Orders", created.id)).fields == updated.fields


async def test_update_missing_record(sqlite_store):
    with pytest.raises(StoreError):
        await sqlite_store.update("Orders", "recMissing", {"x": 1})


async def test_find_filters_in_creation_order(sqlite_store):
    a = await sqlite_store.create("Offers", {"Amount": 100, "Order": ["recO1"], "Tag": "a,b"})
    await sqlite_store.create("Offers", {"Amount": 90, "Order": ["recO2"]})
    c = await sqlite_store.create("Offers", {"Amount": 80, "Order": [{"id": "recO1"}]})

    linked = await sqlite_store.find("Offers", LinksTo("Order", "recO1"))
    assert [r.id for r in linked] == [a.id, c.id]

    narrowed = await sqlite_store.find("Offers", LinksTo("Order", "recO1"), fields=["Amount"])
    assert [r.fields for r in narrowed] == [{"Amount": 100}, {"Amount": 80}]

    assert [r.id for r in await sqlite_store.find("Offers", FieldContains("Tag", "b"))] == [a.id]
    assert await sqlite_store.find("Offers", FieldEquals("Amount", "90"), max_records=1)
    assert len(await sqlite_store.find("Offers", max_records=2)) == 2
    assert len(await sqlite_store.find("Offers")) == 3


async def test_persists_across_reopen(tmp_path):
    path = str(tmp_path / "records.db")
    first = SQLiteRecordStore(path)
    await first.initialize()
    created = await first.create("Sellers Database", {"Seller ID": "SE-00001"})
    await first.close()

    second = SQLiteRecordStore(path)
    await second.initialize()
    try:
        assert (await second.get("Sellers Database", created.id)).get("Seller ID") == "SE-00001"
        later = await second.create("Sellers Database", {"Seller ID": "SE-00002"})
        found = await second.find("Sellers Database")
        assert [r.id for r in found] == [created.id, later.id]
    finally:
        await second.close()
