"""CLI commands against a local SQLite store."""

from __future__ import annotations

import asyncio

from click.testing import CliRunner

from partner_deals.cli import cli
from partner_deals.storage.sqlite import SQLiteRecordStore
from tests.factories import seed_offer, seed_order, seed_seller


def local_env(db_path) -> dict[str, str]:
    return {
        "PARTNER_DEALS_STORE": "sqlite",
        "PARTNER_DEALS_DB_PATH": str(db_path),
        "DISCORD_TOKEN": "",
        "AIRTABLE_API_KEY": "",
        "DISCORD_DEALS_CHANNEL_ID": "",
    }


def seed(db_path, populate) -> dict:
    async def _seed():
        store = SQLiteRecordStore(str(db_path))
        await store.initialize()
        try:
            return await populate(store)
        finally:
            await store.close()

    return asyncio.run(_seed())


def test_status_masks_secrets(tmp_path):
    env = local_env(tmp_path / "r.db")
    env["AIRTABLE_API_KEY"] = "patSecret"

    result = CliRunner().invoke(cli, ["status"], env=env)

    assert result.exit_code == 0
    assert "patSecret" not in result.output
    assert "Store backend:  sqlite" in result.output


def test_run_refuses_without_settings(tmp_path):
    result = CliRunner().invoke(cli, ["run"], env=local_env(tmp_path / "r.db"))

    assert result.exit_code == 1
    assert "DISCORD_TOKEN" in result.output


def test_seller_lookup(tmp_path):
    db = tmp_path / "r.db"

    async def populate(store):
        seller = await seed_seller(store, "SE-00007", webhook_url="https://hooks.example/s7")
        return {"id": seller.id}

    ids = seed(db, populate)

    result = CliRunner().invoke(cli, ["seller", "SE-00007"], env=local_env(db))
    assert result.exit_code == 0
    assert ids["id"] in result.output
    assert "https://hooks.example/s7" not in result.output

    result = CliRunner().invoke(cli, ["seller", "00099"], env=local_env(db))
    assert result.exit_code == 1


def test_floor(tmp_path):
    db = tmp_path / "r.db"

    async def populate(store):
        order = await seed_order(store)
        await seed_offer(store, order.id, 120.0)
        await seed_offer(store, order.id, 110.0)
        return {"order": order.id}

    ids = seed(db, populate)

    result = CliRunner().invoke(cli, ["floor", ids["order"]], env=local_env(db))

    assert result.exit_code == 0
    assert "Offers:      2" in result.output
    assert "Lowest:      €110.00" in result.output
    assert "Next max:    €107.50" in result.output
