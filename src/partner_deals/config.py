"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from partner_deals.models.config import ServiceConfig, StoreBackend


def parse_channel_ids(value: Any) -> list[int]:
    """Accept a TOML list or a comma-separated string of channel ids."""
    if value is None:
        return []
    parts = value if isinstance(value, (list, tuple)) else str(value).split(",")
    ids = []
    for part in parts:
        text = str(part).strip()
        if text:
            ids.append(int(text))
    return ids


def load_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServiceConfig:
    """Load service configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (DISCORD_TOKEN, AIRTABLE_API_KEY, etc.)
        2. TOML config file
        3. Defaults from ServiceConfig
    """
    env = os.environ if environ is None else environ

    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = ServiceConfig()

    # ── Service section ────────────────────────────────────
    service = raw.get("service", {})
    if v := service.get("log_level"):
        cfg.log_level = str(v)

    # ── Discord section ────────────────────────────────────
    discord_raw = raw.get("discord", {})
    if v := discord_raw.get("token"):
        cfg.discord.token = str(v)
    if v := discord_raw.get("deal_channel_ids"):
        cfg.discord.deal_channel_ids = parse_channel_ids(v)

    # ── Store section ──────────────────────────────────────
    store = raw.get("store", {})
    if v := store.get("backend"):
        cfg.store.backend = StoreBackend(v)
    if v := store.get("api_key"):
        cfg.store.api_key = str(v)
    if v := store.get("base_id"):
        cfg.store.base_id = str(v)
    if v := store.get("api_url"):
        cfg.store.api_url = str(v)
    if v := store.get("db_path"):
        cfg.store.db_path = str(v)
    if v := store.get("timeout"):
        cfg.store.timeout = int(v)
    if v := store.get("max_retries"):
        cfg.store.max_retries = int(v)

    tables = store.get("tables", {})
    for name in ("inventory", "partner_offers", "sellers", "orders"):
        if v := tables.get(name):
            setattr(cfg.store.tables, name, str(v))

    # ── HTTP section ───────────────────────────────────────
    http = raw.get("http", {})
    if v := http.get("host"):
        cfg.http.host = str(v)
    if v := http.get("port"):
        cfg.http.port = int(v)

    # ── Deals section ──────────────────────────────────────
    deals = raw.get("deals", {})
    if v := deals.get("currency_symbol"):
        cfg.deals.currency_symbol = str(v)
    if v := deals.get("seller_code_prefix"):
        cfg.deals.seller_code_prefix = str(v)
    if v := deals.get("undercut_step"):
        cfg.deals.undercut_step = float(v)
    if v := deals.get("fanout_concurrency"):
        cfg.deals.fanout_concurrency = int(v)

    # ── Notify section ─────────────────────────────────────
    notify = raw.get("notify", {})
    if v := notify.get("automation_webhook_url"):
        cfg.notify.automation_webhook_url = str(v)
    if v := notify.get("timeout"):
        cfg.notify.timeout = int(v)

    # ── Environment variable overrides (highest priority) ──
    if v := env.get("LOG_LEVEL"):
        cfg.log_level = v
    if v := env.get("DISCORD_TOKEN"):
        cfg.discord.token = v
    if v := env.get("DISCORD_DEALS_CHANNEL_ID"):
        cfg.discord.deal_channel_ids = parse_channel_ids(v)
    if v := env.get("PARTNER_DEALS_STORE"):
        cfg.store.backend = StoreBackend(v.lower())
    if v := env.get("AIRTABLE_API_KEY"):
        cfg.store.api_key = v
    if v := env.get("AIRTABLE_BASE_ID"):
        cfg.store.base_id = v
    if v := env.get("PARTNER_DEALS_DB_PATH"):
        cfg.store.db_path = v
    if v := env.get("AIRTABLE_INVENTORY_TABLE"):
        cfg.store.tables.inventory = v
    if v := env.get("AIRTABLE_PARTNER_OFFERS_TABLE"):
        cfg.store.tables.partner_offers = v
    if v := env.get("AIRTABLE_SELLERS_TABLE"):
        cfg.store.tables.sellers = v
    if v := env.get("AIRTABLE_ORDERS_TABLE"):
        cfg.store.tables.orders = v
    if v := env.get("PORT"):
        cfg.http.port = int(v)
    if v := env.get("MAKE_CLAIM_WEBHOOK_URL"):
        cfg.notify.automation_webhook_url = v

    # Expand ~ in paths
    if cfg.store.db_path != ":memory:":
        cfg.store.db_path = str(Path(cfg.store.db_path).expanduser())

    return cfg


def missing_settings(cfg: ServiceConfig) -> list[str]:
    """Names of settings `run` cannot start without."""
    missing = []
    if not cfg.discord.token:
        missing.append("DISCORD_TOKEN")
    if not cfg.discord.deal_channel_ids:
        missing.append("DISCORD_DEALS_CHANNEL_ID")
    if cfg.store.backend is StoreBackend.AIRTABLE:
        if not cfg.store.api_key:
            missing.append("AIRTABLE_API_KEY")
        if not cfg.store.base_id:
            missing.append("AIRTABLE_BASE_ID")
    return missing
