"""Configuration models for the deal service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StoreBackend(str, Enum):
    """Which record store implementation backs the service."""

    AIRTABLE = "airtable"
    SQLITE = "sqlite"  # local runs and tests


@dataclass
class TableNames:
    """Logical table -> physical table name in the record store."""

    inventory: str = "Inventory Units"
    partner_offers: str = "Partner Offers"
    sellers: str = "Sellers Database"
    orders: str = "Unfulfilled Orders Log"


@dataclass
class DiscordConfig:
    token: str = ""
    deal_channel_ids: list[int] = field(default_factory=list)


@dataclass
class StoreConfig:
    backend: StoreBackend = StoreBackend.AIRTABLE
    api_key: str = ""  # loaded from env var AIRTABLE_API_KEY
    base_id: str = ""
    api_url: str = "https://api.airtable.com/v0"
    db_path: str = "~/.partner_deals/records.db"
    timeout: int = 30  # seconds
    max_retries: int = 3
    tables: TableNames = field(default_factory=TableNames)


@dataclass
class HttpConfig:
    host: str = "0.0.0.0"
    port: int = 10000


@dataclass
class DealRules:
    """Business constants for rendering and arbitration."""

    currency_symbol: str = "€"
    seller_code_prefix: str = "SE-"
    undercut_step: float = 2.5
    fanout_concurrency: int = 5


@dataclass
class NotifyConfig:
    automation_webhook_url: str = ""  # Make scenario webhook, optional
    timeout: int = 10  # seconds


@dataclass
class ServiceConfig:
    """Complete service configuration."""

    log_level: str = "info"
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    deals: DealRules = field(default_factory=DealRules)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
