"""Data models for the partner_deals service."""

from partner_deals.models.config import (
    DealRules,
    DiscordConfig,
    HttpConfig,
    NotifyConfig,
    ServiceConfig,
    StoreBackend,
    StoreConfig,
    TableNames,
)
from partner_deals.models.deal import (
    CardContext,
    CardFields,
    Deal,
    DealCard,
    DealState,
    Seller,
)
from partner_deals.models.interactions import (
    ButtonPress,
    InteractionKind,
    Prompt,
    PromptInput,
    Submission,
)
from partner_deals.models.query import FieldContains, FieldEquals, LinksTo, RecordFilter
from partner_deals.models.records import (
    ArbitrationResult,
    ClaimReceipt,
    DisableReport,
    FanOutReport,
    OfferReceipt,
    PostResult,
    Record,
)

__all__ = [
    "DealRules", "DiscordConfig", "HttpConfig", "NotifyConfig", "ServiceConfig",
    "StoreBackend", "StoreConfig", "TableNames",
    "CardContext", "CardFields", "Deal", "DealCard", "DealState", "Seller",
    "ButtonPress", "InteractionKind", "Prompt", "PromptInput", "Submission",
    "FieldContains", "FieldEquals", "LinksTo", "RecordFilter",
    "ArbitrationResult", "ClaimReceipt", "DisableReport", "FanOutReport",
    "OfferReceipt", "PostResult", "Record",
]
