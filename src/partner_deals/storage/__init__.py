"""RecordStore implementations."""

from partner_deals.storage.airtable import AirtableRecordStore
from partner_deals.storage.sqlite import SQLiteRecordStore

__all__ = ["AirtableRecordStore", "SQLiteRecordStore"]
