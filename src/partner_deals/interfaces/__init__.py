"""Protocol interfaces for every external collaborator."""

from partner_deals.interfaces.board import DealBoard
from partner_deals.interfaces.notifier import ClaimNotifier
from partner_deals.interfaces.responder import Responder
from partner_deals.interfaces.store import RecordStore

__all__ = [
    "DealBoard",
    "ClaimNotifier",
    "Responder",
    "RecordStore",
]
