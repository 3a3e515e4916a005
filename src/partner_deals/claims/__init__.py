"""Claim transition, card fan-out and per-order guards."""

from partner_deals.claims.fanout import CardFanOut
from partner_deals.claims.guard import ClaimGuard, KeyedLock
from partner_deals.claims.transition import ClaimTransition

__all__ = ["CardFanOut", "ClaimGuard", "ClaimTransition", "KeyedLock"]
