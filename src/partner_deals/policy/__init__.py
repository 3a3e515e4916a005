from partner_deals.policy.arbitration import UndercutArbitrator, arbitrate

__all__ = ["UndercutArbitrator", "arbitrate"]
