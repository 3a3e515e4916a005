from partner_deals.identity.resolver import IdentityResolver

__all__ = ["IdentityResolver"]
