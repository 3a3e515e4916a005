from partner_deals.dispatch.dispatcher import CommandDispatcher, deal_from_payload

__all__ = ["CommandDispatcher", "deal_from_payload"]
