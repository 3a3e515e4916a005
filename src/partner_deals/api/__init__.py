from partner_deals.api.http import HttpListener, build_app

__all__ = ["HttpListener", "build_app"]
