"""partner_deals - posts partner deals to Discord and settles claims and offers."""

__version__ = "0.1.0"
