from partner_deals.notify.webhooks import WebhookNotifier

__all__ = ["WebhookNotifier"]
