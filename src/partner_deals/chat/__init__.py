"""Discord adapter: board, responder and gateway client."""

from partner_deals.chat.board import DiscordDealBoard
from partner_deals.chat.bot import DealBotClient
from partner_deals.chat.responder import DiscordResponder

__all__ = ["DealBotClient", "DiscordDealBoard", "DiscordResponder"]
