"""Service wiring - builds every component once and runs them together."""

from __future__ import annotations

import asyncio
import logging
import signal

from partner_deals.api.http import HttpListener
from partner_deals.chat.board import DiscordDealBoard
from partner_deals.chat.bot import DealBotClient
from partner_deals.claims.fanout import CardFanOut
from partner_deals.claims.transition import ClaimTransition
from partner_deals.dispatch.dispatcher import CommandDispatcher
from partner_deals.identity.resolver import IdentityResolver
from partner_deals.interfaces.store import RecordStore
from partner_deals.models.config import ServiceConfig, StoreBackend, StoreConfig
from partner_deals.notify.webhooks import WebhookNotifier
from partner_deals.policy.arbitration import UndercutArbitrator
from partner_deals.storage.airtable import AirtableRecordStore
from partner_deals.storage.sqlite import SQLiteRecordStore

log = logging.getLogger(__name__)


def build_store(cfg: StoreConfig) -> RecordStore:
    if cfg.backend is StoreBackend.SQLITE:
        return SQLiteRecordStore(cfg.db_path)
    return AirtableRecordStore(
        api_key=cfg.api_key,
        base_id=cfg.base_id,
        api_url=cfg.api_url,
        timeout=cfg.timeout,
        max_retries=cfg.max_retries,
    )


class DealService:
    """Partner deal service: Discord gateway plus HTTP trigger listener."""

    def __init__(self, cfg: ServiceConfig) -> None:
        self._cfg = cfg
        self._stop = asyncio.Event()
        tables = cfg.store.tables
        symbol = cfg.deals.currency_symbol

        self.store = build_store(cfg.store)
        self.client = DealBotClient()
        self.board = DiscordDealBoard(self.client)
        self.resolver = IdentityResolver(self.store, tables, cfg.deals.seller_code_prefix)
        self.arbitrator = UndercutArbitrator(self.store, tables, cfg.deals.undercut_step)
        self.notifier = WebhookNotifier(
            cfg.notify.automation_webhook_url, cfg.notify.timeout, symbol
        )
        self.transition = ClaimTransition(
            store=self.store,
            resolver=self.resolver,
            arbitrator=self.arbitrator,
            fanout=CardFanOut(
                self.board,
                cfg.discord.deal_channel_ids,
                cfg.deals.fanout_concurrency,
            ),
            notifier=self.notifier,
            tables=tables,
            currency_symbol=symbol,
        )
        self.dispatcher = CommandDispatcher(
            self.transition, self.board, cfg.discord.deal_channel_ids, symbol
        )
        self.client.bind(self.dispatcher)
        self.http = HttpListener(self.dispatcher, cfg.http.host, cfg.http.port)

    async def start(self) -> None:
        """Run until stop() is called or the Discord connection ends."""
        log.info("Starting partner deal service")
        log.info("  Store: %s", self._cfg.store.backend.value)
        log.info("  Channels: %s", ", ".join(map(str, self._cfg.discord.deal_channel_ids)))
        log.info("  HTTP: %s:%d", self._cfg.http.host, self._cfg.http.port)

        await self.store.initialize()
        await self.http.start()
        bot = asyncio.create_task(self.client.start(self._cfg.discord.token), name="discord")
        stop = asyncio.create_task(self._stop.wait(), name="stop")
        try:
            done, _ = await asyncio.wait({bot, stop}, return_when=asyncio.FIRST_COMPLETED)
            if bot in done and not bot.cancelled() and bot.exception():
                log.error("Discord client stopped: %s", bot.exception())
        finally:
            stop.cancel()
            if not self.client.is_closed():
                await self.client.close()
            if not bot.done():
                bot.cancel()
            await self.http.stop()
            await self.store.close()
            log.info("Service shut down cleanly")

    async def stop(self) -> None:
        log.info("Stop requested")
        self._stop.set()


async def run_service(cfg: ServiceConfig) -> None:
    """Entry point for running the service."""
    service = DealService(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(service.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await service.start()
