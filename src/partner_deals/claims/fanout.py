"""Disable every posted copy of a deal card."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from partner_deals.interfaces.board import DealBoard
from partner_deals.models.records import FanOutReport

log = logging.getLogger(__name__)


def split_message_ids(value: object) -> list[str]:
    """Parse a comma-joined message-id cell, dropping blanks and duplicates."""
    if value is None:
        return []
    ids: list[str] = []
    for part in str(value).split(","):
        part = part.strip()
        if part and part not in ids:
            ids.append(part)
    return ids


class CardFanOut:
    """Best-effort disablement across all configured deal channels.

    A message id is looked up in every channel until one of them holds
    it. Failures are logged per copy and never abort the other copies.
    """

    def __init__(
        self,
        board: DealBoard,
        channel_ids: Sequence[int],
        max_concurrent: int = 5,
    ) -> None:
        self._board = board
        self._channel_ids = list(channel_ids)
        self._max_concurrent = max(1, max_concurrent)

    async def disable_all(self, message_ids: Sequence[str]) -> FanOutReport:
        report = FanOutReport(message_ids=list(message_ids))
        if not report.message_ids:
            return report

        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _disable_one(message_id: str) -> str:
            async with semaphore:
                return await self._disable_copy(message_id)

        results = await asyncio.gather(
            *(_disable_one(mid) for mid in report.message_ids),
            return_exceptions=True,
        )

        for message_id, result in zip(report.message_ids, results):
            if isinstance(result, Exception):
                log.warning("Failed to disable card %s: %s", message_id, result)
                report.errors.append(message_id)
            elif result == "disabled":
                report.disabled.append(message_id)
            elif result == "missing":
                report.missing.append(message_id)
            else:
                report.errors.append(message_id)

        log.info(
            "Card fan-out: %d copies, %d disabled, %d missing, %d errors",
            len(report.message_ids),
            len(report.disabled),
            len(report.missing),
            len(report.errors),
        )
        return report

    async def disable_one(self, channel_id: int, message_id: str) -> FanOutReport:
        """Disable a single known copy (the card that triggered a claim)."""
        report = FanOutReport(message_ids=[message_id])
        try:
            found = await self._board.disable_card(channel_id, message_id)
        except Exception as exc:
            log.warning("Failed to disable card %s in %s: %s", message_id, channel_id, exc)
            report.errors.append(message_id)
            return report
        (report.disabled if found else report.missing).append(message_id)
        return report

    async def _disable_copy(self, message_id: str) -> str:
        failed = False
        for channel_id in self._channel_ids:
            try:
                if await self._board.disable_card(channel_id, message_id):
                    log.debug("Disabled card %s in channel %s", message_id, channel_id)
                    return "disabled"
            except Exception as exc:
                failed = True
                log.warning(
                    "Error disabling card %s in channel %s: %s", message_id, channel_id, exc
                )
        if failed:
            return "error"
        log.warning("Card %s not found in any deal channel", message_id)
        return "missing"
