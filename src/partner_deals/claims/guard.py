"""In-process mutual exclusion keyed by order reference."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from partner_deals.errors import ClaimInProgressError

log = logging.getLogger(__name__)


class ClaimGuard:
    """Claim-in-progress markers.

    A marker is taken before a claim is persisted and released after the
    fan-out. A second attempt on a held key fails immediately rather than
    waiting; it would only find the deal claimed.
    """

    def __init__(self) -> None:
        self._held: set[str] = set()

    def is_held(self, key: str) -> bool:
        return key in self._held

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        if key in self._held:
            log.warning("Claim already in progress for %s", key)
            raise ClaimInProgressError(key)
        self._held.add(key)
        try:
            yield
        finally:
            self._held.discard(key)


class KeyedLock:
    """One asyncio.Lock per key, dropped once nobody is waiting on it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]
