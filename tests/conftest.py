"""Shared fixtures for partner_deals tests."""

from __future__ import annotations

import pytest

from partner_deals.claims.fanout import CardFanOut
from partner_deals.claims.transition import ClaimTransition
from partner_deals.dispatch.dispatcher import CommandDispatcher
from partner_deals.identity.resolver import IdentityResolver
from partner_deals.models.config import TableNames
from partner_deals.policy.arbitration import UndercutArbitrator
from partner_deals.storage.sqlite import SQLiteRecordStore

from tests.mocks import CountingStore, MockBoard, MockNotifier, MockResponder

CHANNEL_A = 1_100_000_000_000_000_001
CHANNEL_B = 1_100_000_000_000_000_002
CHANNELS = [CHANNEL_A, CHANNEL_B]


@pytest.fixture
def tables():
    return TableNames()


@pytest.fixture
async def sqlite_store():
    """Initialized in-memory SQLiteRecordStore."""
    s = SQLiteRecordStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def store(sqlite_store):
    """The in-memory store, wrapped to record calls."""
    return CountingStore(sqlite_store)


@pytest.fixture
def board():
    return MockBoard(CHANNELS)


@pytest.fixture
def notifier():
    return MockNotifier()


@pytest.fixture
def responder():
    return MockResponder()


@pytest.fixture
def resolver(store, tables):
    return IdentityResolver(store, tables)


@pytest.fixture
def arbitrator(store, tables):
    return UndercutArbitrator(store, tables, step=2.5)


@pytest.fixture
def transition(store, tables, resolver, arbitrator, board, notifier):
    """Fully wired ClaimTransition over the in-memory store and mock board."""
    return ClaimTransition(
        store=store,
        resolver=resolver,
        arbitrator=arbitrator,
        fanout=CardFanOut(board, CHANNELS, max_concurrent=2),
        notifier=notifier,
        tables=tables,
    )


@pytest.fixture
def dispatcher(transition, board):
    return CommandDispatcher(transition, board, CHANNELS)
