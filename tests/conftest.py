"""Pytest configuration and fixtures for vesting ledger tests."""

import pytest

from vesting_ledger.core.models import VestingSchedule
from vesting_ledger.ledger.collaborators import (
    FixedClock,
    InMemoryAssetLedger,
    InMemoryEventSink,
)
from vesting_ledger.ledger.engine import VestingLedger

T0 = 1_700_000_000
TREASURY = "0xtreasury"
ISSUER = "0xa11ce"
OTHER = "0xb0b"


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at T0."""
    return FixedClock(T0)


@pytest.fixture
def assets() -> InMemoryAssetLedger:
    """Asset ledger with a well-funded treasury."""
    ledger = InMemoryAssetLedger()
    ledger.mint(TREASURY, 1_000_000)
    return ledger


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def ledger(assets, clock, event_sink) -> VestingLedger:
    """Empty ledger wired to the in-memory collaborators."""
    return VestingLedger(assets=assets, clock=clock, event_sink=event_sink, treasury=TREASURY)


@pytest.fixture
def issuer_ledger(ledger) -> VestingLedger:
    """Ledger with ISSUER's manager initialized and no schedules."""
    ledger.initialize(ISSUER)
    return ledger


@pytest.fixture
def sample_schedule() -> VestingSchedule:
    """1000 tokens, 100s cliff, 1000s total, starting at T0."""
    return VestingSchedule(
        owner=ISSUER,
        beneficiary=ISSUER,
        total_amount=1000,
        start_time=T0,
        cliff_duration=100,
        total_duration=1000,
    )
