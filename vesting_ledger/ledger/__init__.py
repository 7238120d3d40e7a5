"""Vesting ledger engine and its collaborators."""

from .engine import VestingLedger
from .collaborators import (
    AssetLedger,
    InMemoryAssetLedger,
    Clock,
    SystemClock,
    FixedClock,
    EventSink,
    InMemoryEventSink,
    LoggingEventSink,
)

__all__ = [
    "VestingLedger",
    "AssetLedger",
    "InMemoryAssetLedger",
    "Clock",
    "SystemClock",
    "FixedClock",
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
]
