"""Storage module for ledger state and events."""

from .json_store import LedgerStore, JsonLinesEventSink

__all__ = ["LedgerStore", "JsonLinesEventSink"]
