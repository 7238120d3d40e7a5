"""Collaborators consumed by the vesting ledger.

The ledger never moves tokens, reads the time or records events itself; it
talks to an asset ledger, a clock and an event sink through the interfaces
below. In-memory implementations back tests and the CLI.
"""

import logging
import time
from abc import ABC, abstractmethod

from ..core.exceptions import InsufficientBalanceError
from ..core.models import LedgerEvent
from ..core.types import Address, Timestamp, TokenAmount

logger = logging.getLogger(__name__)


class AssetLedger(ABC):
    """Fungible asset transfer primitive that conserves total supply."""

    @abstractmethod
    def withdraw(self, account: Address, amount: TokenAmount) -> None:
        """Debit ``amount`` from ``account``; fail if the balance is insufficient."""
        pass

    @abstractmethod
    def deposit(self, account: Address, amount: TokenAmount) -> None:
        """Credit ``amount`` to ``account``."""
        pass

    @abstractmethod
    def balance_of(self, account: Address) -> TokenAmount:
        pass


class InMemoryAssetLedger(AssetLedger):
    """Asset ledger tracking balances in a dict."""

    def __init__(self, balances: dict[Address, TokenAmount] | None = None):
        self._balances: dict[Address, TokenAmount] = dict(balances or {})
        self._pending: TokenAmount = 0  # withdrawn, not yet deposited

    @staticmethod
    def _check_amount(amount: TokenAmount) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"Amount must be a non-negative integer, got {amount!r}")

    def mint(self, account: Address, amount: TokenAmount) -> None:
        """Create new supply in ``account``."""
        self._check_amount(amount)
        self._balances[account] = self._balances.get(account, 0) + amount
        logger.info(f"Minted {amount:,} to {account}")

    def withdraw(self, account: Address, amount: TokenAmount) -> None:
        self._check_amount(amount)
        available = self._balances.get(account, 0)
        if amount > available:
            raise InsufficientBalanceError(account, amount, available)
        self._balances[account] = available - amount
        self._pending += amount

    def deposit(self, account: Address, amount: TokenAmount) -> None:
        self._check_amount(amount)
        if amount > self._pending:
            raise ValueError(
                f"Deposit of {amount} exceeds withdrawn funds in flight ({self._pending})"
            )
        self._pending -= amount
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: Address) -> TokenAmount:
        return self._balances.get(account, 0)

    @property
    def total_supply(self) -> TokenAmount:
        return sum(self._balances.values()) + self._pending

    @property
    def balances(self) -> dict[Address, TokenAmount]:
        """Copy of all non-zero balances."""
        return {account: amount for account, amount in self._balances.items() if amount}


class Clock(ABC):
    """Monotonic clock returning whole seconds since the Unix epoch."""

    @abstractmethod
    def now(self) -> Timestamp:
        pass


class SystemClock(Clock):
    """Wall clock backed by ``time.time()``."""

    def __init__(self) -> None:
        self._last: Timestamp = 0

    def now(self) -> Timestamp:
        # Never step backwards even if the wall clock does
        self._last = max(self._last, int(time.time()))
        return self._last


class FixedClock(Clock):
    """Manually driven clock for tests and what-if queries."""

    def __init__(self, timestamp: Timestamp = 0):
        self._timestamp = int(timestamp)

    def now(self) -> Timestamp:
        return self._timestamp

    def set(self, timestamp: Timestamp) -> None:
        if timestamp < self._timestamp:
            raise ValueError(f"Clock cannot move backwards: {timestamp} < {self._timestamp}")
        self._timestamp = int(timestamp)

    def advance(self, seconds: int) -> Timestamp:
        self.set(self._timestamp + seconds)
        return self._timestamp


class EventSink(ABC):
    """Append-only event log. Events are never read back by the ledger."""

    @abstractmethod
    def emit(self, event: LedgerEvent) -> None:
        pass


class InMemoryEventSink(EventSink):
    """Keeps emitted events in a list."""

    def __init__(self) -> None:
        self.events: list[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


class LoggingEventSink(EventSink):
    """Writes each event to the module logger."""

    def emit(self, event: LedgerEvent) -> None:
        logger.info(f"[event] {event.kind.value}: {event.model_dump(exclude_none=True)}")
