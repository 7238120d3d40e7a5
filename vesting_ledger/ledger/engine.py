"""Vesting ledger: managers, schedule lifecycle and claim settlement.

Each public mutating operation runs inside a copy-on-write transaction. The
manager map is staged, every precondition is checked against the stage, and
only when the operation completes is the stage committed and its events
flushed. Any error discards the stage, so a failed operation leaves no
mutation, no transfer and no event behind. A sink that fails after the
commit is logged; the operation still succeeds.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping

from ..calculator.vesting import VestingCalculator, calc_vested_amount
from ..core.exceptions import NoClaimableAmountError
from ..core.models import (
    ClaimReceipt,
    LedgerEvent,
    LedgerState,
    Manager,
    ScheduleClaim,
    VestingSchedule,
    VestingSnapshot,
)
from ..core.types import Address, EventKind, ScheduleState, Timestamp, TokenAmount
from . import guard
from .collaborators import (
    AssetLedger,
    Clock,
    EventSink,
    InMemoryAssetLedger,
    InMemoryEventSink,
    SystemClock,
)

logger = logging.getLogger(__name__)


@dataclass
class _Transaction:
    """Staged state for one operation."""

    managers: dict[Address, Manager]
    now: Timestamp
    events: list[LedgerEvent] = field(default_factory=list)


class VestingLedger:
    """
    Token vesting ledger.

    Usage:
        ledger = VestingLedger(assets, clock, events, treasury="0xtreasury")

        ledger.initialize("0xissuer")
        ledger.create_schedule("0xissuer", "0xissuer", 1000, start, 100, 1000)

        receipt = ledger.claim("0xissuer")
    """

    def __init__(
        self,
        assets: AssetLedger | None = None,
        clock: Clock | None = None,
        event_sink: EventSink | None = None,
        treasury: Address = "0xtreasury",
        managers: Mapping[Address, Manager] | None = None,
    ):
        """
        Initialize the ledger.

        Args:
            assets: Asset ledger that pays out claims
            clock: Time source, sampled once per operation
            event_sink: Append-only event log
            treasury: Account on the asset ledger that funds claims
            managers: Previously persisted managers, keyed by owner
        """
        self.assets = assets if assets is not None else InMemoryAssetLedger()
        self.clock = clock if clock is not None else SystemClock()
        self.event_sink = event_sink if event_sink is not None else InMemoryEventSink()
        self.treasury = treasury
        self.calculator = VestingCalculator()
        self._managers: dict[Address, Manager] = dict(managers or {})

    @classmethod
    def from_state(
        cls,
        state: LedgerState,
        clock: Clock | None = None,
        event_sink: EventSink | None = None,
        treasury: Address = "0xtreasury",
    ) -> "VestingLedger":
        """Rebuild a ledger backed by an in-memory asset ledger from a saved state."""
        return cls(
            assets=InMemoryAssetLedger(state.balances),
            clock=clock,
            event_sink=event_sink,
            treasury=treasury,
            managers=state.managers,
        )

    def export_state(self) -> LedgerState:
        """Snapshot managers, plus balances when the asset ledger is in memory."""
        balances = self.assets.balances if isinstance(self.assets, InMemoryAssetLedger) else {}
        return LedgerState(managers=dict(self._managers), balances=balances)

    @contextmanager
    def _transaction(self) -> Iterator[_Transaction]:
        txn = _Transaction(managers=dict(self._managers), now=self.clock.now())
        yield txn
        # Only reached when the body completed without raising
        self._managers = txn.managers
        self._flush(txn.events)

    def _flush(self, events: list[LedgerEvent]) -> None:
        """Deliver committed events. Sink failures cannot undo the commit."""
        for event in events:
            try:
                self.event_sink.emit(event)
            except Exception:
                logger.exception(
                    f"Event sink failed on {event.kind.value} for {event.owner}; "
                    f"state is already committed"
                )

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def initialize(self, caller: Address) -> None:
        """Create an empty manager owned by ``caller``."""
        with self._transaction() as txn:
            guard.require_address(caller, "owner")
            guard.require_uninitialized(txn.managers, caller)
            txn.managers[caller] = Manager(owner=caller)
            txn.events.append(
                LedgerEvent(kind=EventKind.MANAGER_INITIALIZED, owner=caller, timestamp=txn.now)
            )
        logger.info(f"Initialized vesting manager for {caller}")

    def create_schedule(
        self,
        owner: Address,
        beneficiary: Address,
        total_amount: TokenAmount,
        start_time: Timestamp,
        cliff_duration: int,
        total_duration: int,
        caller: Address | None = None,
    ) -> int:
        """
        Append a new schedule to ``owner``'s manager.

        Args:
            owner: Address of the manager to append to
            beneficiary: Address entitled to claim
            total_amount: Grant size, > 0
            start_time: Vesting start (Unix seconds)
            cliff_duration: Seconds after start before anything vests
            total_duration: Seconds after start until fully vested
            caller: Authenticated caller, defaults to ``owner``

        Returns:
            Index of the new schedule within the manager
        """
        caller = owner if caller is None else caller

        with self._transaction() as txn:
            manager = guard.require_manager(txn.managers, owner)
            guard.validate_schedule_params(
                beneficiary, total_amount, start_time, cliff_duration, total_duration
            )
            guard.require_owner(manager, caller)

            schedule = VestingSchedule(
                owner=owner,
                beneficiary=beneficiary,
                total_amount=total_amount,
                start_time=start_time,
                cliff_duration=cliff_duration,
                total_duration=total_duration,
            )
            index = manager.schedule_count
            txn.managers[owner] = manager.append(schedule)
            txn.events.append(
                LedgerEvent(
                    kind=EventKind.SCHEDULE_CREATED,
                    owner=owner,
                    beneficiary=beneficiary,
                    amount=total_amount,
                    start_time=start_time,
                    timestamp=txn.now,
                    schedule_index=index,
                )
            )

        logger.info(
            f"Created schedule {owner}#{index}: {total_amount:,} to {beneficiary} "
            f"(start={start_time}, cliff={cliff_duration}s, duration={total_duration}s)"
        )
        return index

    def claim(self, caller: Address, owner: Address | None = None) -> ClaimReceipt:
        """
        Settle every active schedule addressed to ``caller``.

        Claims are scoped to the caller's own manager unless ``owner`` names
        another one. Each schedule is credited independently, in manager
        order, and completed when its claimed total reaches the grant size.
        The summed amount is then paid from the treasury.

        Raises:
            ManagerNotFoundError: no manager for ``owner``
            NoClaimableAmountError: nothing has vested since the last claim
            InsufficientBalanceError: the treasury cannot fund the payout
        """
        owner = caller if owner is None else owner

        with self._transaction() as txn:
            manager = guard.require_manager(txn.managers, owner)

            total_claimable = 0
            claims: list[ScheduleClaim] = []
            for index in manager.indices_for(caller):
                schedule = manager.schedules[index]
                if not schedule.is_active:
                    continue
                claimable = calc_vested_amount(schedule, txn.now)
                if claimable <= 0:
                    continue

                schedule = schedule.with_claim(claimable)
                manager = manager.replace(index, schedule)
                total_claimable += claimable
                claims.append(
                    ScheduleClaim(
                        index=index,
                        amount=claimable,
                        claimed_amount=schedule.claimed_amount,
                        state=schedule.state,
                    )
                )
                logger.debug(
                    f"Schedule {owner}#{index}: +{claimable} "
                    f"({schedule.claimed_amount}/{schedule.total_amount}, {schedule.state.value})"
                )

            if total_claimable == 0:
                raise NoClaimableAmountError(caller, owner, txn.now)

            txn.managers[owner] = manager
            self.assets.withdraw(self.treasury, total_claimable)
            try:
                self.assets.deposit(caller, total_claimable)
            except Exception:
                # Return the debit so the treasury is left untouched
                self.assets.deposit(self.treasury, total_claimable)
                raise
            txn.events.append(
                LedgerEvent(
                    kind=EventKind.TOKENS_CLAIMED,
                    owner=owner,
                    beneficiary=caller,
                    amount=total_claimable,
                    timestamp=txn.now,
                )
            )

        logger.info(
            f"{caller} claimed {total_claimable:,} from {owner} "
            f"across {len(claims)} schedule(s) at {txn.now}"
        )
        return ClaimReceipt(
            beneficiary=caller,
            owner=owner,
            amount=total_claimable,
            timestamp=txn.now,
            claims=claims,
        )

    def pause(
        self,
        owner: Address,
        beneficiary: Address,
        schedule_index: int,
        caller: Address | None = None,
    ) -> VestingSchedule:
        """Stop a schedule from accruing claimable tokens."""
        return self._set_state(
            owner, beneficiary, schedule_index, caller, ScheduleState.PAUSED
        )

    def resume(
        self,
        owner: Address,
        beneficiary: Address,
        schedule_index: int,
        caller: Address | None = None,
    ) -> VestingSchedule:
        """Reactivate a paused schedule. Completed schedules stay completed."""
        return self._set_state(
            owner, beneficiary, schedule_index, caller, ScheduleState.ACTIVE
        )

    def _set_state(
        self,
        owner: Address,
        beneficiary: Address,
        index: int,
        caller: Address | None,
        target: ScheduleState,
    ) -> VestingSchedule:
        caller = owner if caller is None else caller
        kind = (
            EventKind.SCHEDULE_PAUSED if target == ScheduleState.PAUSED
            else EventKind.SCHEDULE_RESUMED
        )

        with self._transaction() as txn:
            manager = guard.require_manager(txn.managers, owner)
            guard.require_owner(manager, caller)
            schedule = guard.require_schedule(manager, index)
            guard.require_beneficiary_match(schedule, beneficiary)

            if schedule.state == ScheduleState.COMPLETED:
                logger.warning(
                    f"Schedule {owner}#{index} is completed; {kind.value} has no effect"
                )
                return schedule

            if schedule.state == target:
                logger.warning(f"Schedule {owner}#{index} is already {target.value}")
                return schedule

            schedule = schedule.with_state(target)
            txn.managers[owner] = manager.replace(index, schedule)
            txn.events.append(
                LedgerEvent(
                    kind=kind,
                    owner=owner,
                    beneficiary=beneficiary,
                    timestamp=txn.now,
                    schedule_index=index,
                )
            )

        logger.info(f"Schedule {owner}#{index} is now {schedule.state.value}")
        return schedule

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def has_manager(self, owner: Address) -> bool:
        return owner in self._managers

    @property
    def owners(self) -> list[Address]:
        return list(self._managers)

    def list_schedules(self, owner: Address) -> list[VestingSchedule]:
        """All schedules of ``owner``'s manager, in creation order."""
        return list(guard.require_manager(self._managers, owner).schedules)

    def get_schedule(self, owner: Address, index: int) -> VestingSchedule:
        manager = guard.require_manager(self._managers, owner)
        return guard.require_schedule(manager, index)

    def claimable_amount(
        self,
        beneficiary: Address,
        owner: Address,
        at: Timestamp | None = None,
    ) -> TokenAmount:
        """
        Total ``beneficiary`` could claim from ``owner``'s manager.

        Args:
            beneficiary: Claiming address
            owner: Manager owner
            at: Timestamp to evaluate at, defaults to the clock

        Returns:
            Sum of claimable amounts over matching active schedules, or 0
        """
        manager = guard.require_manager(self._managers, owner)
        now = self.clock.now() if at is None else at
        return sum(
            calc_vested_amount(manager.schedules[i], now)
            for i in manager.indices_for(beneficiary)
        )

    def snapshot(
        self,
        owner: Address,
        index: int,
        at: Timestamp | None = None,
    ) -> VestingSnapshot:
        """Explained point-in-time view of one schedule."""
        schedule = self.get_schedule(owner, index)
        now = self.clock.now() if at is None else at
        return self.calculator.snapshot(schedule, now, index=index)
