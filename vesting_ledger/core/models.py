"""Pydantic data models for the vesting ledger.

All records are immutable (frozen) after creation. State changes produce a
new record via ``model_copy``, which is what the ledger's copy-on-write
transactions rely on.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .types import (
    Address,
    Duration,
    EventKind,
    ScheduleState,
    Timestamp,
    TokenAmount,
    is_null_address,
)


class VestingSchedule(BaseModel):
    """One cliff-then-linear vesting grant."""

    owner: Address
    beneficiary: Address
    total_amount: TokenAmount = Field(gt=0)
    start_time: Timestamp = Field(ge=0)
    cliff_duration: Duration = Field(ge=0)
    total_duration: Duration = Field(ge=0)
    claimed_amount: TokenAmount = Field(default=0, ge=0)
    state: ScheduleState = ScheduleState.ACTIVE

    model_config = {"frozen": True}

    @field_validator("beneficiary")
    @classmethod
    def validate_beneficiary(cls, v: Address) -> Address:
        if is_null_address(v):
            raise ValueError("beneficiary must be a non-null address")
        return v

    @model_validator(mode="after")
    def validate_amounts(self) -> "VestingSchedule":
        if self.cliff_duration > self.total_duration:
            raise ValueError(
                f"cliff_duration {self.cliff_duration} exceeds total_duration {self.total_duration}"
            )
        if self.claimed_amount > self.total_amount:
            raise ValueError(
                f"claimed_amount {self.claimed_amount} exceeds total_amount {self.total_amount}"
            )
        return self

    @property
    def is_active(self) -> bool:
        """Whether the schedule currently accrues claimable tokens."""
        return self.state == ScheduleState.ACTIVE

    @property
    def is_fully_claimed(self) -> bool:
        return self.claimed_amount == self.total_amount

    @property
    def remaining_amount(self) -> TokenAmount:
        """Tokens not yet claimed."""
        return self.total_amount - self.claimed_amount

    @property
    def cliff_end(self) -> Timestamp:
        return self.start_time + self.cliff_duration

    @property
    def end_time(self) -> Timestamp:
        return self.start_time + self.total_duration

    def with_claim(self, amount: TokenAmount) -> "VestingSchedule":
        """
        Return a copy with ``amount`` added to the claimed total.

        A schedule whose claimed total reaches the grant size is completed.
        """
        claimed = self.claimed_amount + amount
        if claimed > self.total_amount:
            raise ValueError(
                f"Claim of {amount} would exceed total_amount {self.total_amount} "
                f"(already claimed {self.claimed_amount})"
            )
        state = ScheduleState.COMPLETED if claimed == self.total_amount else self.state
        return self.model_copy(update={"claimed_amount": claimed, "state": state})

    def with_state(self, state: ScheduleState) -> "VestingSchedule":
        return self.model_copy(update={"state": state})


class Manager(BaseModel):
    """Per-owner ledger holding the schedules that owner has created.

    Schedules are append-only; a schedule's position is its stable index.
    """

    owner: Address
    schedules: tuple[VestingSchedule, ...] = ()

    model_config = {"frozen": True}

    @property
    def schedule_count(self) -> int:
        return len(self.schedules)

    def append(self, schedule: VestingSchedule) -> "Manager":
        """Return a copy with ``schedule`` appended."""
        return self.model_copy(update={"schedules": self.schedules + (schedule,)})

    def replace(self, index: int, schedule: VestingSchedule) -> "Manager":
        """Return a copy with the schedule at ``index`` swapped out."""
        schedules = list(self.schedules)
        schedules[index] = schedule
        return self.model_copy(update={"schedules": tuple(schedules)})

    def indices_for(self, beneficiary: Address) -> list[int]:
        """Indices of every schedule addressed to ``beneficiary``, in order."""
        return [
            i for i, schedule in enumerate(self.schedules)
            if schedule.beneficiary == beneficiary
        ]


class LedgerEvent(BaseModel):
    """An entry in the append-only event log."""

    kind: EventKind
    owner: Address
    beneficiary: Address | None = None
    amount: TokenAmount | None = None
    timestamp: Timestamp
    start_time: Timestamp | None = None
    schedule_index: int | None = None

    model_config = {"frozen": True}


class ScheduleClaim(BaseModel):
    """Settlement of one schedule within a claim."""

    index: int
    amount: TokenAmount
    claimed_amount: TokenAmount
    state: ScheduleState

    model_config = {"frozen": True}


class ClaimReceipt(BaseModel):
    """Result of a successful claim."""

    beneficiary: Address
    owner: Address
    amount: TokenAmount
    timestamp: Timestamp
    claims: list[ScheduleClaim] = Field(default_factory=list)

    model_config = {"frozen": True}


class VestingSnapshot(BaseModel):
    """Point-in-time view of a schedule, with the arithmetic spelled out."""

    owner: Address
    beneficiary: Address
    index: int | None = None
    timestamp: Timestamp
    total_amount: TokenAmount
    vested_amount: TokenAmount      # Linear vested to date, ignoring claims and state
    claimed_amount: TokenAmount
    claimable_amount: TokenAmount
    state: ScheduleState
    calculation_notes: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def vested_pct(self) -> float:
        return self.vested_amount / self.total_amount * 100


class LedgerState(BaseModel):
    """Serializable snapshot of every manager plus asset balances."""

    managers: dict[Address, Manager] = Field(default_factory=dict)
    balances: dict[Address, TokenAmount] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
