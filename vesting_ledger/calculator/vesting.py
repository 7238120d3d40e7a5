"""Vesting calculator for cliff-then-linear schedules.

All calculations use integer arithmetic with explicit formulas:
- Nothing vests before start_time + cliff_duration
- Linear vested = floor(elapsed × total_amount / total_duration)
- Fully vested once elapsed >= total_duration
- Claimable = vested - claimed, never below zero
"""

import logging

from ..core.models import VestingSchedule, VestingSnapshot
from ..core.types import Duration, Timestamp, TokenAmount

logger = logging.getLogger(__name__)


def calc_linear_vested(
    total_amount: TokenAmount,
    elapsed: Duration,
    total_duration: Duration,
) -> TokenAmount:
    """
    Amount vested after ``elapsed`` seconds on a linear curve.

    Multiplies before dividing so no precision is lost to an intermediate
    division.
    """
    if elapsed < 0:
        raise ValueError(f"elapsed must be non-negative, got {elapsed}")
    if elapsed >= total_duration:
        return total_amount
    return elapsed * total_amount // total_duration


def calc_vested_to_date(schedule: VestingSchedule, current_time: Timestamp) -> TokenAmount:
    """Amount vested by ``current_time``, ignoring state and prior claims."""
    if current_time < schedule.cliff_end:
        return 0
    elapsed = current_time - schedule.start_time
    return calc_linear_vested(schedule.total_amount, elapsed, schedule.total_duration)


def calc_vested_amount(schedule: VestingSchedule, current_time: Timestamp) -> TokenAmount:
    """
    Amount claimable from ``schedule`` at ``current_time``.

    Inactive schedules (paused or completed) yield 0. Once fully vested the
    whole unclaimed remainder is released. The result is clamped at 0 if
    the claimed total ever exceeds the linear vested amount.
    """
    if not schedule.is_active:
        return 0
    if current_time < schedule.cliff_end:
        return 0

    elapsed = current_time - schedule.start_time
    if elapsed >= schedule.total_duration:
        return schedule.total_amount - schedule.claimed_amount

    vested = calc_linear_vested(schedule.total_amount, elapsed, schedule.total_duration)
    return max(0, vested - schedule.claimed_amount)


class VestingCalculator:
    """Builds explained vesting snapshots for schedules."""

    def snapshot(
        self,
        schedule: VestingSchedule,
        current_time: Timestamp,
        index: int | None = None,
    ) -> VestingSnapshot:
        """
        Calculate a point-in-time view of a schedule.

        Args:
            schedule: The schedule to evaluate
            current_time: Unix timestamp to evaluate at
            index: Optional position of the schedule in its manager

        Returns:
            VestingSnapshot with vested, claimed and claimable amounts
        """
        notes: list[str] = []

        vested = calc_vested_to_date(schedule, current_time)
        claimable = calc_vested_amount(schedule, current_time)

        if current_time < schedule.cliff_end:
            notes.append(
                f"Cliff not reached: {current_time} < {schedule.start_time} + "
                f"{schedule.cliff_duration} = {schedule.cliff_end}"
            )
        elif current_time - schedule.start_time >= schedule.total_duration:
            notes.append(
                f"Fully vested: elapsed {current_time - schedule.start_time}s "
                f">= total_duration {schedule.total_duration}s"
            )
        else:
            elapsed = current_time - schedule.start_time
            notes.append(
                f"Vested = floor({elapsed} × {schedule.total_amount:,} / "
                f"{schedule.total_duration}) = {vested:,}"
            )

        if not schedule.is_active:
            notes.append(f"Schedule is {schedule.state.value}: nothing claimable")
        else:
            notes.append(
                f"Claimable = {vested:,} vested - {schedule.claimed_amount:,} claimed = {claimable:,}"
            )

        logger.debug(
            f"Snapshot {schedule.owner}#{index} at {current_time}: "
            f"vested={vested} claimable={claimable}"
        )

        return VestingSnapshot(
            owner=schedule.owner,
            beneficiary=schedule.beneficiary,
            index=index,
            timestamp=current_time,
            total_amount=schedule.total_amount,
            vested_amount=vested,
            claimed_amount=schedule.claimed_amount,
            claimable_amount=claimable,
            state=schedule.state,
            calculation_notes=notes,
        )
