"""Lifecycle and authorization checks.

Every check runs before any mutation and raises the matching ledger error.
"""

from typing import Mapping

from ..core.exceptions import (
    AlreadyInitializedError,
    InvalidAddressError,
    InvalidBeneficiaryError,
    InvalidVestingParamsError,
    ManagerNotFoundError,
    NotOwnerError,
    ScheduleNotFoundError,
)
from ..core.models import Manager, VestingSchedule
from ..core.types import Address, is_null_address


def require_manager(managers: Mapping[Address, Manager], owner: Address) -> Manager:
    """Return the manager owned by ``owner`` or raise ManagerNotFoundError."""
    manager = managers.get(owner)
    if manager is None:
        raise ManagerNotFoundError(owner)
    return manager


def require_address(address: object, role: str) -> None:
    """Reject anything that is not a non-null address string."""
    if not isinstance(address, str) or is_null_address(address):
        raise InvalidAddressError(address, role)


def require_uninitialized(managers: Mapping[Address, Manager], owner: Address) -> None:
    if owner in managers:
        raise AlreadyInitializedError(owner)


def require_owner(manager: Manager, caller: Address) -> None:
    if caller != manager.owner:
        raise NotOwnerError(caller, manager.owner)


def _require_unsigned(field: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidVestingParamsError(field, value, "must be an integer")
    if value < 0:
        raise InvalidVestingParamsError(field, value, "must not be negative")


def validate_schedule_params(
    beneficiary: Address | None,
    total_amount: int,
    start_time: int,
    cliff_duration: int,
    total_duration: int,
) -> None:
    """
    Validate schedule creation parameters.

    Checks run in a fixed order: integer domain, cliff within duration,
    positive amount, then a non-null beneficiary.
    """
    _require_unsigned("total_amount", total_amount)
    _require_unsigned("start_time", start_time)
    _require_unsigned("cliff_duration", cliff_duration)
    _require_unsigned("total_duration", total_duration)

    if cliff_duration > total_duration:
        raise InvalidVestingParamsError(
            "cliff_duration",
            cliff_duration,
            f"exceeds total_duration {total_duration}",
        )
    if total_amount == 0:
        raise InvalidVestingParamsError("total_amount", total_amount, "must be greater than 0")
    if not isinstance(beneficiary, str):
        raise InvalidBeneficiaryError(beneficiary, "must be an address string")
    if is_null_address(beneficiary):
        raise InvalidBeneficiaryError(beneficiary, "null address")


def require_schedule(manager: Manager, index: int) -> VestingSchedule:
    """Return the schedule at ``index`` or raise ScheduleNotFoundError."""
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < manager.schedule_count:
        raise ScheduleNotFoundError(manager.owner, index, manager.schedule_count)
    return manager.schedules[index]


def require_beneficiary_match(schedule: VestingSchedule, beneficiary: Address) -> None:
    if schedule.beneficiary != beneficiary:
        raise InvalidBeneficiaryError(
            beneficiary,
            "does not match the schedule beneficiary",
            expected=schedule.beneficiary,
        )
