"""Core module - data models, types, and exceptions."""

from .models import (
    VestingSchedule,
    Manager,
    LedgerEvent,
    ScheduleClaim,
    ClaimReceipt,
    VestingSnapshot,
    LedgerState,
)
from .types import (
    ScheduleState,
    EventKind,
    NULL_ADDRESS,
    is_null_address,
)
from .exceptions import (
    VestingLedgerError,
    ManagerNotFoundError,
    AlreadyInitializedError,
    InvalidVestingParamsError,
    InvalidAddressError,
    InvalidBeneficiaryError,
    NotOwnerError,
    ScheduleNotFoundError,
    NoClaimableAmountError,
    InsufficientBalanceError,
    ConfigurationError,
    StorageError,
)

__all__ = [
    # Models
    "VestingSchedule",
    "Manager",
    "LedgerEvent",
    "ScheduleClaim",
    "ClaimReceipt",
    "VestingSnapshot",
    "LedgerState",
    # Types
    "ScheduleState",
    "EventKind",
    "NULL_ADDRESS",
    "is_null_address",
    # Exceptions
    "VestingLedgerError",
    "ManagerNotFoundError",
    "AlreadyInitializedError",
    "InvalidVestingParamsError",
    "InvalidAddressError",
    "InvalidBeneficiaryError",
    "NotOwnerError",
    "ScheduleNotFoundError",
    "NoClaimableAmountError",
    "InsufficientBalanceError",
    "ConfigurationError",
    "StorageError",
]
