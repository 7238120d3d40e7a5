"""Custom exceptions for the vesting ledger.

Every condition is fatal to the enclosing operation; nothing here is
recovered locally.
"""


class VestingLedgerError(Exception):
    """Base exception for all vesting ledger errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ManagerNotFoundError(VestingLedgerError):
    """Raised when an operation addresses a manager that does not exist."""

    def __init__(self, owner: str):
        super().__init__(f"No vesting manager for {owner}", {"owner": owner})
        self.owner = owner


class AlreadyInitializedError(VestingLedgerError):
    """Raised when an owner tries to initialize a second manager."""

    def __init__(self, owner: str):
        super().__init__(f"Vesting manager already initialized for {owner}", {"owner": owner})
        self.owner = owner


class InvalidVestingParamsError(VestingLedgerError):
    """Raised when schedule parameters are inconsistent."""

    def __init__(self, field: str, value: object, reason: str):
        message = f"Invalid vesting parameter {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class InvalidAddressError(VestingLedgerError):
    """Raised when an account address is missing, null or not a string."""

    def __init__(self, address: object, role: str):
        super().__init__(f"Invalid {role} address {address!r}", {"address": address, "role": role})
        self.address = address
        self.role = role


class InvalidBeneficiaryError(VestingLedgerError):
    """Raised for a null beneficiary or a beneficiary mismatch."""

    def __init__(self, beneficiary: str | None, reason: str, expected: str | None = None):
        message = f"Invalid beneficiary {beneficiary!r}: {reason}"
        super().__init__(
            message,
            {"beneficiary": beneficiary, "expected": expected, "reason": reason},
        )
        self.beneficiary = beneficiary
        self.expected = expected


class NotOwnerError(VestingLedgerError):
    """Raised when the caller does not own the addressed manager."""

    def __init__(self, caller: str, owner: str):
        super().__init__(
            f"{caller} is not the owner of the vesting manager {owner}",
            {"caller": caller, "owner": owner},
        )
        self.caller = caller
        self.owner = owner


class ScheduleNotFoundError(VestingLedgerError):
    """Raised when a schedule index is out of bounds."""

    def __init__(self, owner: str, index: int, count: int):
        super().__init__(
            f"Schedule #{index} not found for {owner} ({count} schedules)",
            {"owner": owner, "index": index, "count": count},
        )
        self.owner = owner
        self.index = index
        self.count = count


class NoClaimableAmountError(VestingLedgerError):
    """Raised when a claim finds nothing to release."""

    def __init__(self, beneficiary: str, owner: str, timestamp: int):
        super().__init__(
            f"Nothing claimable for {beneficiary} from {owner} at {timestamp}",
            {"beneficiary": beneficiary, "owner": owner, "timestamp": timestamp},
        )
        self.beneficiary = beneficiary
        self.owner = owner
        self.timestamp = timestamp


class InsufficientBalanceError(VestingLedgerError):
    """Raised by the asset ledger when a withdrawal exceeds the balance."""

    def __init__(self, account: str, requested: int, available: int):
        super().__init__(
            f"Insufficient balance in {account}: requested {requested}, available {available}",
            {"account": account, "requested": requested, "available": available},
        )
        self.account = account
        self.requested = requested
        self.available = available


class ConfigurationError(VestingLedgerError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class StorageError(VestingLedgerError):
    """Raised when persisted ledger state cannot be read or written."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Storage error [{path}]: {message}", {"path": path})
        self.path = path
