"""Type definitions and enums for the vesting ledger."""

import re
from enum import Enum


class ScheduleState(str, Enum):
    """Lifecycle state of a vesting schedule."""

    ACTIVE = "active"         # Accruing and claimable
    PAUSED = "paused"         # Frozen by the manager owner
    COMPLETED = "completed"   # Fully claimed, terminal

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            self.ACTIVE: "Active",
            self.PAUSED: "Paused",
            self.COMPLETED: "Completed",
        }
        return names.get(self, self.value)


class EventKind(str, Enum):
    """Kinds of events appended to the ledger event log."""

    MANAGER_INITIALIZED = "manager_initialized"
    SCHEDULE_CREATED = "schedule_created"
    TOKENS_CLAIMED = "tokens_claimed"
    SCHEDULE_PAUSED = "schedule_paused"
    SCHEDULE_RESUMED = "schedule_resumed"


# Type aliases for common patterns
Address = str        # Account address, e.g. "0xa11ce"
TokenAmount = int    # Smallest token unit, never negative
Timestamp = int      # Unix timestamp in seconds
Duration = int       # Seconds

NULL_ADDRESS: Address = "0x0"

_ZERO_HEX = re.compile(r"^0x0+$", re.IGNORECASE)


def is_null_address(address: Address | None) -> bool:
    """Check whether an address is missing or the all-zero address."""
    if address is None:
        return True
    address = str(address).strip()
    return not address or bool(_ZERO_HEX.match(address))
