"""Tests for validation, authorization and model invariants."""

import pytest
from pydantic import ValidationError

from conftest import ISSUER, OTHER, T0
from vesting_ledger.core.exceptions import (
    AlreadyInitializedError,
    InvalidAddressError,
    InvalidBeneficiaryError,
    InvalidVestingParamsError,
    ManagerNotFoundError,
    NotOwnerError,
    ScheduleNotFoundError,
)
from vesting_ledger.core.models import Manager, VestingSchedule
from vesting_ledger.core.types import ScheduleState, is_null_address
from vesting_ledger.ledger import guard


class TestAddresses:
    """Tests for null address detection."""

    def test_null_addresses(self):
        """Test addresses treated as null."""
        for address in (None, "", "   ", "0x0", "0x0000", "0X00"):
            assert is_null_address(address), address

    def test_real_addresses(self):
        """Test addresses treated as real."""
        for address in ("0xa11ce", "0x01", "alice"):
            assert not is_null_address(address), address


class TestScheduleParams:
    """validate_schedule_params checks in a fixed order."""

    def test_valid_params(self):
        """Test that valid parameters pass."""
        guard.validate_schedule_params(OTHER, 1000, T0, 100, 1000)
        guard.validate_schedule_params(OTHER, 1, 0, 0, 0)

    def test_cliff_longer_than_duration(self):
        """Test rejection of a cliff longer than the duration."""
        with pytest.raises(InvalidVestingParamsError) as exc_info:
            guard.validate_schedule_params(OTHER, 1000, T0, 1001, 1000)
        assert exc_info.value.field == "cliff_duration"

    def test_zero_amount(self):
        """Test rejection of a zero amount."""
        with pytest.raises(InvalidVestingParamsError) as exc_info:
            guard.validate_schedule_params(OTHER, 0, T0, 0, 1000)
        assert exc_info.value.field == "total_amount"

    def test_null_beneficiary(self):
        """Test rejection of a null beneficiary."""
        with pytest.raises(InvalidBeneficiaryError):
            guard.validate_schedule_params("0x0", 1000, T0, 0, 1000)

    def test_non_string_beneficiary(self):
        """Test rejection of a beneficiary that is not a string."""
        with pytest.raises(InvalidBeneficiaryError):
            guard.validate_schedule_params(5, 1000, T0, 0, 1000)

    def test_cliff_checked_before_amount_and_beneficiary(self):
        """Test that the cliff check runs first."""
        with pytest.raises(InvalidVestingParamsError) as exc_info:
            guard.validate_schedule_params("", 0, T0, 10, 5)
        assert exc_info.value.field == "cliff_duration"

    def test_amount_checked_before_beneficiary(self):
        """Test that the amount check runs before the beneficiary check."""
        with pytest.raises(InvalidVestingParamsError):
            guard.validate_schedule_params("", 0, T0, 0, 5)

    @pytest.mark.parametrize(
        "amount,start,cliff,duration",
        [(-1, T0, 0, 10), (10, -5, 0, 10), (10, T0, 1.5, 10), (True, T0, 0, 10)],
    )
    def test_non_unsigned_integers_rejected(self, amount, start, cliff, duration):
        """Test rejection of negative, fractional and boolean values."""
        with pytest.raises(InvalidVestingParamsError):
            guard.validate_schedule_params(OTHER, amount, start, cliff, duration)


class TestOwnership:
    """Tests for manager and ownership checks."""

    def test_require_address(self):
        """Test rejection of null and non-string owner addresses."""
        guard.require_address(ISSUER, "owner")
        for address in ("0x0", "", None, 5):
            with pytest.raises(InvalidAddressError):
                guard.require_address(address, "owner")

    def test_require_manager(self):
        """Test manager lookup."""
        managers = {ISSUER: Manager(owner=ISSUER)}
        assert guard.require_manager(managers, ISSUER).owner == ISSUER
        with pytest.raises(ManagerNotFoundError):
            guard.require_manager(managers, OTHER)

    def test_require_uninitialized(self):
        """Test detection of an existing manager."""
        managers = {ISSUER: Manager(owner=ISSUER)}
        guard.require_uninitialized(managers, OTHER)
        with pytest.raises(AlreadyInitializedError):
            guard.require_uninitialized(managers, ISSUER)

    def test_require_owner(self):
        """Test the ownership check."""
        manager = Manager(owner=ISSUER)
        guard.require_owner(manager, ISSUER)
        with pytest.raises(NotOwnerError):
            guard.require_owner(manager, OTHER)


class TestScheduleLookup:
    """Tests for schedule lookup by index."""

    def test_index_bounds(self, sample_schedule):
        """Test schedule index bounds."""
        manager = Manager(owner=ISSUER).append(sample_schedule)

        assert guard.require_schedule(manager, 0) == sample_schedule
        for index in (-1, 1, 99):
            with pytest.raises(ScheduleNotFoundError):
                guard.require_schedule(manager, index)

    def test_beneficiary_match(self, sample_schedule):
        """Test the beneficiary match check."""
        guard.require_beneficiary_match(sample_schedule, ISSUER)
        with pytest.raises(InvalidBeneficiaryError) as exc_info:
            guard.require_beneficiary_match(sample_schedule, OTHER)
        assert exc_info.value.expected == ISSUER


class TestModelInvariants:
    """The models refuse states that break ledger invariants."""

    def test_schedule_rejects_cliff_beyond_duration(self):
        """Test model rejection of a cliff beyond the duration."""
        with pytest.raises(ValidationError):
            VestingSchedule(
                owner=ISSUER, beneficiary=OTHER, total_amount=10,
                start_time=T0, cliff_duration=11, total_duration=10,
            )

    def test_schedule_rejects_over_claim(self, sample_schedule):
        """Test that a claim cannot exceed the total."""
        with pytest.raises(ValueError):
            sample_schedule.with_claim(1001)

    def test_with_claim_completes_at_total(self, sample_schedule):
        """Test completion when the claimed total reaches the grant."""
        partial = sample_schedule.with_claim(400)
        assert partial.state == ScheduleState.ACTIVE
        assert partial.remaining_amount == 600

        done = partial.with_claim(600)
        assert done.state == ScheduleState.COMPLETED
        assert done.is_fully_claimed
        assert not done.is_active

    def test_schedule_is_frozen(self, sample_schedule):
        """Test that schedules are immutable."""
        with pytest.raises(ValidationError):
            sample_schedule.claimed_amount = 5

    def test_manager_append_is_copy_on_write(self, sample_schedule):
        """Test that appending returns a new manager."""
        empty = Manager(owner=ISSUER)
        one = empty.append(sample_schedule)

        assert empty.schedule_count == 0
        assert one.schedule_count == 1
        assert one.indices_for(ISSUER) == [0]
        assert one.indices_for(OTHER) == []
