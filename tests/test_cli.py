"""Tests for the typer command-line interface."""

import pytest
from typer.testing import CliRunner

from conftest import ISSUER, T0
from vesting_ledger.cli.main import app

runner = CliRunner()


@pytest.fixture
def state_args(tmp_path, monkeypatch):
    """Point every command at a throwaway state file."""
    monkeypatch.delenv("VESTING_TREASURY_ADDRESS", raising=False)
    return ["--state", str(tmp_path / "state.json")]


def invoke(*args: str):
    return runner.invoke(app, list(args))


@pytest.fixture
def funded(state_args):
    """State with ISSUER's manager, a funded treasury and one schedule."""
    assert invoke("init", "--caller", ISSUER, "--now", str(T0), *state_args).exit_code == 0
    assert invoke("fund", "--amount", "5000", *state_args).exit_code == 0
    result = invoke(
        "create", "--caller", ISSUER, "--beneficiary", ISSUER, "--amount", "1000",
        "--start", str(T0), "--cliff", "100", "--duration", "1000",
        "--now", str(T0), *state_args,
    )
    assert result.exit_code == 0, result.output
    assert "schedule #0" in result.output
    return state_args


def test_claim_flow(funded):
    """Test claimable, claim, balance and an empty re-claim from the CLI."""
    result = invoke("claimable", "-b", ISSUER, "--owner", ISSUER, "--now", str(T0 + 50), *funded)
    assert result.exit_code == 0
    assert result.output.strip() == "0"

    result = invoke("claimable", "-b", ISSUER, "--owner", ISSUER, "--now", str(T0 + 150), *funded)
    assert result.output.strip() == "150"

    result = invoke("claim", "--caller", ISSUER, "--output", "json", "--now", str(T0 + 150), *funded)
    assert result.exit_code == 0, result.output
    assert '"amount": 150' in result.output

    result = invoke("balance", ISSUER, *funded)
    assert result.output.strip() == "150"

    result = invoke("claim", "--caller", ISSUER, "--now", str(T0 + 150), *funded)
    assert result.exit_code == 1
    assert "Nothing claimable" in result.output


def test_pause_and_list(funded):
    """Test pause, list and resume from the CLI."""
    result = invoke("pause", "--owner", ISSUER, "-b", ISSUER, "--index", "0", *funded)
    assert result.exit_code == 0, result.output
    assert "Paused" in result.output

    result = invoke("list", "--owner", ISSUER, "--output", "json", "--now", str(T0 + 500), *funded)
    assert result.exit_code == 0
    assert '"state": "paused"' in result.output

    result = invoke("resume", "--owner", ISSUER, "-b", ISSUER, "--index", "0", *funded)
    assert "Active" in result.output


def test_events_are_logged(funded):
    """Test that the CLI records events."""
    invoke("claim", "--caller", ISSUER, "--now", str(T0 + 400), *funded)

    result = invoke("events", *funded)
    assert result.exit_code == 0
    assert "manager_initialized" in result.output
    assert "schedule_created" in result.output
    assert "tokens_claimed" in result.output


def test_errors_exit_nonzero(funded):
    """Test that ledger errors exit with status 1."""
    result = invoke("init", "--caller", ISSUER, *funded)
    assert result.exit_code == 1
    assert "already initialized" in result.output

    result = invoke("list", "--owner", "0xnobody", *funded)
    assert result.exit_code == 1

    result = invoke(
        "create", "--caller", ISSUER, "--beneficiary", ISSUER, "--amount", "0",
        "--start", str(T0), "--duration", "10", *funded,
    )
    assert result.exit_code == 1
    assert "total_amount" in result.output


def test_version():
    """Test the version command."""
    result = invoke("version")
    assert result.exit_code == 0
    assert "Token Vesting Ledger" in result.output
