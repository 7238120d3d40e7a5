"""CLI entry point for the Token Vesting Ledger.

Usage:
    vesting-ledger init --caller 0xissuer
    vesting-ledger create --caller 0xissuer --beneficiary 0xbob --amount 1000 \\
        --start 1700000000 --cliff 100 --duration 1000
    vesting-ledger claim --caller 0xbob --owner 0xissuer --now 1700000150
    vesting-ledger list --owner 0xissuer --output json
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..core.config import LedgerConfig, reload_config
from ..core.exceptions import VestingLedgerError
from ..ledger.collaborators import Clock, FixedClock, InMemoryAssetLedger, SystemClock
from ..ledger.engine import VestingLedger
from ..output.formatters import JSONFormatter, TableFormatter
from ..storage.json_store import JsonLinesEventSink, LedgerStore

# Initialize app
app = typer.Typer(
    name="vesting-ledger",
    help="Token Vesting Ledger: cliff-then-linear vesting schedules and claims",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

StateOption = typer.Option(None, "--state", help="Path to the ledger state file")
ConfigOption = typer.Option(None, "--config", help="Path to a YAML config file")
NowOption = typer.Option(None, "--now", help="Override the current Unix timestamp")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
    )


class LedgerSession:
    """A ledger loaded from disk, saved back after a successful command."""

    def __init__(
        self,
        state: Optional[Path],
        config_path: Optional[Path],
        now: Optional[int],
    ):
        self.config: LedgerConfig = reload_config(config_path)
        state_file = state or self.config.state_file
        event_log = (
            state.with_name(f"{state.stem}_events.jsonl") if state else self.config.event_log
        )

        self.store = LedgerStore(state_file)
        self.events = JsonLinesEventSink(event_log)
        clock: Clock = FixedClock(now) if now is not None else SystemClock()
        self.ledger = VestingLedger.from_state(
            self.store.load_or_empty(),
            clock=clock,
            event_sink=self.events,
            treasury=self.config.treasury_address,
        )

    @property
    def assets(self) -> InMemoryAssetLedger:
        return self.ledger.assets

    def save(self) -> None:
        self.store.save(self.ledger.export_state())


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/]")
    raise typer.Exit(1)


@app.command()
def init(
    caller: str = typer.Option(..., "--caller", help="Address creating its vesting manager"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Initialize a vesting manager for an address."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        session.ledger.initialize(caller)
        session.save()
    except VestingLedgerError as e:
        _fail(e)
    console.print(f"[green]Initialized vesting manager for {caller}[/]")


@app.command()
def create(
    caller: str = typer.Option(..., "--caller", help="Manager owner creating the schedule"),
    beneficiary: str = typer.Option(..., "--beneficiary", "-b", help="Address entitled to claim"),
    amount: int = typer.Option(..., "--amount", "-a", help="Total grant size"),
    start: int = typer.Option(..., "--start", help="Vesting start (Unix seconds)"),
    cliff: int = typer.Option(0, "--cliff", help="Cliff duration in seconds"),
    duration: int = typer.Option(..., "--duration", help="Total vesting duration in seconds"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Manager owner, defaults to caller"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Create a vesting schedule."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        index = session.ledger.create_schedule(
            owner or caller, beneficiary, amount, start, cliff, duration, caller=caller
        )
        session.save()
    except VestingLedgerError as e:
        _fail(e)
    console.print(f"[green]Created schedule #{index} for {beneficiary}[/]")


@app.command()
def claim(
    caller: str = typer.Option(..., "--caller", help="Beneficiary claiming vested tokens"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Manager owner, defaults to caller"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Claim every vested token owed to the caller."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        receipt = session.ledger.claim(caller, owner=owner)
        session.save()
    except VestingLedgerError as e:
        _fail(e)

    if output.lower() == "json":
        print(JSONFormatter().format(receipt))
    else:
        console.print(TableFormatter().format_receipt(receipt))


def _toggle(
    action: str,
    owner: str,
    beneficiary: str,
    index: int,
    caller: Optional[str],
    state: Optional[Path],
    config: Optional[Path],
    now: Optional[int],
) -> None:
    try:
        session = LedgerSession(state, config, now)
        operation = session.ledger.pause if action == "pause" else session.ledger.resume
        schedule = operation(owner, beneficiary, index, caller=caller)
        session.save()
    except VestingLedgerError as e:
        _fail(e)
    console.print(f"Schedule #{index} is [bold]{schedule.state.display_name}[/]")


@app.command()
def pause(
    owner: str = typer.Option(..., "--owner", help="Manager owner"),
    beneficiary: str = typer.Option(..., "--beneficiary", "-b", help="Schedule beneficiary"),
    index: int = typer.Option(..., "--index", "-i", help="Schedule index"),
    caller: Optional[str] = typer.Option(None, "--caller", help="Caller, defaults to owner"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Pause a vesting schedule."""
    setup_logging(verbose)
    _toggle("pause", owner, beneficiary, index, caller, state, config, now)


@app.command()
def resume(
    owner: str = typer.Option(..., "--owner", help="Manager owner"),
    beneficiary: str = typer.Option(..., "--beneficiary", "-b", help="Schedule beneficiary"),
    index: int = typer.Option(..., "--index", "-i", help="Schedule index"),
    caller: Optional[str] = typer.Option(None, "--caller", help="Caller, defaults to owner"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Resume a paused vesting schedule."""
    setup_logging(verbose)
    _toggle("resume", owner, beneficiary, index, caller, state, config, now)


@app.command(name="list")
def list_schedules(
    owner: str = typer.Option(..., "--owner", help="Manager owner"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """List every schedule in a manager."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        schedules = session.ledger.list_schedules(owner)
    except VestingLedgerError as e:
        _fail(e)

    if output.lower() == "json":
        print(JSONFormatter().format(schedules))
    else:
        console.print(
            TableFormatter().format_schedules(owner, schedules, session.ledger.clock.now())
        )


@app.command()
def show(
    owner: str = typer.Option(..., "--owner", help="Manager owner"),
    index: int = typer.Option(..., "--index", "-i", help="Schedule index"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show the vesting arithmetic for one schedule."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        snapshot = session.ledger.snapshot(owner, index)
    except VestingLedgerError as e:
        _fail(e)
    console.print(TableFormatter().format_snapshot(snapshot))


@app.command()
def claimable(
    beneficiary: str = typer.Option(..., "--beneficiary", "-b", help="Beneficiary address"),
    owner: str = typer.Option(..., "--owner", help="Manager owner"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    now: Optional[int] = NowOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the amount a beneficiary could claim right now."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, now)
        amount = session.ledger.claimable_amount(beneficiary, owner)
    except VestingLedgerError as e:
        _fail(e)
    print(amount)


@app.command()
def fund(
    amount: int = typer.Option(..., "--amount", "-a", help="Tokens to mint"),
    account: Optional[str] = typer.Option(
        None, "--account", help="Account to credit, defaults to the treasury"
    ),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Mint tokens on the local asset ledger (treasury by default)."""
    setup_logging(verbose)
    try:
        session = LedgerSession(state, config, None)
        target = account or session.ledger.treasury
        session.assets.mint(target, amount)
        session.save()
    except (ValueError, VestingLedgerError) as e:
        _fail(e)
    console.print(f"[green]Minted {amount:,} to {target}[/]")


@app.command()
def balance(
    account: str = typer.Argument(..., help="Account address"),
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print an account balance on the local asset ledger."""
    try:
        session = LedgerSession(state, config, None)
    except VestingLedgerError as e:
        _fail(e)
    print(session.assets.balance_of(account))


@app.command()
def events(
    state: Optional[Path] = StateOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print the event log as JSON lines."""
    try:
        session = LedgerSession(state, config, None)
        recorded = session.events.read_all()
    except VestingLedgerError as e:
        _fail(e)
    for event in recorded:
        print(event.model_dump_json(exclude_none=True))


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"Token Vesting Ledger v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
