"""Output formatters for ledger data.

Provides two output formats:
- JSON: Machine-readable, complete data
- Table: Human-readable CLI output (rich)
"""

import json
import logging
from io import StringIO
from typing import Sequence

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from ..calculator.vesting import calc_vested_amount
from ..core.models import ClaimReceipt, VestingSchedule, VestingSnapshot
from ..core.types import ScheduleState, Timestamp

logger = logging.getLogger(__name__)

STATE_STYLES = {
    ScheduleState.ACTIVE: "green",
    ScheduleState.PAUSED: "yellow",
    ScheduleState.COMPLETED: "dim",
}


class JSONFormatter:
    """Formats models as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, data: BaseModel | Sequence[BaseModel]) -> str:
        """Format a model, or a list of models, as a JSON string."""
        if isinstance(data, BaseModel):
            payload = data.model_dump(mode="json")
        else:
            payload = [item.model_dump(mode="json") for item in data]
        return json.dumps(payload, indent=self.indent)

    def format_to_file(self, data: BaseModel | Sequence[BaseModel], filepath: str) -> None:
        """Write JSON to file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(data))


class TableFormatter:
    """Formats ledger data as rich tables for CLI output."""

    def __init__(self, width: int = 120):
        self.width = width

    def _render(self, *renderables) -> str:
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)
        for renderable in renderables:
            console.print(renderable)
        return output.getvalue()

    def format_schedules(
        self,
        owner: str,
        schedules: Sequence[VestingSchedule],
        now: Timestamp,
    ) -> str:
        """Table of a manager's schedules with claimable amounts at ``now``."""
        table = Table(title=f"Vesting Schedules: {owner}")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Beneficiary")
        table.add_column("Total", justify="right")
        table.add_column("Claimed", justify="right")
        table.add_column("Claimable", justify="right", style="green")
        table.add_column("Start", justify="right")
        table.add_column("Cliff", justify="right")
        table.add_column("Duration", justify="right")
        table.add_column("State")

        for index, schedule in enumerate(schedules):
            style = STATE_STYLES.get(schedule.state, "")
            table.add_row(
                str(index),
                schedule.beneficiary,
                f"{schedule.total_amount:,}",
                f"{schedule.claimed_amount:,}",
                f"{calc_vested_amount(schedule, now):,}",
                str(schedule.start_time),
                f"{schedule.cliff_duration}s",
                f"{schedule.total_duration}s",
                f"[{style}]{schedule.state.display_name}[/]" if style else schedule.state.display_name,
            )

        if not schedules:
            return self._render(table, "[dim]No schedules yet.[/]")
        return self._render(table)

    def format_snapshot(self, snapshot: VestingSnapshot) -> str:
        table = Table(title=f"Schedule {snapshot.owner}#{snapshot.index}", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Beneficiary", snapshot.beneficiary)
        table.add_row("Timestamp", str(snapshot.timestamp))
        table.add_row("Total", f"{snapshot.total_amount:,}")
        table.add_row("Vested", f"{snapshot.vested_amount:,} ({snapshot.vested_pct:.2f}%)")
        table.add_row("Claimed", f"{snapshot.claimed_amount:,}")
        table.add_row("Claimable", f"{snapshot.claimable_amount:,}")
        table.add_row("State", snapshot.state.display_name)

        notes = "\n".join(f"  - {note}" for note in snapshot.calculation_notes)
        return self._render(table, notes)

    def format_receipt(self, receipt: ClaimReceipt) -> str:
        table = Table(title=f"Claimed {receipt.amount:,} for {receipt.beneficiary}")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Amount", justify="right", style="green")
        table.add_column("Claimed to date", justify="right")
        table.add_column("State")
        for claim in receipt.claims:
            table.add_row(
                str(claim.index),
                f"{claim.amount:,}",
                f"{claim.claimed_amount:,}",
                claim.state.display_name,
            )
        return self._render(table)
