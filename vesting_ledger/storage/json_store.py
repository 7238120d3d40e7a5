"""
JSON-based storage for ledger state.

Simple, file-based storage: managers and asset balances live in one JSON
document, events are appended to a JSON-lines log.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..core.exceptions import StorageError
from ..core.models import LedgerEvent, LedgerState
from ..ledger.collaborators import EventSink

logger = logging.getLogger(__name__)


class LedgerStore:
    """
    JSON-based storage for a ledger state snapshot.

    Usage:
        store = LedgerStore(Path("data/ledger_state.json"))

        # Save state
        store.save(ledger.export_state())

        # Load state
        state = store.load()
    """

    def __init__(self, state_file: Path):
        """Initialize store with the state file path."""
        self.state_file = Path(state_file)

    def save(self, state: LedgerState) -> Path:
        """
        Save a state snapshot to the JSON file.

        Returns the path to the saved file.
        """
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.state_file.with_suffix(self.state_file.suffix + ".tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(state.model_dump_json(indent=2))
        tmp_path.replace(self.state_file)

        logger.debug(f"Saved ledger state to {self.state_file}")
        return self.state_file

    def load(self) -> Optional[LedgerState]:
        """
        Load the state snapshot.

        Returns None if the file doesn't exist.
        """
        if not self.state_file.exists():
            return None

        with open(self.state_file, "r", encoding="utf-8") as f:
            raw = f.read()

        try:
            return LedgerState.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(str(self.state_file), f"invalid ledger state: {e}") from e

    def load_or_empty(self) -> LedgerState:
        state = self.load()
        return state if state is not None else LedgerState()

    def exists(self) -> bool:
        """Check if a state file exists."""
        return self.state_file.exists()

    def delete(self) -> bool:
        """Delete the state file. Returns True if deleted."""
        if self.state_file.exists():
            self.state_file.unlink()
            return True
        return False


class JsonLinesEventSink(EventSink):
    """Event sink appending one JSON document per line."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def emit(self, event: LedgerEvent) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(event.model_dump_json() + "\n")

    def read_all(self) -> List[LedgerEvent]:
        """Load every event recorded so far, oldest first."""
        if not self.path.exists():
            return []

        events = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(LedgerEvent.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise StorageError(str(self.path), f"bad event on line {line_no}: {e}") from e
        return events
