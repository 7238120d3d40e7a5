"""Configuration management for the vesting ledger.

Loads settings from environment variables, optionally overridden by a YAML
file.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ConfigurationError
from .types import is_null_address

logger = logging.getLogger(__name__)

DEFAULT_TREASURY_ADDRESS = "0xtreasury"
DEFAULT_STATE_FILE = Path("data") / "ledger_state.json"
DEFAULT_EVENT_LOG = Path("data") / "ledger_events.jsonl"


@dataclass
class LedgerConfig:
    """Runtime settings for the ledger and its CLI."""

    # Account that funds claims on the asset ledger
    treasury_address: str = DEFAULT_TREASURY_ADDRESS

    # Persisted managers + balances
    state_file: Path = DEFAULT_STATE_FILE

    # Append-only event log (JSON lines)
    event_log: Path = DEFAULT_EVENT_LOG

    def __post_init__(self) -> None:
        self.state_file = Path(self.state_file)
        self.event_log = Path(self.event_log)
        if is_null_address(self.treasury_address):
            raise ConfigurationError("treasury_address", "must be a non-null address")

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Load configuration from environment variables."""
        return cls(
            treasury_address=os.getenv("VESTING_TREASURY_ADDRESS", DEFAULT_TREASURY_ADDRESS),
            state_file=Path(os.getenv("VESTING_STATE_FILE", str(DEFAULT_STATE_FILE))),
            event_log=Path(os.getenv("VESTING_EVENT_LOG", str(DEFAULT_EVENT_LOG))),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "LedgerConfig":
        """
        Load configuration from environment variables and a YAML file.

        Args:
            config_path: Optional path to a YAML file. Its keys override
                         values taken from the environment.

        Returns:
            LedgerConfig instance with loaded values
        """
        config = cls.from_env()
        if config_path is None:
            return config

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return config
        except yaml.YAMLError as e:
            raise ConfigurationError(str(config_path), f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(str(config_path), "top level must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(", ".join(sorted(unknown)), "unknown configuration keys")

        logger.info(f"Loaded ledger config from {config_path}")
        return replace(config, **data)


# Global config instance (lazy loaded)
_config: Optional[LedgerConfig] = None


def get_config() -> LedgerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = LedgerConfig.load()
    return _config


def reload_config(config_path: Optional[Path] = None) -> LedgerConfig:
    """Reload configuration from environment and an optional YAML file."""
    global _config
    _config = LedgerConfig.load(config_path)
    return _config
