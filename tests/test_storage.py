"""Tests for JSON storage and configuration loading."""

import pytest

from conftest import ISSUER, T0
from vesting_ledger.core.config import LedgerConfig, reload_config
from vesting_ledger.core.exceptions import ConfigurationError, StorageError
from vesting_ledger.core.models import LedgerEvent, LedgerState
from vesting_ledger.core.types import EventKind, ScheduleState
from vesting_ledger.storage.json_store import JsonLinesEventSink, LedgerStore


class TestLedgerStore:
    """Tests for LedgerStore."""

    def test_load_missing_returns_none(self, tmp_path):
        """Test loading a missing state file."""
        store = LedgerStore(tmp_path / "state.json")
        assert store.load() is None
        assert store.load_or_empty() == LedgerState()
        assert not store.exists()

    def test_save_and_load(self, tmp_path, issuer_ledger, clock):
        """Test saving and reloading ledger state."""
        issuer_ledger.create_schedule(ISSUER, ISSUER, 1000, T0, 100, 1000)
        clock.set(T0 + 1000)
        issuer_ledger.claim(ISSUER)

        store = LedgerStore(tmp_path / "nested" / "state.json")
        path = store.save(issuer_ledger.export_state())
        assert path.exists()

        state = store.load()
        schedule = state.managers[ISSUER].schedules[0]
        assert schedule.claimed_amount == 1000
        assert schedule.state == ScheduleState.COMPLETED
        assert state.balances[ISSUER] == 1000

    def test_corrupt_file_raises(self, tmp_path):
        """Test that a corrupt state file raises StorageError."""
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            LedgerStore(path).load()

    def test_delete(self, tmp_path):
        """Test deleting the state file."""
        store = LedgerStore(tmp_path / "state.json")
        store.save(LedgerState())
        assert store.delete()
        assert not store.delete()


class TestJsonLinesEventSink:
    """Tests for the JSON-lines event log."""

    def test_append_and_read(self, tmp_path):
        """Test appending and reading events."""
        sink = JsonLinesEventSink(tmp_path / "events.jsonl")
        sink.emit(LedgerEvent(kind=EventKind.MANAGER_INITIALIZED, owner=ISSUER, timestamp=T0))
        sink.emit(
            LedgerEvent(
                kind=EventKind.TOKENS_CLAIMED, owner=ISSUER, beneficiary=ISSUER,
                amount=150, timestamp=T0 + 150,
            )
        )

        events = sink.read_all()
        assert [e.kind for e in events] == [EventKind.MANAGER_INITIALIZED, EventKind.TOKENS_CLAIMED]
        assert events[1].amount == 150

    def test_missing_log_is_empty(self, tmp_path):
        """Test reading a missing event log."""
        assert JsonLinesEventSink(tmp_path / "none.jsonl").read_all() == []

    def test_bad_line_raises(self, tmp_path):
        """Test that an invalid event line raises StorageError."""
        path = tmp_path / "events.jsonl"
        path.write_text('{"kind": "bogus"}\n', encoding="utf-8")
        with pytest.raises(StorageError):
            JsonLinesEventSink(path).read_all()


class TestLedgerConfig:
    """Tests for LedgerConfig loading."""

    def test_from_env(self, monkeypatch, tmp_path):
        """Test loading config from environment variables."""
        monkeypatch.setenv("VESTING_TREASURY_ADDRESS", "0xvault")
        monkeypatch.setenv("VESTING_STATE_FILE", str(tmp_path / "s.json"))

        config = LedgerConfig.from_env()
        assert config.treasury_address == "0xvault"
        assert config.state_file == tmp_path / "s.json"

    def test_yaml_overrides_env(self, monkeypatch, tmp_path):
        """Test that YAML values override environment values."""
        monkeypatch.setenv("VESTING_TREASURY_ADDRESS", "0xvault")
        config_path = tmp_path / "ledger.yaml"
        config_path.write_text("treasury_address: '0xescrow'\nevent_log: ev.jsonl\n", encoding="utf-8")

        config = reload_config(config_path)
        assert config.treasury_address == "0xescrow"
        assert str(config.event_log) == "ev.jsonl"

    def test_missing_yaml_uses_defaults(self, monkeypatch, tmp_path):
        """Test defaults when the YAML file is missing."""
        monkeypatch.delenv("VESTING_TREASURY_ADDRESS", raising=False)
        config = LedgerConfig.load(tmp_path / "absent.yaml")
        assert config.treasury_address == "0xtreasury"

    def test_invalid_yaml(self, tmp_path):
        """Test that invalid YAML raises ConfigurationError."""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("treasury_address: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            LedgerConfig.load(config_path)

    def test_unknown_keys(self, tmp_path):
        """Test that unknown config keys raise ConfigurationError."""
        config_path = tmp_path / "extra.yaml"
        config_path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            LedgerConfig.load(config_path)

    def test_null_treasury_rejected(self):
        """Test that a null treasury address is rejected."""
        with pytest.raises(ConfigurationError):
            LedgerConfig(treasury_address="0x0")
