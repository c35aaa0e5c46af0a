"""
Tests for patrol.storage.log — StorageLog, LogEntry, print_log.
"""

import logging
from datetime import datetime, timezone

import pytest

from patrol.storage.log import (
    LogEntry,
    StorageLog,
    all_expected,
    print_log,
    severity_counts,
)
from patrol.time import FixedClock


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_log(echo=False) -> StorageLog:
    return StorageLog(clock=FixedClock(NOW), echo=echo)


# ── LogEntry ─────────────────────────────────────────────────

class TestLogEntry:
    def test_rejects_unknown_severity(self):
        with pytest.raises(ValueError, match="not valid"):
            LogEntry(severity="fatal", timestamp=NOW.isoformat(), message="x")

    def test_rejects_non_bool_expected(self):
        with pytest.raises(ValueError, match="expected"):
            LogEntry(severity="warn", timestamp=NOW.isoformat(), message="x", expected="yes")

    def test_frozen(self):
        entry = LogEntry(severity="warn", timestamp=NOW.isoformat(), message="x")
        with pytest.raises(AttributeError):
            entry.message = "y"

    def test_to_dict(self):
        entry = LogEntry(severity="devError", timestamp=NOW.isoformat(), message="boom")
        assert entry.to_dict() == {
            "type": "devError",
            "timestamp": NOW.isoformat(),
            "message": "boom",
            "expected": False,
        }

    @pytest.mark.parametrize(
        "severity, expected, anomaly",
        [
            ("info", False, False),
            ("info", True, False),
            ("warn", True, False),
            ("warn", False, True),
            ("error", False, True),
            ("devError", False, True),
        ],
    )
    def test_is_anomaly(self, severity, expected, anomaly):
        entry = LogEntry(severity, NOW.isoformat(), "m", expected)
        assert entry.is_anomaly is anomaly


# ── StorageLog ───────────────────────────────────────────────

class TestStorageLog:
    def test_timestamps_come_from_clock(self):
        log = make_log()
        log.warn("something")
        assert log.entries[0].timestamp == NOW.isoformat()

    def test_default_expected_flags(self):
        log = make_log()
        log.info("routine")
        log.warn("repaired")
        assert log.entries[0].expected is True
        assert log.entries[1].expected is False

    def test_snapshot_is_immutable_tuple(self):
        log = make_log()
        log.info("first")
        snapshot = log.entries
        log.warn("second")
        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert len(log.entries) == 2

    def test_severity_counts(self):
        log = make_log()
        log.info("a")
        log.warn("b")
        log.warn("c")
        log.dev_error("d")
        assert log.severity_counts() == {
            "devError": 1,
            "error": 0,
            "info": 1,
            "warn": 2,
        }

    def test_expected_only_has_no_anomalies(self):
        log = make_log()
        log.info("upgrade step")
        log.warn("deprecated field", expected=True)
        assert log.all_expected()
        assert not log.has_anomalies()

    def test_unexpected_warn_is_anomaly(self):
        log = make_log()
        log.info("upgrade step")
        log.warn("field repaired")
        assert not log.all_expected()
        assert log.has_anomalies()

    def test_empty_log_is_clean(self):
        log = make_log()
        assert log.all_expected()
        assert not log.has_anomalies()
        assert len(log) == 0

    def test_echo_mirrors_to_logger(self, caplog):
        caplog.set_level(logging.DEBUG, logger="patrol.storage")
        log = make_log(echo=True)
        log.warn("Removing unexpected key [ a -> b ]")
        assert "Removing unexpected key [ a -> b ]" in caplog.text

    def test_no_echo_by_default(self, caplog):
        caplog.set_level(logging.DEBUG, logger="patrol.storage")
        log = make_log()
        log.warn("quiet entry")
        assert "quiet entry" not in caplog.text


# ── Snapshot helpers ─────────────────────────────────────────

def test_helpers_accept_snapshots():
    log = make_log()
    log.info("a")
    log.error("b")
    snapshot = log.entries
    assert severity_counts(snapshot)["error"] == 1
    assert not all_expected(snapshot)


class TestPrintLog:
    def test_header_when_all_expected(self, caplog):
        caplog.set_level(logging.DEBUG, logger="patrol.storage")
        log = make_log()
        log.info("loaded")
        print_log(log, "load")
        assert "load: 1 entries, all expected" in caplog.text
        assert "[info] loaded" in caplog.text

    def test_header_counts_unexpected(self, caplog):
        caplog.set_level(logging.DEBUG, logger="patrol.storage")
        log = make_log()
        log.info("loaded")
        log.warn("repaired one")
        log.error("repaired two")
        print_log(log.entries, "import")
        assert "import: 3 entries, 2 unexpected" in caplog.text
        assert "(unexpected) repaired one" in caplog.text

    def test_entry_levels_follow_severity(self, caplog):
        caplog.set_level(logging.DEBUG, logger="patrol.storage")
        log = make_log()
        log.warn("w")
        log.dev_error("d")
        print_log(log, "x")
        levels = [record.levelno for record in caplog.records]
        assert logging.WARNING in levels
        assert logging.CRITICAL in levels
