"""
Patrol Storage — Operation Log
================================
Append-only, structured record of one store operation.

Every repair, migration step and recovery the store performs is
recorded here so the host can decide whether to surface a
diagnostic banner. `expected` separates routine events (a normal
upgrade step, a deprecated field being dropped) from anomalies
(a malformed field being repaired).

Callers only ever see an immutable snapshot (a tuple of frozen
LogEntry values).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from patrol.time.clock import Clock, get_default_clock

logger = logging.getLogger("patrol.storage")


SEVERITY_INFO = "info"
SEVERITY_WARN = "warn"
SEVERITY_ERROR = "error"
SEVERITY_DEV_ERROR = "devError"

VALID_SEVERITIES = frozenset({
    SEVERITY_INFO,
    SEVERITY_WARN,
    SEVERITY_ERROR,
    SEVERITY_DEV_ERROR,
})

_LOGGING_LEVELS = {
    SEVERITY_INFO: logging.INFO,
    SEVERITY_WARN: logging.WARNING,
    SEVERITY_ERROR: logging.ERROR,
    SEVERITY_DEV_ERROR: logging.CRITICAL,
}


@dataclass(frozen=True)
class LogEntry:
    severity: str
    timestamp: str
    message: str
    expected: bool = False

    def __post_init__(self):
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(
                f"severity '{self.severity}' not valid. "
                f"Must be one of: {sorted(VALID_SEVERITIES)}"
            )

        if not isinstance(self.message, str):
            raise ValueError("message must be a string.")

        if not isinstance(self.expected, bool):
            raise ValueError("expected must be a bool.")

    @property
    def is_anomaly(self) -> bool:
        return not self.expected and self.severity != SEVERITY_INFO

    def to_dict(self) -> dict:
        return {
            "type": self.severity,
            "timestamp": self.timestamp,
            "message": self.message,
            "expected": self.expected,
        }


class StorageLog:
    """
    Mutable builder for one operation's entries.

    Timestamps come from the injected clock. With `echo=True`
    each entry is mirrored to the "patrol.storage" logger as
    it is recorded.
    """

    def __init__(self, clock: Optional[Clock] = None, echo: bool = False):
        self._clock = clock or get_default_clock()
        self._echo = echo
        self._entries: list[LogEntry] = []

    def record(self, severity: str, message: str, expected: bool = False) -> LogEntry:
        entry = LogEntry(
            severity=severity,
            timestamp=self._clock.now_utc().isoformat(),
            message=message,
            expected=expected,
        )
        self._entries.append(entry)
        if self._echo:
            logger.log(_LOGGING_LEVELS[severity], f"[{severity}] {message}")
        return entry

    def info(self, message: str, expected: bool = True) -> LogEntry:
        return self.record(SEVERITY_INFO, message, expected)

    def warn(self, message: str, expected: bool = False) -> LogEntry:
        return self.record(SEVERITY_WARN, message, expected)

    def error(self, message: str, expected: bool = False) -> LogEntry:
        return self.record(SEVERITY_ERROR, message, expected)

    def dev_error(self, message: str, expected: bool = False) -> LogEntry:
        return self.record(SEVERITY_DEV_ERROR, message, expected)

    # ── Snapshot ──────────────────────────────────────────────

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)

    def severity_counts(self) -> dict[str, int]:
        return severity_counts(self._entries)

    def all_expected(self) -> bool:
        return all_expected(self._entries)

    def has_anomalies(self) -> bool:
        return any(entry.is_anomaly for entry in self._entries)


# ══════════════════════════════════════════════════════════════
# SNAPSHOT HELPERS
# ══════════════════════════════════════════════════════════════

def severity_counts(entries: Iterable[LogEntry]) -> dict[str, int]:
    counts = {severity: 0 for severity in sorted(VALID_SEVERITIES)}
    for entry in entries:
        counts[entry.severity] += 1
    return counts


def all_expected(entries: Iterable[LogEntry]) -> bool:
    return all(entry.expected for entry in entries)


def print_log(
    entries: Union[StorageLog, Iterable[LogEntry]],
    label: str,
) -> None:
    """
    Write a log snapshot to the "patrol.storage" logger.

    A header line states whether every entry was expected, followed
    by one line per entry at the logging level matching its severity.
    """
    snapshot = tuple(entries)
    if all_expected(snapshot):
        logger.info(f"{label}: {len(snapshot)} entries, all expected")
    else:
        unexpected = sum(1 for entry in snapshot if not entry.expected)
        logger.warning(
            f"{label}: {len(snapshot)} entries, {unexpected} unexpected"
        )

    for entry in snapshot:
        marker = "" if entry.expected else " (unexpected)"
        logger.log(
            _LOGGING_LEVELS[entry.severity],
            f"  {entry.timestamp} [{entry.severity}]{marker} {entry.message}",
        )
