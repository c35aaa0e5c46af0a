"""
Patrol Time — Explicit Clock Protocol
=======================================
Doctrine: NO datetime.now() inside storage logic.
Log timestamps and expiring-entry timestamps come from an
injected Clock, so every store operation is reproducible in tests.

Stored timestamps are integer epoch milliseconds (the wire format
shared with the browser client); log timestamps are ISO-8601 UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp.

    Usage:
        clock = FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert clock.now_utc().year == 2025
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float) -> None:
        """Advance the fixed time (useful for expiry scenarios)."""
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


# ══════════════════════════════════════════════════════════════
# EPOCH MILLISECONDS
# ══════════════════════════════════════════════════════════════

def to_epoch_ms(dt: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds."""
    if dt.tzinfo is None:
        raise ValueError("to_epoch_ms requires timezone-aware datetime.")
    return int(dt.timestamp() * 1000)


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    """Get the current default clock."""
    return _default_clock


def now_utc() -> datetime:
    """Convenience: get current UTC time from default clock."""
    return _default_clock.now_utc()


def now_ms() -> int:
    """Convenience: current epoch milliseconds from default clock."""
    return to_epoch_ms(_default_clock.now_utc())
