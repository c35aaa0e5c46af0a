"""
Patrol Time — Public API
==========================
Explicit clock protocol and epoch-millisecond helpers.
Doctrine: NO datetime.now() inside storage logic.
"""

from patrol.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    now_ms,
    now_utc,
    set_default_clock,
    to_epoch_ms,
)
from patrol.time.temporal import (
    is_expired,
    ms_until_expiry,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "now_utc",
    "now_ms",
    "to_epoch_ms",
    "is_expired",
    "ms_until_expiry",
]
