"""
Patrol Time — Temporal Helpers
================================
Pure functions over epoch-millisecond timestamps.
All functions take explicit arguments — no hidden clock access.
"""

from __future__ import annotations

from typing import Optional


def is_expired(expires_at_ms: int, now_ms: int) -> bool:
    """
    Check if something expiring at `expires_at_ms` has expired.

    An entry expires at its expiry instant (now >= expiry).
    """
    return now_ms >= expires_at_ms


def ms_until_expiry(expires_at_ms: int, now_ms: int) -> Optional[int]:
    """
    Return milliseconds remaining before expiry, or None if already expired.
    """
    remaining = expires_at_ms - now_ms
    return remaining if remaining > 0 else None
