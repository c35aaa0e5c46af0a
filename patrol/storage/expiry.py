"""
Patrol Storage — Expiring Entries
===================================
Maintenance helpers for the live allow / priority lists.

Live collection shape: {subjectId: [createdAt_ms, expiresAt_ms]}.
"indefinite" maps to INDEFINITE_EXPIRY, a far-future timestamp that
is still a plain non-negative integer, so such entries stay valid
wire values.
"""

from __future__ import annotations

import logging
from typing import Optional

from patrol.time.temporal import is_expired

logger = logging.getLogger("patrol.storage")


HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS

INDEFINITE_EXPIRY = 2 ** 53 - 1

EXPIRY_NONE = "none"
EXPIRY_INDEFINITE = "indefinite"

EXPIRY_DURATIONS_MS = {
    EXPIRY_NONE: 0,
    "1 hour": HOUR_MS,
    "1 day": DAY_MS,
    "1 week": WEEK_MS,
    "1 month": 4 * WEEK_MS,
    "3 months": 12 * WEEK_MS,
    "6 months": 24 * WEEK_MS,
    EXPIRY_INDEFINITE: None,
}

EXPIRY_CHOICES = tuple(EXPIRY_DURATIONS_MS)

LIST_NAMES = ("priorityLists", "allowLists")
CATEGORIES = ("users", "pages", "tags")


def expires_at(expiry: str, now_ms: int) -> int:
    """Expiry timestamp for an entry created at `now_ms`."""
    if expiry not in EXPIRY_DURATIONS_MS:
        raise ValueError(
            f"expiry '{expiry}' not valid. "
            f"Must be one of: {list(EXPIRY_CHOICES)}"
        )

    duration = EXPIRY_DURATIONS_MS[expiry]
    if duration is None:
        return INDEFINITE_EXPIRY
    return min(now_ms + duration, INDEFINITE_EXPIRY)


def add_entry(
    collection: dict,
    subject_id: str,
    expiry: str,
    now_ms: int,
) -> Optional[list[int]]:
    """
    Insert or refresh `subject_id` in a live collection.

    Expiry "none" means the subject is not stored at all (any
    existing entry is removed) and None is returned.
    """
    if not subject_id or not isinstance(subject_id, str):
        raise ValueError("subject_id must be a non-empty string.")

    if not isinstance(now_ms, int) or isinstance(now_ms, bool) or now_ms < 0:
        raise ValueError(f"now_ms must be int >= 0, got {now_ms!r}.")

    if expiry == EXPIRY_NONE:
        collection.pop(subject_id, None)
        return None

    entry = [now_ms, expires_at(expiry, now_ms)]
    collection[subject_id] = entry
    return entry


def purge_expired(document: dict, now_ms: int) -> list[tuple[str, str, str]]:
    """
    Remove every expired entry from a live document's lists.

    Returns the removed (list_name, category, subject_id) triples.
    """
    removed: list[tuple[str, str, str]] = []
    for list_name in LIST_NAMES:
        lists = document.get(list_name, {})
        for category in CATEGORIES:
            collection = lists.get(category, {})
            for subject_id, (_, expiry_ms) in list(collection.items()):
                if is_expired(expiry_ms, now_ms):
                    del collection[subject_id]
                    removed.append((list_name, category, subject_id))

    if removed:
        logger.debug(f"Purged {len(removed)} expired list entries")
    return removed
