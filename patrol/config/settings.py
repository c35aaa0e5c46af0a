"""
Patrol Config — Storage Engine Settings
=========================================
Environment-driven knobs for the storage engine.

Doctrine: the engine never reads the environment mid-operation.
Settings are resolved once (get_storage_settings) and handed to
the store as an immutable value.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


# ── Environment defaults ──────────────────────────────────────
# Mirror every StorageLog entry to the "patrol.storage" logger.
ECHO_LOGS = os.getenv("PATROL_STORAGE_ECHO_LOGS", "false").lower() == "true"

# Deepest conditional nesting kept by the control-script sanitizer.
MAX_ACTION_DEPTH = int(os.getenv("PATROL_STORAGE_MAX_ACTION_DEPTH", "32"))

# Largest portable text accepted by decode(); longer input is treated
# as malformed.
MAX_TEXT_LENGTH = int(os.getenv("PATROL_STORAGE_MAX_TEXT_LENGTH", "4194304"))


# ══════════════════════════════════════════════════════════════
# STORAGE SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StorageSettings:
    """Immutable engine configuration."""

    echo_logs: bool = False
    max_action_depth: int = 32
    max_text_length: int = 4194304

    def __post_init__(self) -> None:
        if not isinstance(self.echo_logs, bool):
            raise ValueError("echo_logs must be a bool.")

        if (
            not isinstance(self.max_action_depth, int)
            or isinstance(self.max_action_depth, bool)
            or self.max_action_depth < 1
        ):
            raise ValueError(
                f"max_action_depth must be int >= 1, got {self.max_action_depth}."
            )

        if (
            not isinstance(self.max_text_length, int)
            or isinstance(self.max_text_length, bool)
            or self.max_text_length < 4
        ):
            raise ValueError(
                f"max_text_length must be int >= 4, got {self.max_text_length}."
            )


def get_storage_settings() -> StorageSettings:
    """Build settings from the environment defaults above."""
    return StorageSettings(
        echo_logs=ECHO_LOGS,
        max_action_depth=MAX_ACTION_DEPTH,
        max_text_length=MAX_TEXT_LENGTH,
    )
