"""
Patrol Config — Public API
============================
Engine settings resolved from the environment.
"""

from patrol.config.settings import (
    StorageSettings,
    get_storage_settings,
)

__all__ = [
    "StorageSettings",
    "get_storage_settings",
]
