"""
Patrol Storage — Schema Versions
==================================
One object per released schema generation.
"""

from patrol.storage.versions.base import VERSION_KEY, SchemaVersion
from patrol.storage.versions.v0 import Version0
from patrol.storage.versions.v1 import Version1

__all__ = [
    "VERSION_KEY",
    "SchemaVersion",
    "Version0",
    "Version1",
]
