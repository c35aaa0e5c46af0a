"""
Patrol — Settings Storage
===========================
Versioned persistence for the patrol client's user configuration.

Sub-packages:
- patrol.storage  — schema versions, validation, wire/live codecs, store
- patrol.catalog  — identifiers the store validates against
- patrol.config   — engine settings
- patrol.time     — injectable clock
"""

__version__ = "1.0.0"
