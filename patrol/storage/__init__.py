"""
Patrol Storage — Public API
=============================
Versioned settings store: migration, validation / repair and
wire ↔ live conversion of the persisted configuration document.
"""

from patrol.storage.chain import VersionChain
from patrol.storage.codecs import (
    ControlScriptCodec,
    ExpiringEntryCodec,
    StringSetCodec,
)
from patrol.storage.context import MISSING, ValidationContext, format_path
from patrol.storage.errors import (
    CodecError,
    InvalidUpgradeAttempt,
    MissingUpgradePath,
    StorageError,
    TransportDecodeError,
    VersionTagMismatch,
)
from patrol.storage.expiry import (
    EXPIRY_CHOICES,
    INDEFINITE_EXPIRY,
    add_entry,
    expires_at,
    purge_expired,
)
from patrol.storage.log import (
    SEVERITY_DEV_ERROR,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARN,
    LogEntry,
    StorageLog,
    all_expected,
    print_log,
    severity_counts,
)
from patrol.storage.scripts import (
    Conditional,
    ControlScript,
    Invocation,
    ScriptSanitizer,
)
from patrol.storage.store import (
    EncodeResult,
    LoadResult,
    SaveResult,
    SettingsStore,
    default_chain,
)
from patrol.storage.transport import decode_text, encode_text
from patrol.storage.versions import VERSION_KEY, SchemaVersion, Version0, Version1

__all__ = [
    # Store
    "SettingsStore",
    "LoadResult",
    "SaveResult",
    "EncodeResult",
    "default_chain",
    "VersionChain",
    # Versions
    "VERSION_KEY",
    "SchemaVersion",
    "Version0",
    "Version1",
    # Context
    "MISSING",
    "ValidationContext",
    "format_path",
    # Log
    "SEVERITY_INFO",
    "SEVERITY_WARN",
    "SEVERITY_ERROR",
    "SEVERITY_DEV_ERROR",
    "LogEntry",
    "StorageLog",
    "severity_counts",
    "all_expected",
    "print_log",
    # Scripts / codecs
    "ControlScript",
    "Conditional",
    "Invocation",
    "ScriptSanitizer",
    "ExpiringEntryCodec",
    "StringSetCodec",
    "ControlScriptCodec",
    # Transport
    "encode_text",
    "decode_text",
    # Expiry
    "EXPIRY_CHOICES",
    "INDEFINITE_EXPIRY",
    "expires_at",
    "add_entry",
    "purge_expired",
    # Errors
    "StorageError",
    "InvalidUpgradeAttempt",
    "MissingUpgradePath",
    "VersionTagMismatch",
    "CodecError",
    "TransportDecodeError",
]
