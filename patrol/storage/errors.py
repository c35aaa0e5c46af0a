"""
Patrol Storage — Errors
=========================
Engine-internal failures raised inside the store.

None of these cross the public load / save / encode / decode
boundary: the store catches them, records them in the StorageLog
and recovers (reset, or a failed SaveResult).
"""

from __future__ import annotations

from patrol.storage.context import describe


class StorageError(Exception):
    """Base error for all storage operations."""
    pass


class InvalidUpgradeAttempt(StorageError):
    """upgrade() was handed a document tagged with the wrong version."""

    def __init__(self, from_version, to_version: int):
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(
            f"Cannot upgrade to version {to_version} from a document "
            f"tagged {describe(from_version)}; expected version {to_version - 1}."
        )


class MissingUpgradePath(StorageError):
    """No SchemaVersion is registered for the requested number."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(
            f"No schema version {version} is registered in the chain."
        )


class VersionTagMismatch(StorageError):
    """to_live / to_wire was handed a document tagged for another version."""

    def __init__(self, found, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"Document is tagged schemaVersion {describe(found)}, "
            f"expected {expected}."
        )


class CodecError(StorageError):
    """A collection field could not be converted between wire and live shape."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot convert [ {path} ]: {detail}")


class TransportDecodeError(StorageError):
    """Portable text could not be turned back into a wire document."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Portable text rejected: {detail}")
