"""
Patrol Storage — Collection Codecs
====================================
One codec pair per collection type, invoked uniformly by
to_live / to_wire:

    decode: wire → live
    encode: live → wire

Codecs never repair. They run after validate (decode) or on a
document the host may have broken (encode), so a wrong shape
raises CodecError instead of being guessed at.
"""

from __future__ import annotations

from typing import Any, Protocol

from patrol.storage.context import describe
from patrol.storage.errors import CodecError
from patrol.storage.scripts import (
    ControlScript,
    script_from_wire,
    script_to_wire,
)


class Codec(Protocol):
    def decode(self, value: Any, path: str) -> Any:
        ...

    def encode(self, value: Any, path: str) -> Any:
        ...


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_wire_entry(value: Any) -> bool:
    """
    True for a well-formed wire ExpiringEntry: [subjectId, [createdAt, expiresAt]].

    An entry cannot expire before it was created.
    """
    return (
        isinstance(value, list)
        and len(value) == 2
        and isinstance(value[0], str)
        and isinstance(value[1], list)
        and len(value[1]) == 2
        and all(_is_timestamp(stamp) for stamp in value[1])
        and value[1][0] <= value[1][1]
    )


class ExpiringEntryCodec:
    """
    wire: [[subjectId, [createdAt, expiresAt]], ...]
    live: {subjectId: [createdAt, expiresAt]}

    A subject id repeated on the wire keeps its last entry.
    """

    def decode(self, value: Any, path: str) -> dict[str, list[int]]:
        if not isinstance(value, list):
            raise CodecError(path, f"expected a list of entries, got {type(value).__name__}")

        live: dict[str, list[int]] = {}
        for entry in value:
            if not is_wire_entry(entry):
                raise CodecError(path, f"malformed entry {describe(entry)}")
            subject_id, (created_at, expires_at) = entry
            live[subject_id] = [created_at, expires_at]
        return live

    def encode(self, value: Any, path: str) -> list:
        if not isinstance(value, dict):
            raise CodecError(path, f"expected a mapping of entries, got {type(value).__name__}")

        wire = []
        for subject_id, stamps in value.items():
            if (
                not isinstance(subject_id, str)
                or not isinstance(stamps, (list, tuple))
                or len(stamps) != 2
                or not all(_is_timestamp(stamp) for stamp in stamps)
            ):
                raise CodecError(path, f"malformed entry {describe(subject_id)}: {describe(stamps)}")
            wire.append([subject_id, [stamps[0], stamps[1]]])
        return wire


class StringSetCodec:
    """wire: list of str (sorted on encode); live: set of str."""

    def decode(self, value: Any, path: str) -> set[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise CodecError(path, "expected a list of strings")
        return set(value)

    def encode(self, value: Any, path: str) -> list[str]:
        if not isinstance(value, (set, frozenset)) or not all(isinstance(item, str) for item in value):
            raise CodecError(path, "expected a set of strings")
        return sorted(value)


class ControlScriptCodec:
    """wire: list of script objects; live: list of ControlScript."""

    def decode(self, value: Any, path: str) -> list[ControlScript]:
        if not isinstance(value, list):
            raise CodecError(path, "expected a list of control scripts")
        try:
            return [script_from_wire(script) for script in value]
        except (ValueError, TypeError) as exc:
            raise CodecError(path, str(exc)) from exc

    def encode(self, value: Any, path: str) -> list[dict]:
        if not isinstance(value, list):
            raise CodecError(path, "expected a list of control scripts")
        try:
            return [script_to_wire(script) for script in value]
        except (ValueError, TypeError) as exc:
            raise CodecError(path, str(exc)) from exc
