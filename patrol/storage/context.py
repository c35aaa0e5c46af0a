"""
Patrol Storage — Validation Context
=====================================
Path helpers every SchemaVersion call works through.

A ValidationContext is built fresh by the store for each step and
threaded explicitly into upgrade / validate / to_live / to_wire.
Versions hold no mutable state of their own.

Paths are tuples of keys (str for objects, int for lists) and are
rendered in log messages as "a -> b -> c".
"""

from __future__ import annotations

import copy
import reprlib
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from patrol.catalog.provider import Catalog
from patrol.config.settings import StorageSettings
from patrol.storage.log import StorageLog


class _Missing:
    """Sentinel for an absent path (None is a legitimate stored value)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def format_path(path) -> str:
    return " -> ".join(str(key) for key in path)


_describer = reprlib.Repr()
_describer.maxstring = 80
_describer.maxother = 80


def describe(value: Any) -> str:
    """repr() for log messages, bounded in depth and length."""
    return _describer.repr(value)


def copy_tree(value: Any) -> Any:
    """
    Deep copy of nested dicts / lists without recursion.

    Stored data may nest far deeper than the interpreter stack allows
    copy.deepcopy to follow. Other values are shared (wire documents
    only hold immutable scalars); shared and cyclic references are
    preserved as in copy.deepcopy.
    """
    if not isinstance(value, (dict, list)):
        return value

    root = {} if isinstance(value, dict) else []
    copies = {id(value): root}
    pending = [(value, root)]
    while pending:
        source, target = pending.pop()
        items = source.items() if isinstance(source, dict) else enumerate(source)
        for key, child in items:
            if isinstance(child, (dict, list)):
                clone = copies.get(id(child))
                if clone is None:
                    clone = {} if isinstance(child, dict) else []
                    copies[id(child)] = clone
                    pending.append((child, clone))
            else:
                clone = child

            if isinstance(target, dict):
                target[key] = clone
            else:
                target.append(clone)
    return root


def walk(root: Any, path) -> Any:
    """Follow `path` through nested dicts / lists; MISSING if any hop is absent."""
    scope = root
    for key in path:
        if isinstance(scope, dict):
            if key not in scope:
                return MISSING
            scope = scope[key]
        elif isinstance(scope, list) and isinstance(key, int) and not isinstance(key, bool):
            if not -len(scope) <= key < len(scope):
                return MISSING
            scope = scope[key]
        else:
            return MISSING
    return scope


@dataclass
class ValidationContext:
    """
    Working document plus the log and defaults of the version in play.

    `document` may be replaced wholesale (reset of the root path).
    """

    document: Any
    log: StorageLog
    defaults: dict
    catalog: Catalog
    settings: StorageSettings = field(default_factory=StorageSettings)

    # ── Reads ─────────────────────────────────────────────────

    def get(self, path) -> Any:
        return walk(self.document, path)

    def exists(self, path) -> bool:
        return walk(self.document, path) is not MISSING

    def default_at(self, path) -> Any:
        """Deep copy of the default value at `path`, or MISSING."""
        value = walk(self.defaults, path)
        if value is MISSING:
            return MISSING
        return copy.deepcopy(value)

    def lookup(
        self,
        path,
        fallback: Any,
        transform: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        Read `path` from the working document.

        Absent path → warn, return `fallback`.
        `transform` maps the stored value; returning MISSING rejects
        it (warn, return `fallback`).
        """
        value = walk(self.document, path)
        if value is MISSING:
            self.log.warn(
                f"Missing expected key path [ {format_path(path)} ] "
                f"in stored data, defaulting to fallback value."
            )
            return copy.deepcopy(fallback)

        value = copy_tree(value)
        if transform is None:
            return value

        result = transform(value)
        if result is MISSING:
            self.log.warn(
                f"Invalid value at key path [ {format_path(path)} ] "
                f"in stored data, defaulting to fallback value."
            )
            return copy.deepcopy(fallback)
        return result

    # ── Writes ────────────────────────────────────────────────

    def set(self, path, value: Any) -> None:
        """Write `value` at `path`, replacing non-object intermediates with {}."""
        if not path:
            self.document = value
            return

        if not isinstance(self.document, dict):
            self.document = {}

        scope = self.document
        for key in path[:-1]:
            if isinstance(scope, list) and isinstance(key, int):
                child = scope[key]
                if not isinstance(child, (dict, list)):
                    child = {}
                    scope[key] = child
                scope = child
                continue

            child = scope.get(key)
            if not isinstance(child, (dict, list)):
                child = {}
                scope[key] = child
            scope = child

        scope[path[-1]] = value

    def reset(self, path) -> Any:
        """Overwrite `path` with this version's default; returns the new value."""
        self.log.warn(
            f"Resetting key path [ {format_path(path)} ] "
            f"in stored data to default value."
        )
        value = self.default_at(path)
        if value is MISSING:
            self.log.dev_error(
                f"Could not find default value for key path "
                f"[ {format_path(path)} ] in stored data."
            )
            return MISSING

        self.set(path, value)
        return value

    def deprecated(self, path) -> None:
        """Note an intentionally dropped field, when the prior data had it."""
        if self.exists(path):
            self.log.warn(
                f"Skipped deprecated key path [ {format_path(path)} ].",
                expected=True,
            )

    def restrict(self, obj: Any, path) -> bool:
        """
        Prune keys of `obj` absent from the default at `path`.

        A non-object `obj` is reset to the default and False is returned.
        """
        if not isinstance(obj, dict):
            self.reset(path)
            return False

        allowed = walk(self.defaults, path)
        if not isinstance(allowed, dict):
            self.log.dev_error(
                f"Default value at key path [ {format_path(path)} ] "
                f"is not an object."
            )
            return False

        for key in list(obj):
            if key not in allowed:
                self.log.warn(
                    f"Removing unexpected key [ {format_path(tuple(path) + (key,))} ] "
                    f"from stored data."
                )
                del obj[key]
        return True
