"""
Patrol Storage — SchemaVersion Contract
=========================================
Every released schema generation implements this protocol.
Versions are independent objects (no inheritance between them);
all shared helper behavior lives on ValidationContext.

Contract:
    number        unique, contiguous from 0 across the chain
    default()     fresh canonical document for this version
    upgrade(ctx)  ctx.document is the prior version's document;
                  returns this version's wire document
    validate(ctx) repairs ctx.document in place; False only when
                  the version tag itself is wrong
    to_live(ctx) / to_wire(ctx)
                  return a new document, never mutate ctx.document
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Protocol

from patrol.storage.codecs import Codec
from patrol.storage.context import MISSING, ValidationContext, describe, format_path, walk
from patrol.storage.errors import (
    CodecError,
    InvalidUpgradeAttempt,
    VersionTagMismatch,
)

VERSION_KEY = "schemaVersion"


class SchemaVersion(Protocol):
    number: int

    def default(self) -> dict:
        ...

    def upgrade(self, ctx: ValidationContext) -> dict:
        ...

    def validate(self, ctx: ValidationContext) -> bool:
        ...

    def to_live(self, ctx: ValidationContext) -> dict:
        ...

    def to_wire(self, ctx: ValidationContext) -> dict:
        ...


def is_version_tag(value: Any, number: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value == number


def read_version_tag(document: Any) -> Any:
    if isinstance(document, dict):
        return document.get(VERSION_KEY)
    return None


def require_upgrade_source(ctx: ValidationContext, number: int) -> None:
    """Raise InvalidUpgradeAttempt unless ctx.document is tagged number - 1."""
    found = read_version_tag(ctx.document)
    if not is_version_tag(found, number - 1):
        ctx.log.dev_error(
            f"[INVALID_UPGRADE_ATTEMPT] Attempted to upgrade from version "
            f"{describe(found)} to version {number}, but this upgrade only supports "
            f"version {number - 1}."
        )
        raise InvalidUpgradeAttempt(found, number)


def require_version_tag(ctx: ValidationContext, number: int) -> None:
    """Raise VersionTagMismatch unless ctx.document is tagged `number`."""
    found = read_version_tag(ctx.document)
    if not is_version_tag(found, number):
        ctx.log.error(
            f"Stored data version {describe(found)} does not match "
            f"expected version {number}."
        )
        raise VersionTagMismatch(found, number)


def convert_fields(
    ctx: ValidationContext,
    number: int,
    codecs: Mapping[tuple, Codec],
    direction: str,
) -> dict:
    """
    Run every codec in `codecs` over a copy of ctx.document.

    direction is "decode" (wire → live) or "encode" (live → wire).
    """
    require_version_tag(ctx, number)
    document = copy.deepcopy(ctx.document)

    for path, codec in codecs.items():
        label = format_path(path)
        value = walk(document, path)
        if value is MISSING:
            ctx.log.error(f"Missing collection at key path [ {label} ].")
            raise CodecError(label, "missing")

        convert = codec.decode if direction == "decode" else codec.encode
        try:
            converted = convert(value, label)
        except CodecError as exc:
            ctx.log.error(f"Could not convert key path [ {label} ]: {exc.detail}")
            raise

        parent = walk(document, path[:-1])
        parent[path[-1]] = converted

    return document
