"""
Patrol Storage — Settings Store
=================================
Orchestrates load / save / encode / decode / reset over the
version chain.

Recovery protocol:
    - non-object input            → treated as {}
    - unsupported version tag     → full reset
    - any failed upgrade step     → full reset (never a partially
                                    migrated document)
    - validate                    → local repairs only
    - to_live / to_wire failures  → reset (load) or no document (save)

No exception crosses the public methods; every recovery is
recorded in the returned log snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from patrol.catalog.defaults import build_default_catalog
from patrol.catalog.provider import Catalog
from patrol.config.settings import StorageSettings, get_storage_settings
from patrol.storage.chain import VersionChain
from patrol.storage.context import ValidationContext, copy_tree, describe
from patrol.storage.errors import MissingUpgradePath, StorageError, TransportDecodeError
from patrol.storage.log import LogEntry, StorageLog
from patrol.storage.transport import decode_text, encode_text
from patrol.storage.versions import VERSION_KEY, SchemaVersion, Version0, Version1
from patrol.storage.versions.base import read_version_tag
from patrol.time.clock import Clock, get_default_clock

logger = logging.getLogger("patrol.storage")


@dataclass(frozen=True)
class LoadResult:
    document: dict
    log: tuple[LogEntry, ...]


@dataclass(frozen=True)
class SaveResult:
    document: Optional[dict]
    log: tuple[LogEntry, ...]

    @property
    def ok(self) -> bool:
        return self.document is not None


@dataclass(frozen=True)
class EncodeResult:
    text: Optional[str]
    log: tuple[LogEntry, ...]

    @property
    def ok(self) -> bool:
        return self.text is not None


def default_chain() -> VersionChain:
    return VersionChain([Version0(), Version1()])


class SettingsStore:
    """
    Owner of the live settings document.

    `document` is the live reference the application mutates in
    place; load / decode / reset replace it wholesale.
    """

    def __init__(
        self,
        chain: Optional[VersionChain] = None,
        catalog: Optional[Catalog] = None,
        settings: Optional[StorageSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self._chain = chain or default_chain()
        self._catalog = catalog if catalog is not None else build_default_catalog()
        self._settings = settings or get_storage_settings()
        self._clock = clock or get_default_clock()
        self.document: dict = self._default_live(self._new_log())

    @property
    def chain(self) -> VersionChain:
        return self._chain

    # ══════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ══════════════════════════════════════════════════════════

    def load(self, raw: Any) -> LoadResult:
        log = self._new_log()
        self._load(raw, log)
        return LoadResult(self.document, log.entries)

    def save(self) -> SaveResult:
        log = self._new_log()
        return SaveResult(self._save(log), log.entries)

    def encode(self) -> EncodeResult:
        log = self._new_log()
        wire = self._save(log)
        if wire is None:
            return EncodeResult(None, log.entries)

        try:
            text = encode_text(wire)
        except (TypeError, ValueError) as exc:
            log.error(f"Could not serialize stored data: {exc}")
            return EncodeResult(None, log.entries)
        return EncodeResult(text, log.entries)

    def decode(self, text: Any) -> LoadResult:
        log = self._new_log()
        try:
            raw = decode_text(text, self._settings.max_text_length)
        except TransportDecodeError as exc:
            log.warn(
                f"Could not decode stored data ({exc.detail}), "
                f"loading default values instead."
            )
            raw = {}

        self._load(raw, log)
        return LoadResult(self.document, log.entries)

    def reset(self, log: Optional[StorageLog] = None) -> LoadResult:
        if log is None:
            log = self._new_log()
        self.document = self._default_live(log)
        return LoadResult(self.document, log.entries)

    # ══════════════════════════════════════════════════════════
    # LOAD
    # ══════════════════════════════════════════════════════════

    def _load(self, raw: Any, log: StorageLog) -> None:
        try:
            self.document = self._migrate(raw, log)
        except StorageError as exc:
            log.error(f"Could not load stored data: {exc}")
            self.document = self._default_live(log)
        except Exception as exc:
            logger.exception("Unexpected failure while loading stored data")
            log.dev_error(
                f"Unexpected {type(exc).__name__} while loading stored data: {exc}"
            )
            self.document = self._default_live(log)

        counts = log.severity_counts()
        logger.info(
            f"Stored data loaded at version {self._chain.current_number} "
            f"({counts['warn']} warnings, {counts['error']} errors, "
            f"{counts['devError']} dev errors)"
        )

    def _migrate(self, raw: Any, log: StorageLog) -> dict:
        if not isinstance(raw, dict):
            log.warn(
                f"Stored data is not an object ({type(raw).__name__}), "
                f"treating it as empty."
            )
            raw = {}

        data = copy_tree(raw)
        if VERSION_KEY not in data:
            log.info("Stored data has no version tag, assuming version 0.")
            data[VERSION_KEY] = 0

        if not self._chain.supports(data[VERSION_KEY]):
            log.error(
                f"Stored data version {describe(data[VERSION_KEY])} is corrupted "
                f"or unsupported, resetting to default values."
            )
            return self._default_live(log)

        target = self._chain.current_number
        while data[VERSION_KEY] != target:
            next_number = data[VERSION_KEY] + 1
            try:
                step = self._chain.get(next_number)
            except MissingUpgradePath as exc:
                log.dev_error(f"[MISSING_UPGRADE_METHOD] {exc}")
                return self._default_live(log)

            try:
                data = step.upgrade(self._context(data, log, step))
            except StorageError as exc:
                log.error(
                    f"Upgrade to version {next_number} failed ({exc}), "
                    f"resetting to default values."
                )
                return self._default_live(log)

            if not isinstance(data, dict) or data.get(VERSION_KEY) != next_number:
                log.dev_error(
                    f"Upgrade to version {next_number} produced a document "
                    f"tagged {describe(read_version_tag(data))}."
                )
                return self._default_live(log)

            logger.debug(f"Upgraded stored data to version {next_number}")

        current = self._chain.current
        ctx = self._context(data, log, current)
        if not current.validate(ctx):
            return self._default_live(log)

        return current.to_live(self._context(ctx.document, log, current))

    # ══════════════════════════════════════════════════════════
    # SAVE / DEFAULTS
    # ══════════════════════════════════════════════════════════

    def _save(self, log: StorageLog) -> Optional[dict]:
        current = self._chain.current
        try:
            return current.to_wire(self._context(self.document, log, current))
        except StorageError as exc:
            log.error(f"Could not save stored data: {exc}")
        except Exception as exc:
            logger.exception("Unexpected failure while saving stored data")
            log.dev_error(
                f"Unexpected {type(exc).__name__} while saving stored data: {exc}"
            )
        return None

    def _default_live(self, log: StorageLog) -> dict:
        current = self._chain.current
        log.info(f"Resetting stored data to version {current.number} default values.")
        logger.info(f"Stored data reset to version {current.number} defaults")
        return current.to_live(self._context(current.default(), log, current))

    # ── Helpers ───────────────────────────────────────────────

    def _new_log(self) -> StorageLog:
        return StorageLog(clock=self._clock, echo=self._settings.echo_logs)

    def _context(self, document: Any, log: StorageLog, version: SchemaVersion) -> ValidationContext:
        return ValidationContext(
            document=document,
            log=log,
            defaults=version.default(),
            catalog=self._catalog,
            settings=self._settings,
        )
