"""
Patrol Storage — Version Chain
================================
Ordered registry of SchemaVersions, contiguous from 0.

Rules:
- Numbers must be non-negative integers, unique, with no gaps.
- The chain is fixed at construction; nothing registers later.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from patrol.storage.errors import MissingUpgradePath
from patrol.storage.versions.base import SchemaVersion


class VersionChain:

    def __init__(self, versions: Iterable[SchemaVersion]):
        by_number: dict[int, SchemaVersion] = {}
        for version in versions:
            number = version.number
            if not isinstance(number, int) or isinstance(number, bool) or number < 0:
                raise ValueError(
                    f"version number must be int >= 0, got {number!r}."
                )
            if number in by_number:
                raise ValueError(f"Duplicate schema version {number}.")
            by_number[number] = version

        if not by_number:
            raise ValueError("VersionChain requires at least one version.")

        expected = list(range(len(by_number)))
        if sorted(by_number) != expected:
            raise ValueError(
                f"Schema versions must be contiguous from 0, "
                f"got {sorted(by_number)}."
            )

        self._versions = tuple(by_number[number] for number in expected)

    @property
    def current(self) -> SchemaVersion:
        return self._versions[-1]

    @property
    def current_number(self) -> int:
        return self._versions[-1].number

    def get(self, number: int) -> SchemaVersion:
        if (
            not isinstance(number, int)
            or isinstance(number, bool)
            or not 0 <= number < len(self._versions)
        ):
            raise MissingUpgradePath(number)
        return self._versions[number]

    def supports(self, number) -> bool:
        return (
            isinstance(number, int)
            and not isinstance(number, bool)
            and 0 <= number < len(self._versions)
        )

    def __iter__(self) -> Iterator[SchemaVersion]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)
