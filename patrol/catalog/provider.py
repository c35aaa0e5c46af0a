"""
Patrol Catalog — Provider Protocol and In-Memory Catalog
==========================================================
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol

from patrol.catalog.models import ActionSpec, ConditionSpec

logger = logging.getLogger("patrol.catalog")


class Catalog(Protocol):
    """
    Structural protocol for the identifier registries consumed by
    schema validation. No inheritance required.
    """

    @property
    def namespaces(self) -> frozenset[int]:
        ...

    @property
    def warning_templates(self) -> frozenset[str]:
        ...

    @property
    def trigger_keys(self) -> frozenset[str]:
        ...

    @property
    def actions(self) -> Mapping[str, ActionSpec]:
        ...

    @property
    def conditions(self) -> Mapping[str, ConditionSpec]:
        ...


class InMemoryCatalog:
    """
    Deterministic in-memory catalog used by the store and tests.
    Duplicate action or condition ids are rejected at construction.
    """

    def __init__(
        self,
        namespaces: Iterable[int] = (),
        warning_templates: Iterable[str] = (),
        trigger_keys: Iterable[str] = (),
        actions: Iterable[ActionSpec] = (),
        conditions: Iterable[ConditionSpec] = (),
    ):
        self._namespaces = frozenset(namespaces)
        self._warning_templates = frozenset(warning_templates)
        self._trigger_keys = frozenset(trigger_keys)

        action_map: dict[str, ActionSpec] = {}
        for spec in actions:
            if spec.action_id in action_map:
                raise ValueError(f"Duplicate action '{spec.action_id}'.")
            action_map[spec.action_id] = spec

        condition_map: dict[str, ConditionSpec] = {}
        for spec in conditions:
            if spec.condition_id in condition_map:
                raise ValueError(f"Duplicate condition '{spec.condition_id}'.")
            condition_map[spec.condition_id] = spec

        self._actions = MappingProxyType(action_map)
        self._conditions = MappingProxyType(condition_map)

        logger.debug(
            f"Catalog built: {len(self._actions)} actions, "
            f"{len(self._conditions)} conditions, "
            f"{len(self._trigger_keys)} trigger keys"
        )

    @property
    def namespaces(self) -> frozenset[int]:
        return self._namespaces

    @property
    def warning_templates(self) -> frozenset[str]:
        return self._warning_templates

    @property
    def trigger_keys(self) -> frozenset[str]:
        return self._trigger_keys

    @property
    def actions(self) -> Mapping[str, ActionSpec]:
        return self._actions

    @property
    def conditions(self) -> Mapping[str, ConditionSpec]:
        return self._conditions
