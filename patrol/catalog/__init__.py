"""
Patrol Catalog — Public API
=============================
Identifier registries consumed (not owned) by storage validation.
"""

from patrol.catalog.defaults import (
    NAMESPACE_IDS,
    TRIGGER_KEYS,
    WARNING_TEMPLATES,
    WELCOME_TEMPLATES,
    build_default_catalog,
)
from patrol.catalog.models import (
    PARAM_CHOICE,
    PARAM_TEXT,
    ActionSpec,
    ConditionSpec,
    ParameterSpec,
)
from patrol.catalog.provider import Catalog, InMemoryCatalog

__all__ = [
    "PARAM_CHOICE",
    "PARAM_TEXT",
    "ParameterSpec",
    "ActionSpec",
    "ConditionSpec",
    "Catalog",
    "InMemoryCatalog",
    "NAMESPACE_IDS",
    "TRIGGER_KEYS",
    "WARNING_TEMPLATES",
    "WELCOME_TEMPLATES",
    "build_default_catalog",
]
