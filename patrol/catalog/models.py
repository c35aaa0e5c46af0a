"""
Patrol Catalog — Immutable Specs
==================================
Descriptions of the automation actions and conditions that
control scripts may reference. The catalog is owned by the
script interpreter; storage only consumes it.
"""

from __future__ import annotations

from dataclasses import dataclass


PARAM_CHOICE = "choice"
PARAM_TEXT = "text"

VALID_PARAMETER_KINDS = frozenset({PARAM_CHOICE, PARAM_TEXT})


@dataclass(frozen=True)
class ParameterSpec:
    """
    One declared action parameter.

    choice → value must be one of `options`; the first option is the default.
    text   → free-form string, optional.
    """

    id: str
    kind: str = PARAM_TEXT
    options: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("parameter id must be a non-empty string.")

        if self.kind not in VALID_PARAMETER_KINDS:
            raise ValueError(
                f"kind '{self.kind}' not valid. "
                f"Must be one of: {sorted(VALID_PARAMETER_KINDS)}"
            )

        if not isinstance(self.options, tuple):
            raise ValueError("options must be a tuple.")

        if self.kind == PARAM_CHOICE and not self.options:
            raise ValueError(
                f"choice parameter '{self.id}' must declare at least one option."
            )

    @property
    def default_option(self) -> str:
        return self.options[0]


@dataclass(frozen=True)
class ActionSpec:
    action_id: str
    parameters: tuple[ParameterSpec, ...] = ()

    def __post_init__(self):
        if not self.action_id or not isinstance(self.action_id, str):
            raise ValueError("action_id must be a non-empty string.")

        seen: set[str] = set()
        for parameter in self.parameters:
            if parameter.id in seen:
                raise ValueError(
                    f"Duplicate parameter '{parameter.id}' "
                    f"on action '{self.action_id}'."
                )
            seen.add(parameter.id)

    def parameter_ids(self) -> frozenset[str]:
        return frozenset(parameter.id for parameter in self.parameters)


@dataclass(frozen=True)
class ConditionSpec:
    condition_id: str
    description: str = ""

    def __post_init__(self):
        if not self.condition_id or not isinstance(self.condition_id, str):
            raise ValueError("condition_id must be a non-empty string.")
