"""
Patrol Storage — Control Scripts
==================================
Typed model of user-defined automation scripts and the recursive
sanitizer that keeps them consistent with the catalog.

Wire shape (portable, what the user may hand-edit or import):
    {"keys": ["q"], "actions": [
        {"name": "rollback", "params": {}},
        {"name": "if", "condition": "atFinalWarning", "actions": [...]},
    ]}

Live shape: ControlScript(trigger_keys=set, actions=[Conditional | Invocation]).

Sanitizing happens in two passes:
    1. parse   — wire value → tagged union, dropping structurally
                 malformed nodes (non-objects, missing names,
                 nesting past the configured depth).
    2. repair  — structural recursion over the union against the
                 catalog (unknown ids, bad parameters).
The sanitized tree is written back in wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from patrol.catalog.models import PARAM_CHOICE, ActionSpec
from patrol.storage.context import MISSING, ValidationContext, describe, format_path

CONDITIONAL_NAME = "if"

SCRIPT_KEYS = frozenset({"keys", "actions"})


# ══════════════════════════════════════════════════════════════
# MODEL
# ══════════════════════════════════════════════════════════════

@dataclass
class Invocation:
    action_id: str
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class Conditional:
    condition_id: str
    body: list = field(default_factory=list)


Action = Union[Conditional, Invocation]


@dataclass
class ControlScript:
    trigger_keys: set[str] = field(default_factory=set)
    actions: list[Action] = field(default_factory=list)


# ══════════════════════════════════════════════════════════════
# WIRE CONVERSION (strict — used on already-sanitized data)
# ══════════════════════════════════════════════════════════════

def action_from_wire(value: dict) -> Action:
    """Build a union node from a sanitized wire action. Raises ValueError."""
    if not isinstance(value, dict) or not isinstance(value.get("name"), str):
        raise ValueError(f"action must be an object with a name, got {describe(value)}.")

    if value["name"] == CONDITIONAL_NAME:
        condition = value.get("condition")
        body = value.get("actions")
        if not isinstance(condition, str) or not isinstance(body, list):
            raise ValueError(f"malformed conditional {describe(value)}.")
        return Conditional(condition, [action_from_wire(child) for child in body])

    params = value.get("params", {})
    if not isinstance(params, dict):
        raise ValueError(f"params of '{value['name']}' must be an object.")
    return Invocation(value["name"], dict(params))


def action_to_wire(action: Action) -> dict:
    if isinstance(action, Conditional):
        return {
            "name": CONDITIONAL_NAME,
            "condition": action.condition_id,
            "actions": [action_to_wire(child) for child in action.body],
        }
    if isinstance(action, Invocation):
        return {"name": action.action_id, "params": dict(action.params)}
    raise ValueError(f"not an action node: {describe(action)}.")


def script_from_wire(value: dict) -> ControlScript:
    if not isinstance(value, dict):
        raise ValueError(f"control script must be an object, got {describe(value)}.")
    keys = value.get("keys")
    actions = value.get("actions")
    if not isinstance(keys, list) or not isinstance(actions, list):
        raise ValueError("control script keys and actions must be lists.")
    return ControlScript(
        trigger_keys=set(keys),
        actions=[action_from_wire(action) for action in actions],
    )


def script_to_wire(script: ControlScript) -> dict:
    if not isinstance(script, ControlScript):
        raise ValueError(f"not a ControlScript: {describe(script)}.")
    return {
        "keys": sorted(script.trigger_keys),
        "actions": [action_to_wire(action) for action in script.actions],
    }


# ══════════════════════════════════════════════════════════════
# SANITIZER
# ══════════════════════════════════════════════════════════════

class ScriptSanitizer:
    """Repairs the control-script list at one path of a context's document."""

    def __init__(self, ctx: ValidationContext):
        self._ctx = ctx
        self._log = ctx.log
        self._catalog = ctx.catalog
        self._max_depth = ctx.settings.max_action_depth

    def sanitize(self, path=("controlScripts",)) -> list[dict]:
        path = tuple(path)
        value = self._ctx.get(path)
        if not isinstance(value, list):
            self._ctx.reset(path)
            value = self._ctx.get(path)
            if not isinstance(value, list):
                return []

        scripts = []
        for index, raw in enumerate(value):
            script = self._parse_script(raw, path + (index,))
            if script is not None:
                scripts.append(script)

        for index, script in enumerate(scripts):
            script.actions = self._repair_actions(
                script.actions, path + (index, "actions")
            )

        cleaned = [self._script_wire(script) for script in scripts]
        self._ctx.set(path, cleaned)
        return cleaned

    # ── Pass 1: parse ─────────────────────────────────────────

    def _parse_script(self, raw: Any, path) -> Optional[_ParsedScript]:
        if not isinstance(raw, dict):
            self._log.warn(f"Removing invalid control script at path [ {format_path(path)} ].")
            return None

        for key in list(raw):
            if key not in SCRIPT_KEYS:
                self._log.warn(
                    f"Removing unexpected key [ {format_path(path + (key,))} ] "
                    f"from stored data."
                )

        keys = raw.get("keys", MISSING)
        if not isinstance(keys, list):
            self._log.warn(f"Resetting invalid keys array at path [ {format_path(path + ('keys',))} ].")
            keys = []

        trigger_keys: list[str] = []
        for key in keys:
            if not isinstance(key, str) or key not in self._catalog.trigger_keys:
                self._log.warn(
                    f"Removing invalid trigger key [ {describe(key)} ] "
                    f"at path [ {format_path(path + ('keys',))} ]."
                )
                continue
            if key not in trigger_keys:
                trigger_keys.append(key)

        actions = raw.get("actions", MISSING)
        if not isinstance(actions, list):
            self._log.warn(f"Resetting invalid actions array at path [ {format_path(path + ('actions',))} ].")
            actions = []

        return _ParsedScript(
            trigger_keys=trigger_keys,
            actions=self._parse_actions(actions, path + ("actions",), depth=1),
        )

    def _parse_actions(self, values: list, path, depth: int) -> list[Action]:
        parsed = []
        for index, value in enumerate(values):
            node = self._parse_action(value, path + (index,), depth)
            if node is not None:
                parsed.append(node)
        return parsed

    def _parse_action(self, value: Any, path, depth: int) -> Optional[Action]:
        if not isinstance(value, dict) or not isinstance(value.get("name"), str):
            self._log.warn(f"Removing invalid action at path [ {format_path(path)} ].")
            return None

        name = value["name"]
        if name == CONDITIONAL_NAME:
            if depth > self._max_depth:
                self._log.warn(
                    f"Removing conditional nested deeper than {self._max_depth} "
                    f"levels at path [ {format_path(path)} ]."
                )
                return None

            condition = value.get("condition")
            if not isinstance(condition, str):
                self._log.warn(f"Removing invalid condition [ {describe(condition)} ] at path [ {format_path(path)} ].")
                return None

            body = value.get("actions", MISSING)
            if not isinstance(body, list):
                self._log.warn(f"Resetting invalid actions array at path [ {format_path(path + ('actions',))} ].")
                body = []

            return Conditional(
                condition,
                self._parse_actions(body, path + ("actions",), depth + 1),
            )

        params = value.get("params", MISSING)
        if not isinstance(params, dict):
            self._log.warn(f"Resetting invalid params object at path [ {format_path(path + ('params',))} ].")
            params = {}
        return Invocation(name, dict(params))

    # ── Pass 2: repair against the catalog ────────────────────

    def _repair_actions(self, actions: list[Action], path) -> list[Action]:
        kept = []
        for index, action in enumerate(actions):
            repaired = self._repair_action(action, path + (index,))
            if repaired is not None:
                kept.append(repaired)
        return kept

    def _repair_action(self, action: Action, path) -> Optional[Action]:
        if isinstance(action, Conditional):
            if action.condition_id not in self._catalog.conditions:
                self._log.warn(
                    f"Removing invalid condition [ {action.condition_id} ] "
                    f"at path [ {format_path(path)} ]."
                )
                return None
            action.body = self._repair_actions(action.body, path + ("actions",))
            return action

        if isinstance(action, Invocation):
            spec = self._catalog.actions.get(action.action_id)
            if spec is None:
                self._log.warn(
                    f"Removing invalid action [ {action.action_id} ] "
                    f"at path [ {format_path(path)} ]."
                )
                return None
            action.params = self._repair_params(spec, action.params, path + ("params",))
            return action

        self._log.dev_error(f"Unknown action node at path [ {format_path(path)} ].")
        return None

    def _repair_params(self, spec: ActionSpec, params: dict, path) -> dict[str, str]:
        declared = spec.parameter_ids()
        for key in params:
            if key not in declared:
                self._log.warn(f"Removing invalid parameter at path [ {format_path(path + (key,))} ].")

        repaired: dict[str, str] = {}
        for parameter in spec.parameters:
            param_path = format_path(path + (parameter.id,))
            value = params.get(parameter.id, MISSING)

            if parameter.kind == PARAM_CHOICE:
                if value is MISSING:
                    self._log.warn(
                        f"Resetting missing choice parameter [ {parameter.id} ] "
                        f"at path [ {param_path} ] to '{parameter.default_option}'."
                    )
                    value = parameter.default_option
                elif not isinstance(value, str) or value not in parameter.options:
                    self._log.warn(
                        f"Resetting invalid choice parameter at path "
                        f"[ {param_path} ] to '{parameter.default_option}'."
                    )
                    value = parameter.default_option
                repaired[parameter.id] = value
                continue

            if value is MISSING:
                continue
            if not isinstance(value, str):
                self._log.warn(f"Removing invalid parameter at path [ {param_path} ].")
                continue
            repaired[parameter.id] = value

        return repaired

    @staticmethod
    def _script_wire(script: _ParsedScript) -> dict:
        return {
            "keys": list(script.trigger_keys),
            "actions": [action_to_wire(action) for action in script.actions],
        }


@dataclass
class _ParsedScript:
    """Script mid-sanitize: trigger keys keep their stored order."""

    trigger_keys: list[str]
    actions: list[Action]
