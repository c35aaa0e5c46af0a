"""
Tests for patrol.storage.scripts — control-script model and sanitizer.
"""

import copy
from datetime import datetime, timezone

import pytest

from patrol.catalog import build_default_catalog
from patrol.config import StorageSettings
from patrol.storage.context import ValidationContext
from patrol.storage.log import StorageLog
from patrol.storage.scripts import (
    Conditional,
    ControlScript,
    Invocation,
    ScriptSanitizer,
    action_from_wire,
    action_to_wire,
    script_from_wire,
    script_to_wire,
)
from patrol.storage.versions import Version1
from patrol.time import FixedClock


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def call(name, **params):
    return {"name": name, "params": params}


def branch(condition, *actions):
    return {"name": "if", "condition": condition, "actions": list(actions)}


def sanitize(scripts, settings=None):
    ctx = ValidationContext(
        document={"controlScripts": scripts},
        log=StorageLog(clock=FixedClock(NOW)),
        defaults=Version1().default(),
        catalog=build_default_catalog(),
        settings=settings or StorageSettings(),
    )
    cleaned = ScriptSanitizer(ctx).sanitize()
    assert ctx.document["controlScripts"] == cleaned
    return cleaned, [entry.message for entry in ctx.log.entries]


def names(actions):
    return [action["name"] for action in actions]


# ── Model / wire conversion ──────────────────────────────────

class TestWireConversion:
    def test_action_from_wire_builds_union(self):
        node = action_from_wire(branch("atFinalWarning", call("rollback", summary="x")))
        assert node == Conditional("atFinalWarning", [Invocation("rollback", {"summary": "x"})])

    def test_action_round_trip(self):
        wire = branch("operatorAdmin", call("nextEdit"), branch("userIsIP", call("prevEdit")))
        assert action_to_wire(action_from_wire(wire)) == wire

    def test_missing_params_means_empty(self):
        assert action_from_wire({"name": "nextEdit"}) == Invocation("nextEdit", {})

    def test_action_from_wire_rejects_malformed(self):
        with pytest.raises(ValueError):
            action_from_wire({"name": "if", "condition": "x", "actions": "nope"})

    def test_action_to_wire_rejects_non_node(self):
        with pytest.raises(ValueError, match="not an action node"):
            action_to_wire({"name": "nextEdit"})

    def test_script_to_wire_sorts_keys(self):
        script = ControlScript(trigger_keys={"q", "a"}, actions=[Invocation("nextEdit")])
        assert script_to_wire(script) == {
            "keys": ["a", "q"],
            "actions": [{"name": "nextEdit", "params": {}}],
        }

    def test_script_from_wire(self):
        script = script_from_wire({"keys": ["q", "q"], "actions": [call("nextEdit")]})
        assert script == ControlScript({"q"}, [Invocation("nextEdit", {})])

    def test_script_from_wire_rejects_non_list_keys(self):
        with pytest.raises(ValueError):
            script_from_wire({"keys": "q", "actions": []})


# ── Sanitizer ────────────────────────────────────────────────

class TestSanitizerKeepsValidScripts:
    def test_default_scripts_untouched(self):
        scripts = Version1().default()["controlScripts"]
        cleaned, log = sanitize(copy.deepcopy(scripts))
        assert cleaned == scripts
        assert log == []

    def test_second_pass_is_silent(self):
        messy = [
            {"keys": ["q", "bogus"], "actions": [call("warn", level="zz"), call("nope")]},
            "garbage",
        ]
        first, _ = sanitize(messy)
        second, log = sanitize(copy.deepcopy(first))
        assert second == first
        assert log == []


class TestActionRegistry:
    def test_unknown_action_dropped_siblings_intact(self):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [call("nextEdit"), call("doesNotExist"), call("prevEdit")]},
        ])
        assert names(cleaned[0]["actions"]) == ["nextEdit", "prevEdit"]
        assert any("doesNotExist" in message for message in log)

    def test_unknown_condition_drops_subtree_only(self):
        cleaned, log = sanitize([
            {
                "keys": ["q"],
                "actions": [
                    call("nextEdit"),
                    branch("notACondition", call("rollback"), call("thankUser")),
                    call("prevEdit"),
                ],
            },
        ])
        assert names(cleaned[0]["actions"]) == ["nextEdit", "prevEdit"]
        assert any("Removing invalid condition [ notACondition ]" in message for message in log)

    def test_nested_invalid_action_leaves_conditional(self):
        cleaned, _ = sanitize([
            {
                "keys": ["q"],
                "actions": [branch("atFinalWarning", call("bogus"), call("rollback"))],
            },
        ])
        conditional = cleaned[0]["actions"][0]
        assert conditional["condition"] == "atFinalWarning"
        assert names(conditional["actions"]) == ["rollback"]

    def test_non_list_body_coerced_to_empty(self):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [{"name": "if", "condition": "atFinalWarning", "actions": "nope"}]},
        ])
        assert cleaned[0]["actions"] == [branch("atFinalWarning")]
        assert any("Resetting invalid actions array" in message for message in log)

    @pytest.mark.parametrize("bad", [42, "nextEdit", None, [], {"params": {}}, {"name": 7}])
    def test_malformed_action_dropped(self, bad):
        cleaned, log = sanitize([{"keys": ["q"], "actions": [bad, call("nextEdit")]}])
        assert names(cleaned[0]["actions"]) == ["nextEdit"]
        assert "Removing invalid action at path [ controlScripts -> 0 -> actions -> 0 ]." in log

    def test_conditional_without_condition_dropped(self):
        cleaned, _ = sanitize([{"keys": ["q"], "actions": [{"name": "if", "actions": []}]}])
        assert cleaned[0]["actions"] == []

    def test_depth_limit(self):
        deep = branch(
            "operatorAdmin",
            branch("userIsIP", branch("editIsMinor", call("nextEdit"))),
        )
        cleaned, log = sanitize(
            [{"keys": ["q"], "actions": [deep]}],
            settings=StorageSettings(max_action_depth=2),
        )
        assert cleaned[0]["actions"] == [branch("operatorAdmin", branch("userIsIP"))]
        assert any("nested deeper than 2" in message for message in log)


class TestParameters:
    def test_out_of_enum_choice_reset_to_first_option(self):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [call("warn", warningType="Vandalism", level="zz")]},
        ])
        assert cleaned[0]["actions"][0]["params"] == {"warningType": "Vandalism", "level": "auto"}
        assert any(
            "controlScripts -> 0 -> actions -> 0 -> params -> level" in message
            for message in log
        )

    def test_missing_choice_reset(self):
        cleaned, log = sanitize([{"keys": ["q"], "actions": [call("warn", level="2")]}])
        assert cleaned[0]["actions"][0]["params"] == {"warningType": "Vandalism", "level": "2"}
        assert any("missing choice parameter [ warningType ]" in message for message in log)

    def test_non_string_choice_reset(self):
        cleaned, _ = sanitize([{"keys": ["q"], "actions": [call("welcome", template=["Auto"])]}])
        assert cleaned[0]["actions"][0]["params"] == {"template": "Auto"}

    def test_undeclared_parameter_removed(self):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [call("rollback", summary="rv", bogus="y")]},
        ])
        assert cleaned[0]["actions"][0]["params"] == {"summary": "rv"}
        assert "Removing invalid parameter at path [ controlScripts -> 0 -> actions -> 0 -> params -> bogus ]." in log

    def test_non_string_text_parameter_removed(self):
        cleaned, _ = sanitize([{"keys": ["q"], "actions": [call("rollback", summary=5)]}])
        assert cleaned[0]["actions"][0]["params"] == {}

    def test_text_parameter_optional(self):
        cleaned, log = sanitize([{"keys": ["q"], "actions": [call("undo")]}])
        assert cleaned[0]["actions"][0]["params"] == {}
        assert log == []

    @pytest.mark.parametrize("params", ["x", 3, None, ["a"]])
    def test_malformed_params_coerced(self, params):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [{"name": "nextEdit", "params": params}]},
        ])
        assert cleaned[0]["actions"][0] == {"name": "nextEdit", "params": {}}
        assert any("Resetting invalid params object" in message for message in log)

    def test_conditional_params_inside_body(self):
        cleaned, log = sanitize([
            {"keys": ["q"], "actions": [branch("operatorAdmin", call("block", duration="forever"))]},
        ])
        params = cleaned[0]["actions"][0]["actions"][0]["params"]
        assert params == {
            "blockSummary": "[[Wikipedia:Vandalism|Vandalism]]",
            "duration": "31 hours",
        }
        assert any(
            "controlScripts -> 0 -> actions -> 0 -> actions -> 0 -> params -> duration" in message
            for message in log
        )


class TestScriptShape:
    def test_non_object_script_dropped(self):
        cleaned, log = sanitize(["garbage", {"keys": ["q"], "actions": []}])
        assert cleaned == [{"keys": ["q"], "actions": []}]
        assert "Removing invalid control script at path [ controlScripts -> 0 ]." in log

    def test_non_list_keys_and_actions_coerced(self):
        cleaned, log = sanitize([{"keys": "q", "actions": {"name": "nextEdit"}}])
        assert cleaned == [{"keys": [], "actions": []}]
        assert any("Resetting invalid keys array" in message for message in log)
        assert any("Resetting invalid actions array" in message for message in log)

    def test_invalid_trigger_keys_dropped_and_deduplicated(self):
        cleaned, log = sanitize([{"keys": ["q", "not-a-key", "q", 5, ["w"]], "actions": []}])
        assert cleaned[0]["keys"] == ["q"]
        assert sum("Removing invalid trigger key" in message for message in log) == 3

    def test_deep_invalid_values_reported_briefly(self):
        deep: list = []
        for _ in range(5000):
            deep = [deep]
        cleaned, log = sanitize([{
            "keys": ["q", deep],
            "actions": [{"name": "if", "condition": deep, "actions": []}],
        }])
        assert cleaned == [{"keys": ["q"], "actions": []}]
        assert len(log) == 2
        assert all(len(message) < 200 for message in log)

    def test_unexpected_script_key_removed(self):
        cleaned, log = sanitize([{"keys": ["q"], "actions": [], "color": "red"}])
        assert cleaned == [{"keys": ["q"], "actions": []}]
        assert "Removing unexpected key [ controlScripts -> 0 -> color ] from stored data." in log

    def test_non_list_collection_reset_to_default(self):
        cleaned, log = sanitize("not a list")
        assert cleaned == Version1().default()["controlScripts"]
        assert any("Resetting key path [ controlScripts ]" in message for message in log)
