"""
Patrol Storage — Schema Version 1
===================================
The current document layout.

    settings        moderation / queue / AI / audio / zen mode toggles
    layout          panel widths
    controlScripts  trigger keys bound to action trees
    statistics      non-negative counters
    priorityLists   expiring entries per category (users / pages / tags)
    allowLists      expiring entries per category

validate() walks default() as the shape ground truth: every object
node is pruned to the default's keys, every leaf is checked against
its predicate and collections are repaired by dedicated handlers.
Repairs reset to the default at that path and never reject the
whole document.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable
from urllib.parse import urlparse

from patrol.storage.codecs import (
    ControlScriptCodec,
    ExpiringEntryCodec,
    StringSetCodec,
    is_wire_entry,
)
from patrol.storage.context import MISSING, ValidationContext, copy_tree, describe, format_path
from patrol.storage.expiry import CATEGORIES, EXPIRY_CHOICES, LIST_NAMES
from patrol.storage.scripts import CONDITIONAL_NAME, ScriptSanitizer
from patrol.storage.versions.base import (
    VERSION_KEY,
    convert_fields,
    is_version_tag,
    read_version_tag,
    require_upgrade_source,
)


AI_PROVIDERS = frozenset({"Ollama"})

VOLUME_CHANNELS = (
    "master",
    "master.startup",
    "master.music",
    "master.music.zen_mode",
    "master.ui",
    "master.ui.click",
    "master.ui.select",
    "master.ui.on",
    "master.ui.off",
    "master.queue",
    "master.queue.ores",
    "master.queue.mention",
    "master.queue.recent",
    "master.queue.flagged",
    "master.queue.watchlist",
    "master.notification",
    "master.notification.alert",
    "master.notification.notice",
    "master.action",
    "master.action.default",
    "master.action.failed",
    "master.action.report",
    "master.action.block",
    "master.action.protect",
    "master.other",
    "master.other.success",
    "master.other.error",
)

MUTED_CHANNELS = frozenset({
    "master.queue.recent",
    "master.queue.flagged",
    "master.queue.watchlist",
})

DEFAULT_AUTO_REPORT_REASONS = (
    "Vandalism", "Subtle vandalism", "Image vandalism", "Sandbox",
    "Unsourced", "Unsourced (BLP)", "Unsourced genre", "Commentary",
    "AI-generated", "AI-generated (talk)", "Censoring",
    "Disruptive editing", "Deleting", "Deliberate errors", "Editing tests",
    "Inappropriate jokes",
    "Advertising", "Spam links",
    "Personal attacks", "TPO", "AfD removal",
)

STATISTICS_SHAPE = {
    "editsReviewed": ("total", "thanked"),
    "recentChangesReviewed": ("total",),
    "pendingChangesReviewed": ("total", "accepted", "rejected"),
    "watchlistChangesReviewed": ("total",),
    "revertsMade": (
        "total", "goodFaith", "fromRecentChanges",
        "fromPendingChanges", "fromWatchlist", "fromLoadedEdits",
    ),
    "usersWelcomed": ("total",),
    "warningsIssued": ("total", "level1", "level2", "level3", "level4", "level4im"),
    "reportsFiled": ("total", "AIV", "UAA", "RFPP"),
    "itemsAllowListed": ("total", "users", "pages", "tags"),
    "itemsPrioritized": ("total", "users", "pages", "tags"),
    "blocksIssued": ("total",),
    "pagesProtected": ("total",),
    "actionsExecuted": ("total", "successful"),
}


# ── v0 → v1 identifier renames ────────────────────────────────

REASON_RENAMES = {
    "AI-Generated": "AI-generated",
    "AI-Generated (talk)": "AI-generated (talk)",
    "Disruption": "Disruptive editing",
    "Errors": "Deliberate errors",
    "Jokes": "Inappropriate jokes",
}

WARNING_TYPE_RENAMES = {
    "AI-Generated": "AI-generated",
    "AI-Generated (talk)": "AI-generated (talk)",
}

WELCOME_TEMPLATE_RENAMES = {
    "Links": "Graphical",
    "Latin": "Non-Latin",
}

DROPPED_WELCOME_TEMPLATES = frozenset({"Mentor"})

LEGACY_ACTION_IDS = {
    "whitelistUser": "allowListUser",
    "whitelistPage": "allowListPage",
    "unwhitelistUser": "unallowListUser",
    "unwhitelistPage": "unallowListPage",
    "highlightUser": "prioritizeUser",
    "highlightPage": "prioritizePage",
    "unhighlightUser": "unprioritizeUser",
    "unhighlightPage": "unprioritizePage",
}

DEPRECATED_V0_PATHS = (
    ("options", "enableWelcomeLatin"),
    ("options", "volumes", "whoosh"),
    ("options", "volumes", "warn"),
    ("options", "volumes", "rollback"),
    ("options", "volumes", "thank"),
    ("options", "volumes", "sparkle"),
    ("options", "soundMappings"),
    ("options", "wiki"),
    ("options", "showTemps"),
    ("options", "showUsers"),
    ("options", "sortQueueItems"),
    ("options", "theme"),
    ("statistics", "sessionStart"),
)


# ══════════════════════════════════════════════════════════════
# LEAF PREDICATES
# ══════════════════════════════════════════════════════════════

_WIDTH_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)vw$")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _is_unit(value: Any) -> bool:
    return _is_number(value) and 0 <= value <= 1


def _is_count(value: Any) -> bool:
    return _is_int(value) and value >= 0


def _is_positive_int(value: Any) -> bool:
    return _is_int(value) and value > 0


def _is_palette(value: Any) -> bool:
    return _is_int(value) and 0 <= value <= 3


def _is_expiry(value: Any) -> bool:
    return isinstance(value, str) and value in EXPIRY_CHOICES


def _is_provider(value: Any) -> bool:
    return isinstance(value, str) and value in AI_PROVIDERS


def _is_http_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_width(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    match = _WIDTH_PATTERN.match(value)
    return match is not None and 10 <= float(match.group(1)) <= 30


def _inferred(default: Any) -> Callable[[Any], bool]:
    if isinstance(default, bool):
        return lambda value: isinstance(value, bool)
    if isinstance(default, int):
        return _is_int
    if isinstance(default, float):
        return _is_number
    if isinstance(default, str):
        return lambda value: isinstance(value, str)
    return lambda value: type(value) is type(default)


LEAF_RULES: dict[tuple, Callable[[Any], bool]] = {
    ("settings", "theme", "palette"): _is_palette,
    ("settings", "queue", "maxSize"): _is_positive_int,
    ("settings", "queue", "maxEdits"): _is_positive_int,
    ("settings", "queue", "minOres"): _is_unit,
    ("settings", "expiry", "watchlist"): _is_expiry,
    ("settings", "ai", "provider"): _is_provider,
    ("settings", "ai", "ollama", "server"): _is_http_url,
    ("settings", "audio", "oresAlert", "threshold"): _is_unit,
    ("layout", "queue", "width"): _is_width,
    ("layout", "details", "width"): _is_width,
}
for _category in CATEGORIES:
    LEAF_RULES[("settings", "expiry", "allowList", _category)] = _is_expiry
    LEAF_RULES[("settings", "expiry", "priorityList", _category)] = _is_expiry
del _category

PREFIX_RULES: tuple[tuple[tuple, Callable[[Any], bool]], ...] = (
    (("settings", "audio", "volume"), _is_unit),
    (("statistics",), _is_count),
)


# ══════════════════════════════════════════════════════════════
# VERSION 1
# ══════════════════════════════════════════════════════════════

class Version1:
    number = 1

    LIVE_FIELDS = {
        ("settings", "autoReport", "reasons"): StringSetCodec(),
        ("controlScripts",): ControlScriptCodec(),
        **{
            (list_name, category): ExpiringEntryCodec()
            for list_name in LIST_NAMES
            for category in CATEGORIES
        },
    }

    def __init__(self):
        self._collections = {
            ("settings", "namespaces"): self._repair_namespaces,
            ("settings", "autoReport", "reasons"): self._repair_reasons,
            ("controlScripts",): self._repair_scripts,
        }
        for list_name in LIST_NAMES:
            for category in CATEGORIES:
                self._collections[(list_name, category)] = self._repair_entries

    # ── Shape ─────────────────────────────────────────────────

    def default(self) -> dict:
        return {
            VERSION_KEY: 1,
            "changelog": "3",
            "settings": {
                "theme": {"palette": 0},
                "namespaces": [0],
                "queue": {"maxSize": 100, "maxEdits": 50, "minOres": 0.0},
                "cloudStorage": {"enabled": True},
                "usernameHighlighting": {"enabled": True},
                "autoWelcome": {"enabled": True},
                "expiry": {
                    "watchlist": "1 week",
                    "allowList": {category: "indefinite" for category in CATEGORIES},
                    "priorityList": {category: "1 week" for category in CATEGORIES},
                },
                "autoReport": {
                    "enabled": True,
                    "reasons": sorted(DEFAULT_AUTO_REPORT_REASONS),
                },
                "ai": {
                    "enabled": False,
                    "provider": "Ollama",
                    "editAnalysis": {"enabled": True},
                    "usernameAnalysis": {"enabled": True},
                    "ollama": {"server": "http://localhost:11434", "model": ""},
                },
                "audio": {
                    "oresAlert": {"enabled": True, "threshold": 0.95},
                    "volume": {
                        channel: 0 if channel in MUTED_CHANNELS else 1
                        for channel in VOLUME_CHANNELS
                    },
                },
                "zenMode": {
                    "enabled": False,
                    "sound": {"enabled": True},
                    "music": {"enabled": True},
                    "alerts": {"enabled": True},
                    "notices": {"enabled": False},
                    "watchlist": {"enabled": False},
                    "editCounter": {"enabled": False},
                    "toasts": {"enabled": False},
                },
            },
            "layout": {
                "queue": {"width": "15vw"},
                "details": {"width": "15vw"},
            },
            "controlScripts": [
                _script(["arrowright"], _call("nextEdit")),
                _script([" "], _call("nextEdit")),
                _script(
                    ["q"],
                    _call("nextEdit"),
                    _call("rollback"),
                    _call("warn", warningType="Vandalism", level="auto"),
                    _if(
                        "atFinalWarning",
                        _if(
                            "operatorNonAdmin",
                            _call("reportToAIV", reportMessage="Vandalism past final warning"),
                        ),
                    ),
                    _call("prioritizeUser"),
                ),
                _script(["arrowleft"], _call("prevEdit")),
                _script(["h"], _call("openHistory")),
                _script(["c"], _call("openUserContribs")),
                _script(["t"], _call("thankUser")),
                _script(["w"], _call("welcome", template="Auto")),
            ],
            "statistics": {
                **{
                    group: {counter: 0 for counter in counters}
                    for group, counters in STATISTICS_SHAPE.items()
                },
                "sessionTime": 0,
            },
            "priorityLists": {category: [] for category in CATEGORIES},
            "allowLists": {category: [] for category in CATEGORIES},
        }

    # ── Upgrade from version 0 ────────────────────────────────

    def upgrade(self, ctx: ValidationContext) -> dict:
        require_upgrade_source(ctx, self.number)

        for path in DEPRECATED_V0_PATHS:
            ctx.deprecated(path)

        defaults = ctx.defaults
        settings = defaults["settings"]
        volume = settings["audio"]["volume"]
        stats = defaults["statistics"]

        def option(*keys, fallback, transform=None):
            return ctx.lookup(("options",) + keys, fallback, transform)

        def counter(key, fallback):
            return ctx.lookup(("statistics", key), fallback)

        def channel(legacy_key, name):
            return option("volumes", legacy_key, fallback=volume[name])

        expiry = settings["expiry"]
        zen = settings["zenMode"]

        upgraded = {
            VERSION_KEY: self.number,
            "changelog": ctx.lookup(("changelog",), defaults["changelog"]),
            "settings": {
                "theme": {
                    "palette": option("selectedPalette", fallback=settings["theme"]["palette"]),
                },
                "namespaces": option("namespacesShown", fallback=settings["namespaces"]),
                "queue": {
                    "maxSize": option("maxQueueSize", fallback=settings["queue"]["maxSize"]),
                    "maxEdits": option("maxEditCount", fallback=settings["queue"]["maxEdits"]),
                    "minOres": option("minimumORESScore", fallback=settings["queue"]["minOres"]),
                },
                "cloudStorage": {
                    "enabled": option("enableCloudStorage", fallback=settings["cloudStorage"]["enabled"]),
                },
                "usernameHighlighting": {
                    "enabled": option(
                        "enableUsernameHighlighting",
                        fallback=settings["usernameHighlighting"]["enabled"],
                    ),
                },
                "autoWelcome": {
                    "enabled": option("enableAutoWelcome", fallback=settings["autoWelcome"]["enabled"]),
                },
                "expiry": {
                    "watchlist": option("watchlistExpiry", fallback=expiry["watchlist"]),
                    "allowList": {
                        category: option(
                            "whitelistExpiry", category,
                            fallback=expiry["allowList"][category],
                        )
                        for category in CATEGORIES
                    },
                    "priorityList": {
                        category: option(
                            "highlightedExpiry", category,
                            fallback=expiry["priorityList"][category],
                        )
                        for category in CATEGORIES
                    },
                },
                "autoReport": {
                    "enabled": option("enableAutoReporting", fallback=settings["autoReport"]["enabled"]),
                    "reasons": option(
                        "selectedAutoReportReasons",
                        fallback=settings["autoReport"]["reasons"],
                        transform=_reasons_from_flags,
                    ),
                },
                "ai": {
                    "enabled": option("enableOllamaAI", fallback=settings["ai"]["enabled"]),
                    "provider": settings["ai"]["provider"],
                    "editAnalysis": {
                        "enabled": option(
                            "enableEditAnalysis",
                            fallback=settings["ai"]["editAnalysis"]["enabled"],
                        ),
                    },
                    "usernameAnalysis": {
                        "enabled": option(
                            "enableUsernameAnalysis",
                            fallback=settings["ai"]["usernameAnalysis"]["enabled"],
                        ),
                    },
                    "ollama": {
                        "server": option("ollamaServerUrl", fallback=settings["ai"]["ollama"]["server"]),
                        "model": option("ollamaModel", fallback=settings["ai"]["ollama"]["model"]),
                    },
                },
                "audio": {
                    "oresAlert": {
                        "enabled": option(
                            "enableSoundAlerts",
                            fallback=settings["audio"]["oresAlert"]["enabled"],
                        ),
                        "threshold": option(
                            "soundAlertORESScore",
                            fallback=settings["audio"]["oresAlert"]["threshold"],
                        ),
                    },
                    "volume": {
                        **volume,
                        "master": option("masterVolume", fallback=volume["master"]),
                        "master.ui.click": channel("click", "master.ui.click"),
                        "master.queue.ores": channel("alert", "master.queue.ores"),
                        "master.queue.watchlist": channel("watchlist", "master.queue.watchlist"),
                        "master.notification.alert": channel("notification", "master.notification.alert"),
                        "master.notification.notice": channel("notification", "master.notification.notice"),
                        "master.action.report": channel("report", "master.action.report"),
                        "master.action.block": channel("block", "master.action.block"),
                        "master.action.protect": channel("protection", "master.action.protect"),
                        "master.other.success": channel("success", "master.other.success"),
                        "master.other.error": channel("error", "master.other.error"),
                    },
                },
                "zenMode": {
                    "enabled": option("zen", "enabled", fallback=zen["enabled"]),
                    "sound": {"enabled": option("zen", "sounds", fallback=zen["sound"]["enabled"])},
                    "music": {"enabled": zen["music"]["enabled"]},
                    "alerts": {"enabled": option("zen", "notifications", fallback=zen["alerts"]["enabled"])},
                    "notices": {"enabled": option("zen", "notifications", fallback=zen["notices"]["enabled"])},
                    "watchlist": {"enabled": option("zen", "watchlist", fallback=zen["watchlist"]["enabled"])},
                    "editCounter": {"enabled": option("zen", "editCount", fallback=zen["editCounter"]["enabled"])},
                    "toasts": {"enabled": option("zen", "toasts", fallback=zen["toasts"]["enabled"])},
                },
            },
            "layout": {
                "queue": {"width": ctx.lookup(("queueWidth",), defaults["layout"]["queue"]["width"])},
                "details": {"width": ctx.lookup(("detailsWidth",), defaults["layout"]["details"]["width"])},
            },
            "controlScripts": option(
                "controlScripts",
                fallback=defaults["controlScripts"],
                transform=lambda value: _migrate_scripts(ctx, value),
            ),
            "statistics": {
                **stats,
                "editsReviewed": {
                    **stats["editsReviewed"],
                    "total": counter("reviewed", stats["editsReviewed"]["total"]),
                },
                "recentChangesReviewed": {
                    "total": counter("reviewed", stats["recentChangesReviewed"]["total"]),
                },
                "revertsMade": {
                    **stats["revertsMade"],
                    "total": counter("reverts", stats["revertsMade"]["total"]),
                    "fromRecentChanges": counter("reverts", stats["revertsMade"]["fromRecentChanges"]),
                },
                "usersWelcomed": {
                    "total": counter("welcomes", stats["usersWelcomed"]["total"]),
                },
                "warningsIssued": {
                    **stats["warningsIssued"],
                    "total": counter("warnings", stats["warningsIssued"]["total"]),
                },
                "reportsFiled": {
                    **stats["reportsFiled"],
                    "total": counter("reports", stats["reportsFiled"]["total"]),
                    "AIV": counter("reports", stats["reportsFiled"]["AIV"]),
                },
                "itemsAllowListed": {
                    **stats["itemsAllowListed"],
                    "total": counter("whitelisted", stats["itemsAllowListed"]["total"]),
                    "users": counter("whitelisted", stats["itemsAllowListed"]["users"]),
                },
                "itemsPrioritized": {
                    **stats["itemsPrioritized"],
                    "total": counter("highlighted", stats["itemsPrioritized"]["total"]),
                    "users": counter("highlighted", stats["itemsPrioritized"]["users"]),
                },
                "blocksIssued": {
                    "total": counter("blocks", stats["blocksIssued"]["total"]),
                },
            },
            "priorityLists": {
                category: ctx.lookup(("highlighted", category), defaults["priorityLists"][category])
                for category in CATEGORIES
            },
            "allowLists": {
                category: ctx.lookup(("whitelist", category), defaults["allowLists"][category])
                for category in CATEGORIES
            },
        }

        ctx.log.info(f"Upgraded stored data from version 0 to version {self.number}.")
        return copy_tree(upgraded)

    # ── Validate ──────────────────────────────────────────────

    def validate(self, ctx: ValidationContext) -> bool:
        found = read_version_tag(ctx.document)
        if not is_version_tag(found, self.number):
            ctx.log.error(
                f"Stored data version {describe(found)} does not match "
                f"expected version {self.number}."
            )
            return False

        self._repair(ctx, (), ctx.defaults)
        return True

    def _repair(self, ctx: ValidationContext, path: tuple, default: Any) -> None:
        handler = self._collections.get(path)
        if handler is not None:
            handler(ctx, path)
            return

        value = ctx.get(path)
        if isinstance(default, dict):
            if not ctx.restrict(value, path):
                return
            for key, child in default.items():
                child_path = path + (key,)
                if not ctx.exists(child_path):
                    ctx.log.warn(
                        f"Missing expected key path [ {format_path(child_path)} ] "
                        f"in stored data, defaulting to fallback value."
                    )
                    ctx.set(child_path, ctx.default_at(child_path))
                    continue
                self._repair(ctx, child_path, child)
            return

        if not self._predicate(path, default)(value):
            ctx.reset(path)

    @staticmethod
    def _predicate(path: tuple, default: Any) -> Callable[[Any], bool]:
        rule = LEAF_RULES.get(path)
        if rule is not None:
            return rule
        for prefix, prefix_rule in PREFIX_RULES:
            if path[:len(prefix)] == prefix:
                return prefix_rule
        return _inferred(default)

    # ── Collection repair ─────────────────────────────────────

    def _repair_namespaces(self, ctx: ValidationContext, path: tuple) -> None:
        value = ctx.get(path)
        if not isinstance(value, list):
            ctx.reset(path)
            return

        kept: list[int] = []
        for item in value:
            if not _is_int(item) or item not in ctx.catalog.namespaces:
                ctx.log.warn(f"Removing invalid namespace ID [ {describe(item)} ] from stored data.")
            elif item in kept:
                ctx.log.warn(f"Removing duplicate namespace ID [ {item!r} ] from stored data.")
            else:
                kept.append(item)
        ctx.set(path, kept)

    def _repair_reasons(self, ctx: ValidationContext, path: tuple) -> None:
        value = ctx.get(path)
        if not isinstance(value, list):
            ctx.reset(path)
            return

        kept: list[str] = []
        for item in value:
            if not isinstance(item, str) or item not in ctx.catalog.warning_templates:
                ctx.log.warn(
                    f"Removing invalid warning template [ {describe(item)} ] "
                    f"at key path [ {format_path(path)} ]."
                )
            elif item not in kept:
                kept.append(item)
        ctx.set(path, kept)

    def _repair_scripts(self, ctx: ValidationContext, path: tuple) -> None:
        ScriptSanitizer(ctx).sanitize(path)

    def _repair_entries(self, ctx: ValidationContext, path: tuple) -> None:
        value = ctx.get(path)
        if not isinstance(value, list):
            ctx.reset(path)
            return

        kept = []
        for index, entry in enumerate(value):
            if is_wire_entry(entry):
                kept.append(entry)
            else:
                ctx.log.warn(
                    f"Removing invalid entry at key path "
                    f"[ {format_path(path + (index,))} ]."
                )
        ctx.set(path, kept)

    # ── Wire ↔ live ───────────────────────────────────────────

    def to_live(self, ctx: ValidationContext) -> dict:
        return convert_fields(ctx, self.number, self.LIVE_FIELDS, "decode")

    def to_wire(self, ctx: ValidationContext) -> dict:
        return convert_fields(ctx, self.number, self.LIVE_FIELDS, "encode")


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def _call(name: str, **params: str) -> dict:
    return {"name": name, "params": dict(params)}


def _if(condition: str, *actions: dict) -> dict:
    return {"name": CONDITIONAL_NAME, "condition": condition, "actions": list(actions)}


def _script(keys: list, *actions: dict) -> dict:
    return {"keys": list(keys), "actions": list(actions)}


def _reasons_from_flags(value: Any) -> Any:
    """v0 stored {reason: bool}; v1 stores the enabled reasons."""
    if not isinstance(value, dict):
        return MISSING

    flags: dict[str, Any] = {}
    for reason, enabled in value.items():
        flags[REASON_RENAMES.get(reason, reason)] = enabled
    return [reason for reason, enabled in flags.items() if enabled is True]


def _migrate_scripts(ctx: ValidationContext, value: Any) -> Any:
    """Rename legacy identifiers inside v0 control scripts; structure is left to validate."""
    if not isinstance(value, list):
        return MISSING

    for index, script in enumerate(value):
        if isinstance(script, dict) and isinstance(script.get("actions"), list):
            script["actions"] = _migrate_actions(
                ctx, script["actions"], ("controlScripts", index, "actions"), depth=1
            )
    return value


def _migrate_actions(ctx: ValidationContext, actions: list, path: tuple, depth: int) -> list:
    # Conditionals past max_action_depth are left as-is; validate removes them.
    kept = []
    for index, action in enumerate(actions):
        if not isinstance(action, dict) or not isinstance(action.get("name"), str):
            kept.append(action)
            continue

        name = action["name"]
        if name == CONDITIONAL_NAME:
            if depth <= ctx.settings.max_action_depth and isinstance(action.get("actions"), list):
                action["actions"] = _migrate_actions(
                    ctx, action["actions"], path + (index, "actions"), depth + 1
                )
            kept.append(action)
            continue

        if name in LEGACY_ACTION_IDS:
            action["name"] = LEGACY_ACTION_IDS[name]

        params = action.get("params")
        if isinstance(params, dict):
            if name == "welcome" and isinstance(params.get("template"), str):
                template = params["template"]
                if template in DROPPED_WELCOME_TEMPLATES:
                    ctx.log.warn(
                        f'Skipped deprecated "{template}" welcome template at key path '
                        f"[ {format_path(path + (index, 'params', 'template'))} ].",
                        expected=True,
                    )
                    continue
                params["template"] = WELCOME_TEMPLATE_RENAMES.get(template, template)

            if name == "warn" and isinstance(params.get("warningType"), str):
                warning_type = params["warningType"]
                params["warningType"] = WARNING_TYPE_RENAMES.get(warning_type, warning_type)

        kept.append(action)
    return kept
