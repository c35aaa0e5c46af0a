"""
Patrol Catalog — Built-in Identifiers
=======================================
The identifiers shipped with the client. The default settings
document only references ids declared here, so a default document
always survives validation unchanged.
"""

from __future__ import annotations

from patrol.catalog.models import (
    PARAM_CHOICE,
    PARAM_TEXT,
    ActionSpec,
    ConditionSpec,
    ParameterSpec,
)
from patrol.catalog.provider import InMemoryCatalog


# ══════════════════════════════════════════════════════════════
# NAMESPACES — wiki namespace ids the queue may show
# ══════════════════════════════════════════════════════════════

NAMESPACE_IDS = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
    100, 101, 118, 119, 126, 127, 710, 711, 828, 829, 1728, 1729,
)


# ══════════════════════════════════════════════════════════════
# WARNING TEMPLATES
# ══════════════════════════════════════════════════════════════

WARNING_TEMPLATES = (
    "Vandalism",
    "Subtle vandalism",
    "Image vandalism",
    "Sandbox",
    "Deliberate errors",
    "Disruptive editing",
    "Editing tests",
    "Commentary",
    "Inappropriate jokes",
    "Deleting",
    "Unsourced",
    "Unsourced (BLP)",
    "Unsourced genre",
    "Original research",
    "POV",
    "Censoring",
    "AI-generated",
    "AI-generated (talk)",
    "MOS violation",
    "English variant",
    "Not English",
    "Personal attacks",
    "Harassment",
    "TPO",
    "Chatting",
    "Owning",
    "AfD removal",
    "Edit warring",
    "Gaming the system",
    "Advertising",
    "Spam links",
    "COI edits",
    "COI user",
    "No edit summary",
    "Inappropriate edit summary",
    "Misleading edit summary",
    "Minor edit abuse",
)

WELCOME_TEMPLATES = (
    "Auto",
    "Default",
    "Basic",
    "Non-Latin",
    "Vandalism fighter",
    "Personal",
    "Cookie",
    "Kitten",
    "Graphical",
    "Screen",
    "Autobiography",
    "COI",
)


# ══════════════════════════════════════════════════════════════
# TRIGGER KEYS
# ══════════════════════════════════════════════════════════════

TRIGGER_KEYS = (
    "!", "@", "#", "$", "%", "^", "&", "*", "(", ")",
    "1", "2", "3", "4", "5", "6", "7", "8", "9", "0",
    "q", "w", "e", "r", "t", "y", "u", "i", "o", "p",
    "a", "s", "d", "f", "g", "h", "j", "k", "l",
    "z", "x", "c", "v", "b", "n", "m",
    "-", "=", "[", "]", "\\", ";", "'", ",", ".", "/", "enter",
    "_", "+", "{", "}", "|", ":", "\"", "<", ">", "?", " ",
    "arrowleft", "arrowup", "arrowdown", "arrowright",
)


# ══════════════════════════════════════════════════════════════
# ACTIONS
# ══════════════════════════════════════════════════════════════

def _text(param_id: str) -> ParameterSpec:
    return ParameterSpec(id=param_id, kind=PARAM_TEXT)


def _choice(param_id: str, *options: str) -> ParameterSpec:
    return ParameterSpec(id=param_id, kind=PARAM_CHOICE, options=tuple(options))


_NO_PARAMETER_ACTIONS = (
    "toggleZenMode",
    "prevEdit",
    "nextEdit",
    "deleteQueue",
    "openRevertMenu",
    "openWarnMenu",
    "openReportMenu",
    "openSettings",
    "openUserPage",
    "openUserTalk",
    "openUserContribs",
    "openFilterLog",
    "switchToRecentQueue",
    "switchToFlaggedQueue",
    "switchToWatchlistQueue",
    "allowListUser",
    "allowListPage",
    "unallowListUser",
    "unallowListPage",
    "prioritizeUser",
    "prioritizePage",
    "unprioritizeUser",
    "unprioritizePage",
    "openPage",
    "openTalk",
    "openHistory",
    "openRevision",
    "openDiff",
    "thankUser",
    "protect",
    "toggleConsecutive",
)

_PARAMETERIZED_ACTIONS = (
    ActionSpec("acceptFlaggedEdit", (_text("reason"),)),
    ActionSpec("rejectFlaggedEdit", (_text("reason"),)),
    ActionSpec(
        "warn",
        (
            _choice("warningType", *WARNING_TEMPLATES),
            _choice("level", "auto", "0", "1", "2", "3", "4", "4im"),
        ),
    ),
    ActionSpec("rollback", (_text("summary"),)),
    ActionSpec("rollbackGoodFaith", (_text("summary"),)),
    ActionSpec("undo", (_text("reason"),)),
    ActionSpec(
        "reportToAIV",
        (
            _choice(
                "reportMessage",
                "Vandalism past final warning",
                "Vandalism-only account",
                "Long-term abuse",
            ),
            _text("comment"),
        ),
    ),
    ActionSpec(
        "reportToUAA",
        (
            _choice(
                "reportMessage",
                "Disruptive username",
                "Offensive username",
                "Promotional username",
                "Misleading username",
            ),
            _text("comment"),
        ),
    ),
    ActionSpec(
        "requestProtection",
        (
            _choice(
                "level",
                "Semi-protection",
                "Extended-confirmed protection",
                "Full protection",
                "Pending changes protection",
            ),
            _choice(
                "reason",
                "Persistent vandalism",
                "Edit warring",
                "BLP violations",
                "Sockpuppetry",
                "Arbitration enforcement",
            ),
            _text("comment"),
        ),
    ),
    ActionSpec(
        "block",
        (
            _choice(
                "blockSummary",
                "[[Wikipedia:Vandalism|Vandalism]]",
                "[[Wikipedia:DISRUPTONLY|Vandalism-only account]]",
                "Long-term abuse",
            ),
            _choice(
                "duration",
                "31 hours", "1 week", "2 weeks", "1 month", "3 months",
                "6 months", "1 year", "3 years", "infinite",
            ),
        ),
    ),
    ActionSpec("welcome", (_choice("template", *WELCOME_TEMPLATES),)),
)


# ══════════════════════════════════════════════════════════════
# CONDITIONS
# ══════════════════════════════════════════════════════════════

_CONDITIONS = (
    ConditionSpec("operatorNonAdmin", "You are not an admin"),
    ConditionSpec("operatorAdmin", "You are an admin"),
    ConditionSpec("userIsPrioritized", "User is on the priority list"),
    ConditionSpec("pageIsPrioritized", "Page is on the priority list"),
    ConditionSpec("userIsAllowListed", "User is on the allow list"),
    ConditionSpec("pageIsAllowListed", "Page is on the allow list"),
    ConditionSpec("userIsAnon", "User is anonymous (IP or temporary account)"),
    ConditionSpec("userIsIP", "User is an IP address"),
    ConditionSpec("userIsTemp", "User is a temporary account"),
    ConditionSpec("userIsRegistered", "User is registered"),
    ConditionSpec("userHasEmptyTalkPage", "User has an empty talk page"),
    ConditionSpec("editIsMinor", "Edit is marked as minor"),
    ConditionSpec("editIsMajor", "Edit is not marked as minor"),
    ConditionSpec("editSizeNegative", "Edit removes content"),
    ConditionSpec("editSizePositive", "Edit adds content"),
    ConditionSpec("editSizeLarge", "Edit changes more than 1000 bytes"),
    ConditionSpec("userEditCountLow", "User has fewer than 10 edits"),
    ConditionSpec("userEditCountHigh", "User has 100 or more edits"),
    ConditionSpec("atFinalWarning", "User already has a final warning"),
    ConditionSpec("userHasWarnings", "User has received warnings"),
    ConditionSpec("userNoWarnings", "User has no warnings"),
)


def build_default_catalog() -> InMemoryCatalog:
    """Return the catalog of identifiers shipped with the client."""
    actions = tuple(ActionSpec(action_id) for action_id in _NO_PARAMETER_ACTIONS)
    return InMemoryCatalog(
        namespaces=NAMESPACE_IDS,
        warning_templates=WARNING_TEMPLATES,
        trigger_keys=TRIGGER_KEYS,
        actions=actions + _PARAMETERIZED_ACTIONS,
        conditions=_CONDITIONS,
    )
