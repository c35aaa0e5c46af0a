"""
Patrol Storage — Schema Version 0
===================================
The legacy flat layout written by the first releases.
Kept for migration only: nothing upgrades into it and it has no
collection codecs.
"""

from __future__ import annotations

from patrol.storage.context import ValidationContext, describe
from patrol.storage.errors import InvalidUpgradeAttempt
from patrol.storage.versions.base import (
    VERSION_KEY,
    convert_fields,
    is_version_tag,
    read_version_tag,
)


class Version0:
    number = 0

    def default(self) -> dict:
        return {
            VERSION_KEY: 0,
            "changelog": "0",
            "options": {
                "maxQueueSize": 50,
                "maxEditCount": 50,
                "minimumORESScore": 0,
                "enableSoundAlerts": True,
                "soundAlertORESScore": 0.95,
                "enableUsernameHighlighting": True,
                "enableWelcomeLatin": False,
                "enableAutoWelcome": False,
                "enableEditAnalysis": False,
                "enableUsernameAnalysis": False,
                "enableAutoReporting": True,
                "selectedAutoReportReasons": {
                    "Vandalism": True,
                    "Subtle vandalism": True,
                    "Image vandalism": True,
                    "Sandbox": True,
                    "Unsourced": True,
                    "Unsourced (BLP)": True,
                    "Unsourced genre": True,
                    "POV": False,
                    "Commentary": True,
                    "AI-generated": True,
                    "AI-generated (talk)": True,
                    "MOS violation": False,
                    "Censoring": False,
                    "Disruption": True,
                    "Deleting": True,
                    "Errors": True,
                    "Editing tests": True,
                    "Chatting": False,
                    "Jokes": True,
                    "Owning": False,
                    "Advertising": True,
                    "Spam links": True,
                    "Personal attacks": True,
                    "TPO": True,
                    "AfD removal": True,
                },
                "zen": {
                    "enabled": False,
                    "sounds": True,
                    "watchlist": False,
                    "notifications": True,
                    "editCount": False,
                    "toasts": False,
                },
                "enableCloudStorage": True,
                "masterVolume": 0.5,
                "volumes": {
                    name: 0.5
                    for name in (
                        "click", "notification", "watchlist", "alert",
                        "whoosh", "warn", "rollback", "report", "thank",
                        "protection", "block", "sparkle", "success", "error",
                    )
                },
                "soundMappings": {
                    "click": "click",
                    "notification": "notify",
                    "watchlist": "ping",
                    "alert": "alert",
                    "whoosh": "whoosh",
                    "warn": "warn",
                    "rollback": "rollback",
                    "report": "report",
                    "thank": "thank",
                    "protection": "protection",
                    "block": "block",
                    "sparkle": "sparkle",
                    "success": "success",
                    "error": "error",
                },
                "watchlistExpiry": "1 week",
                "whitelistExpiry": {
                    "users": "indefinite",
                    "pages": "indefinite",
                    "tags": "indefinite",
                },
                "highlightedExpiry": {
                    "users": "1 week",
                    "pages": "1 week",
                    "tags": "1 week",
                },
                "wiki": "en",
                "namespacesShown": [0],
                "showTemps": True,
                "showUsers": True,
                "sortQueueItems": True,
                "enableOllamaAI": False,
                "ollamaServerUrl": "http://localhost:11434",
                "ollamaModel": "",
                "controlScripts": [
                    {"keys": ["arrowright"], "actions": [{"name": "nextEdit", "params": {}}]},
                    {"keys": [" "], "actions": [{"name": "nextEdit", "params": {}}]},
                    {
                        "keys": ["q"],
                        "actions": [
                            {"name": "nextEdit", "params": {}},
                            {"name": "rollback", "params": {}},
                            {
                                "name": "warn",
                                "params": {"warningType": "Vandalism", "level": "auto"},
                            },
                            {
                                "name": "if",
                                "condition": "atFinalWarning",
                                "actions": [
                                    {
                                        "name": "if",
                                        "condition": "operatorNonAdmin",
                                        "actions": [
                                            {
                                                "name": "reportToAIV",
                                                "params": {
                                                    "reportMessage": "Vandalism past final warning",
                                                },
                                            },
                                        ],
                                    },
                                ],
                            },
                            {"name": "highlightUser", "params": {}},
                        ],
                    },
                    {"keys": ["arrowleft"], "actions": [{"name": "prevEdit", "params": {}}]},
                    {"keys": ["h"], "actions": [{"name": "openHistory", "params": {}}]},
                    {"keys": ["c"], "actions": [{"name": "openUserContribs", "params": {}}]},
                    {"keys": ["t"], "actions": [{"name": "thankUser", "params": {}}]},
                    {
                        "keys": ["w"],
                        "actions": [{"name": "welcome", "params": {"template": "Mentor"}}],
                    },
                ],
                "selectedPalette": 0,
                "theme": "theme-light",
            },
            "statistics": {
                "reviewed": 0,
                "reverts": 0,
                "reports": 0,
                "warnings": 0,
                "welcomes": 0,
                "whitelisted": 0,
                "highlighted": 0,
                "blocks": 0,
                "sessionStart": 0,
            },
            "whitelist": {"users": [], "pages": [], "tags": []},
            "highlighted": {"users": [], "pages": [], "tags": []},
            "queueWidth": "15vw",
            "detailsWidth": "15vw",
        }

    def upgrade(self, ctx: ValidationContext) -> dict:
        found = read_version_tag(ctx.document)
        ctx.log.dev_error(
            f"[INVALID_UPGRADE_ATTEMPT] Attempted to upgrade from version "
            f"{describe(found)} to version 0; no earlier version exists."
        )
        raise InvalidUpgradeAttempt(found, self.number)

    def validate(self, ctx: ValidationContext) -> bool:
        ctx.restrict(ctx.document, ())

        found = read_version_tag(ctx.document)
        if not is_version_tag(found, self.number):
            ctx.log.error(
                f"Stored data version {describe(found)} does not match "
                f"expected version {self.number}."
            )
            return False
        return True

    def to_live(self, ctx: ValidationContext) -> dict:
        return convert_fields(ctx, self.number, {}, "decode")

    def to_wire(self, ctx: ValidationContext) -> dict:
        return convert_fields(ctx, self.number, {}, "encode")
