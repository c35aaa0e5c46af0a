"""
Tests for patrol.config — storage engine settings.
"""

import pytest

from patrol.config import settings as settings_module
from patrol.config.settings import StorageSettings, get_storage_settings


class TestStorageSettings:
    def test_defaults(self):
        settings = StorageSettings()
        assert settings.echo_logs is False
        assert settings.max_action_depth == 32
        assert settings.max_text_length == 4194304

    def test_frozen(self):
        settings = StorageSettings()
        with pytest.raises(Exception):
            settings.echo_logs = True

    @pytest.mark.parametrize("value", ["true", 1, None])
    def test_rejects_non_bool_echo(self, value):
        with pytest.raises(ValueError, match="echo_logs"):
            StorageSettings(echo_logs=value)

    @pytest.mark.parametrize("value", [0, -3, True, 2.5, "8"])
    def test_rejects_bad_depth(self, value):
        with pytest.raises(ValueError, match="max_action_depth"):
            StorageSettings(max_action_depth=value)

    @pytest.mark.parametrize("value", [3, 0, False, 100.0])
    def test_rejects_bad_text_length(self, value):
        with pytest.raises(ValueError, match="max_text_length"):
            StorageSettings(max_text_length=value)


class TestGetStorageSettings:
    def test_reads_module_defaults(self, monkeypatch):
        monkeypatch.setattr(settings_module, "ECHO_LOGS", True)
        monkeypatch.setattr(settings_module, "MAX_ACTION_DEPTH", 4)
        monkeypatch.setattr(settings_module, "MAX_TEXT_LENGTH", 1024)

        settings = get_storage_settings()

        assert settings == StorageSettings(
            echo_logs=True,
            max_action_depth=4,
            max_text_length=1024,
        )

    def test_invalid_environment_value_rejected(self, monkeypatch):
        monkeypatch.setattr(settings_module, "MAX_ACTION_DEPTH", 0)
        with pytest.raises(ValueError):
            get_storage_settings()
