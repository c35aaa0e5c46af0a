"""
Tests for scripts/inspect_storage.py — diagnostic runner.
"""

import importlib.util
import json
import logging
from pathlib import Path

import pytest

from patrol.storage import Version0, Version1, encode_text


SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "inspect_storage.py"


@pytest.fixture(scope="module")
def inspect_storage():
    spec = importlib.util.spec_from_file_location("inspect_storage", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def printed_document(output: str) -> dict:
    _, _, body = output.partition("[wire-document]\n")
    return json.loads(body)


class TestRun:
    def test_valid_text(self, inspect_storage, capsys):
        code = inspect_storage.run(encode_text(Version1().default()))
        assert code == 0
        assert printed_document(capsys.readouterr().out) == Version1().default()

    def test_migrated_text_is_expected(self, inspect_storage, capsys):
        code = inspect_storage.run(encode_text(Version0().default()))
        assert code == 0
        assert printed_document(capsys.readouterr().out)["schemaVersion"] == 1

    def test_garbage_reports_anomalies(self, inspect_storage, capsys, caplog):
        caplog.set_level(logging.INFO, logger="patrol.storage")
        code = inspect_storage.run("not-valid-text")
        assert code == 2
        assert printed_document(capsys.readouterr().out) == Version1().default()
        assert "decode:" in caplog.text
        assert "unexpected" in caplog.text

    def test_reset(self, inspect_storage, capsys):
        code = inspect_storage.run(None, reset=True)
        assert code == 0
        assert printed_document(capsys.readouterr().out) == Version1().default()


class TestMain:
    def test_reads_file(self, inspect_storage, tmp_path, capsys):
        saved = tmp_path / "saved.txt"
        saved.write_text(encode_text(Version1().default()) + "\n", encoding="utf-8")
        assert inspect_storage.main([str(saved)]) == 0
        assert "[wire-document]" in capsys.readouterr().out

    def test_reset_flag(self, inspect_storage, capsys):
        assert inspect_storage.main(["--reset"]) == 0
        assert "[wire-document]" in capsys.readouterr().out
