"""Tests for options loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from schedcheck.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def _no_options_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SCHEDCHECK_OPTIONS_PATH", str(tmp_path / "missing.json"))
    for name in (
        "SCHEDCHECK_DISABLED_RULES",
        "SCHEDCHECK_TEXT_LENGTH_LIMIT",
        "SCHEDCHECK_MIN_NOTE_WORDS",
        "SCHEDCHECK_WORKING_HOURS_START",
        "SCHEDCHECK_WORKING_HOURS_END",
        "SCHEDCHECK_ENABLE_IDENTITY_RULES",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings()
        assert settings == Settings()
        assert settings.text_length_limit == 5000
        assert settings.disabled_rules == []

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDCHECK_DISABLED_RULES", "working-hours, notes-quality")
        monkeypatch.setenv("SCHEDCHECK_TEXT_LENGTH_LIMIT", "2000")
        monkeypatch.setenv("SCHEDCHECK_ENABLE_IDENTITY_RULES", "true")
        settings = load_settings()
        assert settings.disabled_rules == ["working-hours", "notes-quality"]
        assert settings.text_length_limit == 2000
        assert settings.enable_identity_rules is True

    def test_env_invalid_int_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDCHECK_MIN_NOTE_WORDS", "several")
        assert load_settings().min_note_words == 2

    def test_options_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        opts = tmp_path / "options.json"
        opts.write_text(json.dumps({"working_hours_start": 9, "disabled_rules": ["phone-format"]}))
        monkeypatch.setenv("SCHEDCHECK_OPTIONS_PATH", str(opts))
        settings = load_settings()
        assert settings.working_hours_start == 9
        assert settings.working_hours_end == 20
        assert settings.disabled_rules == ["phone-format"]

    def test_options_file_out_of_range(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        opts = tmp_path / "options.json"
        opts.write_text(json.dumps({"text_length_limit": 0}))
        monkeypatch.setenv("SCHEDCHECK_OPTIONS_PATH", str(opts))
        with pytest.raises(ValidationError):
            load_settings()

    def test_inverted_working_hours_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDCHECK_WORKING_HOURS_START", "18")
        monkeypatch.setenv("SCHEDCHECK_WORKING_HOURS_END", "9")
        with pytest.raises(ValidationError, match="working_hours_start"):
            load_settings()

    def test_empty_working_window_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(working_hours_start=12, working_hours_end=12)
