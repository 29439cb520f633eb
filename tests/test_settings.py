"""Tests for JSON settings and session preferences."""

import json
from pathlib import Path

import pytest

from core.models import MAX_COUNT, MIN_COUNT, SessionPreferences
from infrastructure import paths
from infrastructure.settings import JsonSettings, load_preferences, save_preferences


def test_missing_settings_file_gives_defaults(tmp_path: Path) -> None:
    settings = JsonSettings(tmp_path / "settings.json")

    assert settings.get("session.minutes") is None
    assert settings.get("session.minutes", 5) == 5
    assert load_preferences(settings) == SessionPreferences()


def test_dotted_keys_round_trip_through_disk(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "settings.json"
    settings = JsonSettings(path)

    settings.set("session.count", 12)
    settings.set("folder_path", "/art/refs")
    settings.save()

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "session": {"count": 12},
        "folder_path": "/art/refs",
    }
    assert JsonSettings(path).get("session.count") == 12


def test_corrupt_settings_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2", encoding="utf-8")

    assert JsonSettings(path).get("folder_path", "") == ""


def test_preferences_round_trip(tmp_path: Path) -> None:
    settings = JsonSettings(tmp_path / "settings.json")
    prefs = SessionPreferences(
        folder_path="/refs",
        minutes=0,
        count=15,
        infinite=True,
        prioritize_low_draw=False,
        history_enabled=False,
    )

    save_preferences(settings, prefs)

    assert load_preferences(JsonSettings(tmp_path / "settings.json")) == prefs


def test_invalid_preference_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"folder_path": 7, "session": {"minutes": "soon", "count": 500}}),
        encoding="utf-8",
    )

    prefs = load_preferences(JsonSettings(path))

    assert prefs.folder_path == ""
    assert prefs.minutes == 1
    assert prefs.count == MAX_COUNT


@pytest.mark.parametrize("value,expected", [(0, MIN_COUNT), (7, 7), (99, MAX_COUNT)])
def test_adjust_count_clamps(value: int, expected: int) -> None:
    prefs = SessionPreferences()

    prefs.adjust_count(value)

    assert prefs.count == expected


def test_data_dir_honors_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(paths.HOME_ENV_VAR, str(tmp_path))

    assert paths.get_settings_path() == tmp_path / "settings.json"
    assert paths.get_history_path() == tmp_path / "history.json"
    assert paths.get_metadata_path() == tmp_path / "metadata.json"
    assert paths.get_log_directory() == tmp_path / "logs"
