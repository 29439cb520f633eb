"""Locations of the application's data files."""

from __future__ import annotations

import os
from pathlib import Path

APP_DIR_NAME = "GestureDraw"
HOME_ENV_VAR = "GESTURE_DRAW_HOME"


def get_app_data_dir() -> Path:
    """Return the per-user data directory (settings, metadata, history, logs)."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(os.path.expanduser(override))
    if os.name == "nt":  # Windows
        return Path.home() / "AppData" / "Local" / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME


def get_settings_path() -> Path:
    return get_app_data_dir() / "settings.json"


def get_metadata_path() -> Path:
    return get_app_data_dir() / "metadata.json"


def get_history_path() -> Path:
    return get_app_data_dir() / "history.json"


def get_log_directory() -> Path:
    return get_app_data_dir() / "logs"
