"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.models import SessionPreferences


class JsonSettings:
    """Lightweight JSON settings store with dotted-key access.

    A missing file is treated as empty settings; `save()` creates it.
    """

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        self._data: dict[str, Any] = {}
        if self._path.exists():
            try:
                with self._path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self._data = loaded
                else:
                    logger.warning("Ignoring non-object settings file: {}", self._path)
            except (OSError, ValueError) as ex:
                logger.warning("Settings read failed for {}: {}", self._path, ex)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Set dotted `key` to `value`, creating intermediate objects."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def save(self) -> None:
        """Write settings to disk; failures are logged, not raised."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError as ex:
            logger.error("Settings write failed for {}: {}", self._path, ex)


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def load_preferences(settings: JsonSettings) -> SessionPreferences:
    """Read `SessionPreferences` from settings, keeping defaults for invalid values."""
    prefs = SessionPreferences()
    folder = settings.get("folder_path", "")
    prefs.folder_path = folder if isinstance(folder, str) else ""
    prefs.minutes = max(0, _as_int(settings.get("session.minutes", prefs.minutes), prefs.minutes))
    prefs.adjust_count(_as_int(settings.get("session.count", prefs.count), prefs.count))
    prefs.infinite = bool(settings.get("session.infinite", prefs.infinite))
    prefs.prioritize_low_draw = bool(
        settings.get("session.prioritize_low_draw", prefs.prioritize_low_draw)
    )
    prefs.history_enabled = bool(settings.get("history.enabled", prefs.history_enabled))
    return prefs


def save_preferences(settings: JsonSettings, prefs: SessionPreferences) -> None:
    settings.set("folder_path", prefs.folder_path)
    settings.set("session.minutes", prefs.minutes)
    settings.set("session.count", prefs.count)
    settings.set("session.infinite", prefs.infinite)
    settings.set("session.prioritize_low_draw", prefs.prioritize_low_draw)
    settings.set("history.enabled", prefs.history_enabled)
    settings.save()
