"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Setup page choices
MINUTE_PRESETS: list[int] = [1, 2, 5, 10]
THUMB_SIZE: int = 120

# Session page
SESSION_IMAGE_MAX_SIDE: int = 2048

# Keyboard shortcuts on the session page
DEFAULT_SHORTCUTS: dict[str, str] = {
    "next_image": "Space",
    "previous_image": "Left",
    "skip_image": "Right",
    "toggle_pause": "P",
    "stop_session": "Escape",
}

# Data roles
PATH_ROLE: int = Qt.UserRole  # full image path on list items
LOG_ID_ROLE: int = Qt.UserRole + 1  # session log id on history items
DAY_ROLE: int = Qt.UserRole + 2  # ISO date on history day sections

# Stacked page indices
PAGE_SETUP: int = 0
PAGE_SESSION: int = 1
PAGE_SUMMARY: int = 2
PAGE_HISTORY: int = 3
