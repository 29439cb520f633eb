"""ViewModel orchestrating folder loading, setup choices, sessions and history."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from app.viewmodels.image_vm import ImageVM
from core.models import SessionPreferences
from core.services.catalog_service import ImageCatalog
from core.services.history_service import HistoryRecorder
from core.services.history_summary import HistorySection, build_sections, session_days
from core.services.session_engine import SessionEngine

Scanner = Callable[[str], Iterable[str]]
PreferencesSink = Callable[[SessionPreferences], None]


class MainVM:
    """Main application view-model.

    Toolkit-free: views call these methods and read its properties; everything
    that outlives the process goes through the catalog, the history recorder,
    or the preferences sink.
    """

    def __init__(
        self,
        catalog: ImageCatalog,
        history: HistoryRecorder,
        engine: SessionEngine,
        scanner: Scanner,
        preferences: SessionPreferences | None = None,
        save_preferences: PreferencesSink | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            catalog: Image catalog shared with the engine.
            history: History recorder shared with the engine.
            engine: Session engine.
            scanner: Callable returning image paths found in a folder.
            preferences: Initial setup choices (defaults when omitted).
            save_preferences: Called with the preferences after every change.
        """
        self._catalog = catalog
        self._history = history
        self._engine = engine
        self._scanner = scanner
        self.preferences = preferences or SessionPreferences()
        self._save_preferences = save_preferences
        self._history.enabled = self.preferences.history_enabled
        self.notices: list[str] = []
        if self._catalog.on_error is None:
            self._catalog.on_error = self.notify
        if self._history.on_error is None:
            self._history.on_error = self.notify

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    # Catalog
    @property
    def images(self) -> list[ImageVM]:
        return [ImageVM(record) for record in self._catalog.records]

    @property
    def included_count(self) -> int:
        return self._catalog.included_count

    @property
    def total_count(self) -> int:
        return self._catalog.total_count

    @property
    def selection_label(self) -> str:
        return f"{self.included_count}/{self.total_count} images selected"

    def load_folder(self, path: str | None = None) -> int:
        """Rescan `path` (or the configured folder). Returns the number of images found."""
        folder = self.preferences.folder_path if path is None else path
        if not folder:
            self._catalog.load_folder([])
            return 0
        paths = list(self._scanner(folder))
        self._catalog.load_folder(paths)
        return len(paths)

    def set_folder(self, path: str) -> int:
        self.preferences.folder_path = path
        self._persist_preferences()
        logger.info("Image folder set: {}", path)
        return self.load_folder(path)

    def toggle_include(self, image_id: str, included: bool) -> bool:
        return self._catalog.set_included(image_id, included)

    def set_all_included(self, included: bool) -> None:
        self._catalog.set_all_included(included)

    # Setup choices
    def set_minutes(self, minutes: int) -> None:
        self.preferences.minutes = max(0, int(minutes))
        self._persist_preferences()

    def adjust_count(self, value: int) -> None:
        self.preferences.adjust_count(value)
        self._persist_preferences()

    def set_infinite(self, infinite: bool) -> None:
        self.preferences.infinite = bool(infinite)
        self._persist_preferences()

    def set_prioritize_low_draw(self, enabled: bool) -> None:
        self.preferences.prioritize_low_draw = bool(enabled)
        self._persist_preferences()

    def set_history_enabled(self, enabled: bool) -> None:
        self.preferences.history_enabled = bool(enabled)
        self._history.enabled = bool(enabled)
        self._persist_preferences()

    # Sessions
    def start_session(self) -> bool:
        """Start a session from the current setup choices; False if nothing is included."""
        prefs = self.preferences
        started = self._engine.start(
            prefs.target(),
            prefs.minutes,
            self._catalog.included_pool(),
            prefs.prioritize_low_draw,
        )
        if not started:
            self.notify("Select at least one image to start a session.")
        return started

    def start_session_with(self, image_id: str) -> bool:
        """Draw one specific image now, as from a gallery or history double-click."""
        self.preferences.infinite = True
        self._persist_preferences()
        return self._engine.start_single(
            image_id, self.preferences.minutes, self.preferences.prioritize_low_draw
        )

    def end_session(self) -> bool:
        """Finish the running session, if any, before the user leaves the session page."""
        if not self._engine.is_active:
            return False
        self._engine.stop()
        return True

    # History
    def history_sections(self) -> list[HistorySection]:
        return build_sections(self._history.logs)

    def session_days(self, year: int, month: int) -> set[int]:
        """Days of the month with at least one logged session, for the calendar."""
        return session_days(self._history.logs, year, month)

    def delete_history_entry(self, log_id: str) -> bool:
        return self._history.delete(log_id)

    def clear_history(self) -> None:
        self._history.clear()

    def clear_draw_history(self) -> None:
        self._catalog.reset_draw_counts()

    def reset_everything(self) -> None:
        """Clear history, forget all image data, and unset the folder."""
        self._engine.reset()
        self._history.clear()
        self._catalog.reset()
        self.preferences.folder_path = ""
        self._persist_preferences()
        logger.info("All data reset")

    # Notices
    def notify(self, message: str) -> None:
        """Queue a non-fatal message for the status bar."""
        logger.info("Notice: {}", message)
        self.notices.append(message)

    def take_notices(self) -> list[str]:
        pending, self.notices = self.notices, []
        return pending

    def _persist_preferences(self) -> None:
        if self._save_preferences is not None:
            self._save_preferences(self.preferences)
