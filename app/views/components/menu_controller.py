"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenuBar


# Actions that leave the session page; unavailable while a session runs
SESSION_LOCKED_ACTIONS: tuple[str, ...] = (
    "choose_folder",
    "rescan",
    "show_setup",
    "show_history",
    "clear_history",
    "reset_draw_count",
    "reset_all",
)


class MenuController:
    """Manages main window menu creation and action connections."""

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and return action references.

        Returns:
            Dictionary mapping action names to QAction instances
        """
        menubar = QMenuBar(self.window)

        # File Menu
        file_menu = menubar.addMenu("File")
        self.actions["choose_folder"] = file_menu.addAction("Choose Folder…")
        self.actions["rescan"] = file_menu.addAction("Rescan Folder")
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        # View Menu
        view_menu = menubar.addMenu("View")
        self.actions["show_setup"] = view_menu.addAction("Setup")
        self.actions["show_history"] = view_menu.addAction("History")

        # History Menu
        history_menu = menubar.addMenu("History")
        self.actions["history_enabled"] = history_menu.addAction("Record Sessions")
        self.actions["history_enabled"].setCheckable(True)
        history_menu.addSeparator()
        self.actions["clear_history"] = history_menu.addAction("Clear History…")
        self.actions["reset_draw_count"] = history_menu.addAction("Reset Draw Count…")
        self.actions["reset_all"] = history_menu.addAction("Reset All…")

        # Log Menu
        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")
        self.actions["open_log_directory"] = log_menu.addAction("Open Log Directory")

        self.window.setMenuBar(menubar)
        return self.actions

    def enable_action(self, name: str, enabled: bool = True) -> None:
        """Enable or disable a specific action.

        Args:
            name: Action name
            enabled: Whether to enable the action
        """
        action = self.actions.get(name)
        if action:
            action.setEnabled(enabled)

    def set_session_active(self, active: bool) -> None:
        """Lock the actions that would leave the session page while `active`."""
        for name in SESSION_LOCKED_ACTIONS:
            self.enable_action(name, not active)

    def connect_actions(self, handlers: dict[str, Callable[[], None]]) -> None:
        """Connect menu actions to their handler functions.

        Args:
            handlers: Dictionary mapping action names to handler functions
        """
        for action_name, handler in handlers.items():
            action = self.actions.get(action_name)
            if action is not None:
                action.triggered.connect(handler)
