"""MainWindow: hosts the setup, session, summary and history pages."""

from __future__ import annotations

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox, QStackedWidget
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.viewmodels.session_vm import SessionVM
from app.views.components.menu_controller import MenuController
from app.views.constants import PAGE_HISTORY, PAGE_SESSION, PAGE_SETUP, PAGE_SUMMARY
from app.views.history_page import HistoryPage, SummaryPage
from app.views.session_page import SessionPage
from app.views.setup_page import SetupPage
from core.models import SessionState
from infrastructure.image_service import ImageService
from infrastructure.logging import open_latest_log, open_log_directory

# (title, message, confirm button) per destructive history action
HISTORY_ACTIONS: dict[str, tuple[str, str, str]] = {
    "clear_history": (
        "Clear History?",
        "This will clear all the sessions logged.",
        "Clear History",
    ),
    "reset_draw_count": (
        "Reset Draw Count?",
        "This will reset the draw count logged for every image. This information is used "
        "to weight the randomization of images towards the lesser-drawn images.",
        "Reset Draw Count",
    ),
    "reset_all": (
        "Reset All?",
        "This will clear history, reset draw counts, and remove the selected folder.",
        "Reset All",
    ),
}


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, vm: MainVM, image_service: ImageService) -> None:
        """Initialize MainWindow.

        Args:
            vm: Main view-model
            image_service: Image service for loading thumbnails and session images
        """
        super().__init__()
        self._vm = vm
        self._img = image_service
        self.session_vm = SessionVM(vm.engine, self)

        self.stack = QStackedWidget()
        self.setup_page = SetupPage(vm, image_service)
        self.session_page = SessionPage(self.session_vm, image_service)
        self.summary_page = SummaryPage()
        self.history_page = HistoryPage(vm, image_service)
        for page in (self.setup_page, self.session_page, self.summary_page, self.history_page):
            self.stack.addWidget(page)
        self.setCentralWidget(self.stack)

        self.menu_controller = MenuController(self)
        actions = self.menu_controller.setup_menus()
        actions["history_enabled"].setChecked(vm.preferences.history_enabled)
        self.menu_controller.connect_actions(
            {
                "choose_folder": self.choose_folder,
                "rescan": self.rescan,
                "exit": self.close,
                "show_setup": self.show_setup,
                "show_history": self.show_history,
                "clear_history": lambda: self.confirm_history_action("clear_history"),
                "reset_draw_count": lambda: self.confirm_history_action("reset_draw_count"),
                "reset_all": lambda: self.confirm_history_action("reset_all"),
                "open_latest_log": self._open_latest_log,
                "open_log_directory": self._open_log_directory,
            }
        )
        actions["history_enabled"].toggled.connect(vm.set_history_enabled)

        self.setup_page.chooseFolderRequested.connect(self.choose_folder)
        self.setup_page.startRequested.connect(self.start_session)
        self.setup_page.startWithRequested.connect(self.start_session_with)
        self.history_page.startWithRequested.connect(self.start_session_with)
        self.history_page.actionRequested.connect(self.confirm_history_action)
        self.summary_page.finished.connect(self.show_setup)
        self.session_vm.stateChanged.connect(self._on_session_state)
        self.session_vm.sessionEnded.connect(self._on_session_ended)

        self.setWindowTitle("Gesture Draw")
        self.resize(1100, 760)
        self.show_setup()

    # Navigation
    def show_setup(self) -> None:
        self._vm.end_session()
        self.setup_page.refresh()
        self.stack.setCurrentIndex(PAGE_SETUP)
        self._flush_notices()

    def show_history(self) -> None:
        self._vm.end_session()
        self.history_page.refresh()
        self.stack.setCurrentIndex(PAGE_HISTORY)
        self._flush_notices()

    # Actions
    def choose_folder(self) -> None:
        self._vm.end_session()
        folder = QFileDialog.getExistingDirectory(
            self, "Choose Image Folder", self._vm.preferences.folder_path
        )
        if not folder:
            return
        found = self._vm.set_folder(folder)
        self.statusBar().showMessage(f"Found {found} images", 3000)
        self.show_setup()

    def rescan(self) -> None:
        self._vm.end_session()
        found = self._vm.load_folder()
        self.statusBar().showMessage(f"Found {found} images", 3000)
        self.show_setup()

    def start_session(self) -> None:
        if self._vm.start_session():
            self._show_session()
        self._flush_notices()

    def start_session_with(self, image_id: str) -> None:
        if self._vm.start_session_with(image_id):
            self._show_session()
        self._flush_notices()

    def confirm_history_action(self, action: str) -> None:
        title, message, confirm = HISTORY_ACTIONS[action]
        box = QMessageBox(self)
        box.setWindowTitle(title)
        box.setText(message)
        confirm_btn = box.addButton(confirm, QMessageBox.AcceptRole)
        box.addButton(QMessageBox.Cancel)
        box.exec()
        if box.clickedButton() is not confirm_btn:
            return
        if action == "clear_history":
            self._vm.clear_history()
        elif action == "reset_draw_count":
            self._vm.clear_draw_history()
        elif action == "reset_all":
            self._vm.reset_everything()
        logger.info("History action applied: {}", action)
        if self.stack.currentIndex() == PAGE_HISTORY:
            self.history_page.refresh()
        else:
            self.show_setup()

    # Internal helpers
    def _show_session(self) -> None:
        self.session_page.render(self.session_vm.state)
        self.stack.setCurrentIndex(PAGE_SESSION)

    def _on_session_state(self, state: SessionState | None) -> None:
        self.menu_controller.set_session_active(state is not None)

    def _on_session_ended(self, session: SessionState | None) -> None:
        if session is None:
            self.show_setup()
            return
        self.summary_page.show_session(session)
        self.stack.setCurrentIndex(PAGE_SUMMARY)
        self._flush_notices()

    def _flush_notices(self) -> None:
        notices = self._vm.take_notices()
        if notices:
            self.statusBar().showMessage(notices[-1], 5000)

    def _open_latest_log(self) -> None:
        if not open_latest_log():
            QMessageBox.information(self, "Log", "No log file found.")

    def _open_log_directory(self) -> None:
        if not open_log_directory():
            QMessageBox.information(self, "Log", "Could not open the log directory.")

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        self._vm.engine.stop()
        self.session_vm.shutdown()
        super().closeEvent(event)
