"""Session page: the current image, countdown, and session controls."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QPixmap, QResizeEvent, QShortcut
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from app.viewmodels.session_vm import SessionVM
from app.views.constants import DEFAULT_SHORTCUTS, SESSION_IMAGE_MAX_SIDE
from core.models import SessionState, SessionStatus
from infrastructure.image_service import ImageService


class SessionPage(QWidget):
    """Renders `SessionVM` state; holds no session logic itself."""

    def __init__(
        self, session_vm: SessionVM, image_service: ImageService, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._svm = session_vm
        self._img = image_service
        self._shown_path: str | None = None
        self._pixmap: QPixmap | None = None

        root = QVBoxLayout(self)
        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setMinimumSize(200, 200)
        root.addWidget(self.image_label, 1)

        bar = QHBoxLayout()
        info = QVBoxLayout()
        self.timer_label = QLabel()
        font = self.timer_label.font()
        font.setPointSize(18)
        font.setBold(True)
        self.timer_label.setFont(font)
        self.name_label = QLabel()
        self.progress_label = QLabel()
        info.addWidget(self.timer_label)
        info.addWidget(self.name_label)
        info.addWidget(self.progress_label)
        bar.addLayout(info, 1)

        self.prev_btn = QPushButton("Previous")
        self.prev_btn.clicked.connect(self._svm.previous)
        self.pause_btn = QPushButton("Pause")
        self.pause_btn.clicked.connect(self._svm.toggle_pause)
        self.next_btn = QPushButton("Next")
        self.next_btn.clicked.connect(self._svm.next)
        self.skip_btn = QPushButton("Skip")
        self.skip_btn.clicked.connect(self._svm.skip)
        self.stop_btn = QPushButton("Stop")
        self.stop_btn.clicked.connect(self._svm.stop)
        for btn in (self.prev_btn, self.pause_btn, self.next_btn, self.skip_btn, self.stop_btn):
            btn.setFocusPolicy(Qt.NoFocus)
            bar.addWidget(btn)
        root.addLayout(bar)

        handlers = {
            "next_image": self._svm.next,
            "previous_image": self._svm.previous,
            "skip_image": self._svm.skip,
            "toggle_pause": self._svm.toggle_pause,
            "stop_session": self._svm.stop,
        }
        for name, handler in handlers.items():
            shortcut = QShortcut(QKeySequence(DEFAULT_SHORTCUTS[name]), self)
            shortcut.activated.connect(handler)

        self._svm.stateChanged.connect(self.render)

    def render(self, state: SessionState | None) -> None:
        if state is None:
            self._shown_path = None
            self._pixmap = None
            self.image_label.clear()
            return
        path = state.current_id
        if path != self._shown_path:
            self._shown_path = path
            self._pixmap = QPixmap.fromImage(self._img.get_image(path, SESSION_IMAGE_MAX_SIDE))
            self._fit_pixmap()
        self.name_label.setText(Path(path).name)
        self.timer_label.setText(self._svm.timer_label())
        self.progress_label.setText(self._svm.progress_label())
        self.pause_btn.setText("Pause" if state.status is SessionStatus.RUNNING else "Resume")
        self.prev_btn.setEnabled(state.index > 0)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802 - Qt override
        super().resizeEvent(event)
        self._fit_pixmap()

    def _fit_pixmap(self) -> None:
        if self._pixmap is None or self._pixmap.isNull():
            return
        self.image_label.setPixmap(
            self._pixmap.scaled(
                self.image_label.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation
            )
        )
