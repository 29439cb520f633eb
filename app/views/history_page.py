"""History page and the end-of-session summary."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QDate, QSize, Qt, Signal
from PySide6.QtGui import QColor, QIcon, QPixmap, QTextCharFormat
from PySide6.QtWidgets import (
    QCalendarWidget,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from app.viewmodels.main_vm import MainVM
from app.views.constants import DAY_ROLE, LOG_ID_ROLE, PATH_ROLE, THUMB_SIZE
from core.models import SessionState
from infrastructure.image_service import ImageService


class HistoryPage(QWidget):
    """Sessions grouped by day, newest first; double-click an image to draw it again.

    A calendar above the list marks the days with sessions. Clicking a marked day
    scrolls the list to that day.
    """

    startWithRequested = Signal(str)  # image path
    actionRequested = Signal(str)  # "clear_history" | "reset_draw_count" | "reset_all"

    def __init__(
        self, vm: MainVM, image_service: ImageService, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._vm = vm
        self._img = image_service
        self._marked: set[int] = set()

        root = QVBoxLayout(self)
        self.calendar = QCalendarWidget()
        self.calendar.setGridVisible(False)
        self.calendar.setVerticalHeaderFormat(QCalendarWidget.NoVerticalHeader)
        self.calendar.currentPageChanged.connect(self._mark_session_days)
        self.calendar.clicked.connect(self.scroll_to_day)
        root.addWidget(self.calendar)

        root.addWidget(QLabel("Log"))

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Session", "Length", "Timer", "Images"])
        self.tree.setIconSize(QSize(THUMB_SIZE // 2, THUMB_SIZE // 2))
        self.tree.itemDoubleClicked.connect(self._on_item_double_clicked)
        root.addWidget(self.tree, 1)

        self.empty_label = QLabel(
            "No sessions yet.\nComplete a session to see it listed here."
        )
        root.addWidget(self.empty_label)

        actions = QHBoxLayout()
        delete_btn = QPushButton("Delete Entry")
        delete_btn.clicked.connect(self._delete_selected)
        actions.addWidget(delete_btn)
        actions.addStretch(1)
        for key, title in (
            ("clear_history", "Clear History"),
            ("reset_draw_count", "Reset Draw Count"),
            ("reset_all", "Reset All"),
        ):
            btn = QPushButton(title)
            btn.clicked.connect(lambda _=False, k=key: self.actionRequested.emit(k))
            actions.addWidget(btn)
        root.addLayout(actions)

    def refresh(self) -> None:
        self.tree.clear()
        sections = self._vm.history_sections()
        self.empty_label.setVisible(not sections)
        for section in sections:
            day_item = QTreeWidgetItem([section.label, f"Total: {section.total_label}", "", ""])
            day_item.setData(0, DAY_ROLE, section.day.isoformat())
            self.tree.addTopLevelItem(day_item)
            for entry in section.entries:
                entry_item = QTreeWidgetItem(
                    [entry.time, entry.session_length, entry.timer, entry.count]
                )
                entry_item.setData(0, LOG_ID_ROLE, entry.log_id)
                day_item.addChild(entry_item)
                for path in entry.image_paths:
                    image_item = QTreeWidgetItem([Path(path).name, "", "", ""])
                    image_item.setData(0, PATH_ROLE, path)
                    thumb = self._img.get_image(path, THUMB_SIZE // 2)
                    image_item.setIcon(0, QIcon(QPixmap.fromImage(thumb)))
                    entry_item.addChild(image_item)
            day_item.setExpanded(True)
        self._mark_session_days(self.calendar.yearShown(), self.calendar.monthShown())

    def marked_days(self) -> set[int]:
        """Days of the shown month currently highlighted on the calendar."""
        return set(self._marked)

    def scroll_to_day(self, day: QDate) -> bool:
        """Select and reveal the section for `day`. Returns False when it has no sessions."""
        key = day.toString(Qt.ISODate)
        for i in range(self.tree.topLevelItemCount()):
            item = self.tree.topLevelItem(i)
            if item.data(0, DAY_ROLE) == key:
                self.tree.setCurrentItem(item)
                self.tree.scrollToItem(item, QTreeWidget.PositionAtTop)
                return True
        return False

    def _mark_session_days(self, year: int, month: int) -> None:
        self.calendar.setDateTextFormat(QDate(), QTextCharFormat())
        fmt = QTextCharFormat()
        fmt.setFontWeight(700)
        fmt.setBackground(QColor("#f2c14e"))
        self._marked = self._vm.session_days(year, month)
        for day in self._marked:
            self.calendar.setDateTextFormat(QDate(year, month, day), fmt)

    def _on_item_double_clicked(self, item: QTreeWidgetItem, _column: int) -> None:
        path = item.data(0, PATH_ROLE)
        if path:
            self.startWithRequested.emit(str(path))

    def _delete_selected(self) -> None:
        item = self.tree.currentItem()
        if item is None:
            return
        log_id = item.data(0, LOG_ID_ROLE)
        if log_id and self._vm.delete_history_entry(str(log_id)):
            self.refresh()


class SummaryPage(QWidget):
    """Completed/skipped counts of the session that just ended."""

    finished = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        title = QLabel("Session Summary")
        font = title.font()
        font.setPointSize(18)
        font.setBold(True)
        title.setFont(font)
        root.addWidget(title)
        root.addWidget(QLabel("Here are the drawings you completed this session."))
        self.stats_label = QLabel()
        root.addWidget(self.stats_label)
        self.images_label = QLabel()
        self.images_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.images_label.setWordWrap(True)
        root.addWidget(self.images_label, 1)
        done = QPushButton("Finished")
        done.clicked.connect(self.finished.emit)
        root.addWidget(done)

    def show_session(self, session: SessionState | None) -> None:
        if session is None:
            self.stats_label.clear()
            self.images_label.clear()
            return
        per_image = f"{session.minutes_per_image} min" if session.is_timed else "No timer"
        self.stats_label.setText(
            f"Completed Drawings: {session.completed_count}    "
            f"Skipped: {session.skipped_count}    Per Image: {per_image}"
        )
        names = [Path(p).name for p in dict.fromkeys(session.completed_image_ids)]
        self.images_label.setText("\n".join(names))
