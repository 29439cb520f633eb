"""Setup page: folder, image inclusion, and session options."""

from __future__ import annotations

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from app.viewmodels.main_vm import MainVM
from app.views.constants import MINUTE_PRESETS, PATH_ROLE, THUMB_SIZE
from infrastructure.image_service import ImageService


class SetupPage(QWidget):
    """Lets the user pick images and session options, then start a session."""

    chooseFolderRequested = Signal()
    startRequested = Signal()
    startWithRequested = Signal(str)  # image path

    def __init__(
        self, vm: MainVM, image_service: ImageService, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._vm = vm
        self._img = image_service
        self._populating = False

        root = QVBoxLayout(self)

        # Folder row
        folder_row = QHBoxLayout()
        self.folder_label = QLabel()
        self.folder_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        choose_btn = QPushButton("Choose Folder…")
        choose_btn.clicked.connect(self.chooseFolderRequested.emit)
        folder_row.addWidget(self.folder_label, 1)
        folder_row.addWidget(choose_btn)
        root.addLayout(folder_row)

        # Selection row
        sel_row = QHBoxLayout()
        self.selection_label = QLabel()
        select_all = QPushButton("Select All")
        select_all.clicked.connect(lambda: self._set_all(True))
        select_none = QPushButton("Deselect All")
        select_none.clicked.connect(lambda: self._set_all(False))
        sel_row.addWidget(self.selection_label, 1)
        sel_row.addWidget(select_all)
        sel_row.addWidget(select_none)
        root.addLayout(sel_row)

        self.image_list = QListWidget()
        self.image_list.setViewMode(QListView.IconMode)
        self.image_list.setIconSize(QSize(THUMB_SIZE, THUMB_SIZE))
        self.image_list.setResizeMode(QListView.Adjust)
        self.image_list.setSpacing(6)
        self.image_list.itemChanged.connect(self._on_item_changed)
        self.image_list.itemDoubleClicked.connect(self._on_item_double_clicked)
        root.addWidget(self.image_list, 1)

        # Timer row
        timer_row = QHBoxLayout()
        timer_row.addWidget(QLabel("Minutes per image:"))
        for minute in MINUTE_PRESETS:
            btn = QPushButton(f"{minute} min")
            btn.clicked.connect(lambda _=False, m=minute: self._set_minutes(m))
            timer_row.addWidget(btn)
        no_timer = QPushButton("No Timer")
        no_timer.clicked.connect(lambda: self._set_minutes(0))
        timer_row.addWidget(no_timer)
        self.minutes_spin = QSpinBox()
        self.minutes_spin.setRange(0, 180)
        self.minutes_spin.valueChanged.connect(self._set_minutes)
        timer_row.addWidget(self.minutes_spin)
        timer_row.addStretch(1)
        root.addLayout(timer_row)

        # Count row
        count_row = QHBoxLayout()
        count_row.addWidget(QLabel("Images:"))
        minus = QPushButton("-")
        minus.clicked.connect(lambda: self._adjust_count(-1))
        self.count_label = QLabel()
        plus = QPushButton("+")
        plus.clicked.connect(lambda: self._adjust_count(1))
        self.infinite_check = QCheckBox("Infinite")
        self.infinite_check.toggled.connect(self._set_infinite)
        count_row.addWidget(minus)
        count_row.addWidget(self.count_label)
        count_row.addWidget(plus)
        count_row.addWidget(self.infinite_check)
        count_row.addStretch(1)
        root.addLayout(count_row)

        self.weighted_check = QCheckBox("Prioritize lesser-drawn images")
        self.weighted_check.toggled.connect(self._vm.set_prioritize_low_draw)
        root.addWidget(self.weighted_check)

        self.start_btn = QPushButton("Start Session")
        self.start_btn.clicked.connect(self.startRequested.emit)
        root.addWidget(self.start_btn)

    # Public API
    def refresh(self) -> None:
        """Rebuild the page from the view-model."""
        prefs = self._vm.preferences
        self.folder_label.setText(prefs.folder_path or "(no folder selected)")
        self.minutes_spin.blockSignals(True)
        self.minutes_spin.setValue(prefs.minutes)
        self.minutes_spin.blockSignals(False)
        self.infinite_check.blockSignals(True)
        self.infinite_check.setChecked(prefs.infinite)
        self.infinite_check.blockSignals(False)
        self.weighted_check.blockSignals(True)
        self.weighted_check.setChecked(prefs.prioritize_low_draw)
        self.weighted_check.blockSignals(False)
        self._refresh_labels()
        self._populate_images()

    # Internal helpers
    def _refresh_labels(self) -> None:
        prefs = self._vm.preferences
        self.count_label.setText("∞" if prefs.infinite else str(prefs.count))
        self.selection_label.setText(self._vm.selection_label)
        self.start_btn.setEnabled(self._vm.included_count > 0)

    def _populate_images(self) -> None:
        self._populating = True
        try:
            self.image_list.clear()
            for image in self._vm.images:
                item = QListWidgetItem(f"{image.file_name}\n{image.drawn_label}")
                item.setData(PATH_ROLE, image.id)
                item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
                item.setCheckState(Qt.Checked if image.included else Qt.Unchecked)
                thumb = self._img.get_image(image.id, THUMB_SIZE)
                item.setIcon(QIcon(QPixmap.fromImage(thumb)))
                self.image_list.addItem(item)
        finally:
            self._populating = False

    def _on_item_changed(self, item: QListWidgetItem) -> None:
        if self._populating:
            return
        self._vm.toggle_include(str(item.data(PATH_ROLE)), item.checkState() == Qt.Checked)
        self._refresh_labels()

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        self.startWithRequested.emit(str(item.data(PATH_ROLE)))

    def _set_all(self, included: bool) -> None:
        self._vm.set_all_included(included)
        self.refresh()

    def _set_minutes(self, minutes: int) -> None:
        self._vm.set_minutes(minutes)
        if self.minutes_spin.value() != minutes:
            self.minutes_spin.blockSignals(True)
            self.minutes_spin.setValue(minutes)
            self.minutes_spin.blockSignals(False)

    def _adjust_count(self, delta: int) -> None:
        self._vm.adjust_count(self._vm.preferences.count + delta)
        self._refresh_labels()

    def _set_infinite(self, infinite: bool) -> None:
        self._vm.set_infinite(infinite)
        self._refresh_labels()
