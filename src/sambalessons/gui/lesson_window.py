# -*- coding: utf-8 -*-
"""Main window: one level's lessons with favorite, watched and delete actions."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QModelIndex
from PyQt6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListView,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sambalessons.app_context import AppContext
from sambalessons.constants import APP_NAME, APP_VERSION, LEVELS
from sambalessons.core.lesson_adapter import LessonListAdapter
from sambalessons.gui.lesson_list_model import LessonListModel
from sambalessons.models.display_state import LessonDisplayState
from sambalessons.models.lesson_item import LessonItem

logger = logging.getLogger(__name__)


class LessonWindow(QMainWindow):
    """Lesson list for the selected level, driven by the app context."""

    def __init__(self, ctx: AppContext, level: str = LEVELS[0], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.ctx = ctx
        self.adapter: LessonListAdapter | None = None
        self.model: LessonListModel | None = None

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.resize(720, 560)
        self._build_ui()
        ctx.cache.fetch_failed = lambda lvl, message: self.notify(f"{lvl}: {message}")
        self.show_level(level)

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)

        header = QHBoxLayout()
        self.user_label = QLabel()
        self.user_label.setObjectName("mutedText")
        self.level_combo = QComboBox()
        self.level_combo.addItems(list(LEVELS))
        self.level_combo.currentTextChanged.connect(self.show_level)
        header.addWidget(QLabel("Level"))
        header.addWidget(self.level_combo)
        header.addStretch(1)
        header.addWidget(self.user_label)
        layout.addLayout(header)

        self.list_view = QListView()
        self.list_view.setUniformItemSizes(True)
        layout.addWidget(self.list_view, 1)

        buttons = QHBoxLayout()
        self.favorite_button = QPushButton("Favorite")
        self.favorite_button.clicked.connect(self.toggle_favorite)
        self.watched_button = QPushButton("Watched")
        self.watched_button.clicked.connect(self.toggle_watched)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setObjectName("dangerButton")
        self.delete_button.clicked.connect(self.delete_selected)
        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.clicked.connect(self.refresh)
        for button in (self.favorite_button, self.watched_button, self.delete_button):
            buttons.addWidget(button)
        buttons.addStretch(1)
        buttons.addWidget(self.refresh_button)
        layout.addLayout(buttons)

        self.setCentralWidget(central)
        self.statusBar().showMessage("Ready")

    # ------------------------------------------------------------------
    # Level switching
    # ------------------------------------------------------------------

    def show_level(self, level: str) -> None:
        if self.adapter is not None:
            self.adapter.detach()
        if self.model is not None:
            self.model.deleteLater()
        self.adapter = self.ctx.adapter_for(
            level,
            confirm_delete=lambda item: self.ask_confirmation(item),
            notify=self.notify,
        )
        self.model = LessonListModel(self.adapter, self)
        self.list_view.setModel(self.model)
        self.list_view.selectionModel().currentChanged.connect(self._on_current_changed)
        if self.level_combo.currentText() != self.adapter.level:
            self.level_combo.blockSignals(True)
            self.level_combo.setCurrentText(self.adapter.level)
            self.level_combo.blockSignals(False)
        self.model.modelReset.connect(self._update_buttons)
        self.model.dataChanged.connect(self._update_buttons)
        self.adapter.attach(refresh=True)
        self._update_user_label()
        self._update_buttons()
        logger.info("Showing %s lessons", self.adapter.level)

    def refresh(self) -> None:
        if self.adapter is not None:
            self.ctx.cache.refresh(self.adapter.level)
            self.notify("Refreshing...")

    # ------------------------------------------------------------------
    # Row actions
    # ------------------------------------------------------------------

    def selected_state(self) -> LessonDisplayState | None:
        if self.adapter is None:
            return None
        index = self.list_view.currentIndex()
        if not index.isValid() or index.row() >= self.adapter.item_count():
            return None
        # Fresh from the adapter so a role change shows up without a reload
        return self.adapter.display_state(index.row())

    def select_lesson(self, lesson_id: str) -> bool:
        if self.adapter is None or self.model is None:
            return False
        try:
            row = self.adapter.index_of(lesson_id)
        except KeyError:
            return False
        self.list_view.setCurrentIndex(self.model.index(row, 0))
        return True

    def toggle_favorite(self) -> None:
        state = self.selected_state()
        if state is None or self.adapter is None:
            return
        self.adapter.toggle_favorite(state.lesson_id)

    def toggle_watched(self) -> None:
        state = self.selected_state()
        if state is None or self.adapter is None:
            return
        self.adapter.set_watched(state.lesson_id, not state.is_watched)

    def delete_selected(self) -> None:
        state = self.selected_state()
        if state is None or self.adapter is None:
            return
        self.adapter.request_delete(state.lesson_id)

    def ask_confirmation(self, item: LessonItem) -> bool:
        answer = QMessageBox.question(
            self,
            "Delete Lesson",
            f"Delete '{item.title}'? This cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    def notify(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    # ------------------------------------------------------------------
    # UI state
    # ------------------------------------------------------------------

    def _on_current_changed(self, current: QModelIndex, previous: QModelIndex) -> None:
        self._update_buttons()

    def _update_user_label(self) -> None:
        session = self.ctx.session
        if not session.has_session():
            self.user_label.setText("Not signed in")
            return
        role = "Instructor" if session.is_privileged() else (session.role or "Member")
        self.user_label.setText(f"{session.name} ({role})")

    def _update_buttons(self, *_args: object) -> None:
        state = self.selected_state()
        self.favorite_button.setEnabled(state is not None and state.favorite_enabled)
        self.favorite_button.setText("Unfavorite" if state is not None and state.is_favorite else "Favorite")
        self.watched_button.setEnabled(state is not None)
        self.watched_button.setText("Not Watched" if state is not None and state.is_watched else "Watched")
        self.delete_button.setEnabled(state is not None and state.can_delete)

    def closeEvent(self, event) -> None:  # noqa: N802
        if self.adapter is not None:
            self.adapter.detach()
        super().closeEvent(event)
