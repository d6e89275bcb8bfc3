# -*- coding: utf-8 -*-
"""Qt list model over a lesson list adapter."""

from __future__ import annotations

from typing import Any

from PyQt6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt

from sambalessons.core.lesson_adapter import LessonListAdapter
from sambalessons.models.display_state import LessonDisplayState


class LessonListModel(QAbstractListModel):
    """Exposes adapter display states to a QListView."""

    LessonIdRole = Qt.ItemDataRole.UserRole + 1
    SubtitleRole = Qt.ItemDataRole.UserRole + 2
    FavoriteRole = Qt.ItemDataRole.UserRole + 3
    WatchedRole = Qt.ItemDataRole.UserRole + 4
    FavoriteEnabledRole = Qt.ItemDataRole.UserRole + 5
    CanEditRole = Qt.ItemDataRole.UserRole + 6
    IconRole = Qt.ItemDataRole.UserRole + 7

    def __init__(self, adapter: LessonListAdapter, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.adapter = adapter
        self._states: list[LessonDisplayState] = adapter.display_states()
        adapter.list_changed = self._on_list_changed
        adapter.row_changed = self._on_row_changed

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: B008
        if parent.isValid():
            return 0
        return len(self._states)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._states)):
            return None
        state = self._states[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return state.item.title
        if role == Qt.ItemDataRole.ToolTipRole:
            return state.item.description
        values = {
            self.LessonIdRole: state.lesson_id,
            self.SubtitleRole: state.item.subtitle,
            self.FavoriteRole: state.is_favorite,
            self.WatchedRole: state.is_watched,
            self.FavoriteEnabledRole: state.favorite_enabled,
            self.CanEditRole: state.can_edit,
            self.IconRole: state.icon_id,
        }
        return values.get(role)

    def roleNames(self) -> dict[int, bytes]:
        names = dict(super().roleNames())
        names.update(
            {
                self.LessonIdRole: b"lessonId",
                self.SubtitleRole: b"subtitle",
                self.FavoriteRole: b"favorite",
                self.WatchedRole: b"watched",
                self.FavoriteEnabledRole: b"favoriteEnabled",
                self.CanEditRole: b"canEdit",
                self.IconRole: b"icon",
            }
        )
        return names

    def _on_list_changed(self, states: list[LessonDisplayState]) -> None:
        self.beginResetModel()
        self._states = list(states)
        self.endResetModel()

    def _on_row_changed(self, row: int, state: LessonDisplayState) -> None:
        if not (0 <= row < len(self._states)):
            return
        self._states[row] = state
        model_index = self.index(row, 0)
        self.dataChanged.emit(model_index, model_index, [])
