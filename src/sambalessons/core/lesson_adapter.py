# -*- coding: utf-8 -*-
"""Reconciles cached lessons with local state and dispatches row actions."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Callable

from sambalessons.constants import SENTINEL_UID
from sambalessons.core.favorite_mirror import FavoriteMirror
from sambalessons.core.icons import resolve_icon
from sambalessons.core.lesson_cache import LessonCache
from sambalessons.core.lesson_preferences import LessonPreferences
from sambalessons.core.media_store import MediaStore
from sambalessons.core.session import SessionContext
from sambalessons.models.display_state import LessonDisplayState
from sambalessons.models.editor_result import EditorResult
from sambalessons.models.lesson_item import LessonItem, normalize_level

logger = logging.getLogger(__name__)


Notifier = Callable[[str], None]
ConfirmCallback = Callable[[LessonItem], bool]
EditorCallback = Callable[[LessonItem], EditorResult]
ListChangedCallback = Callable[[list[LessonDisplayState]], None]
RowChangedCallback = Callable[[int, LessonDisplayState], None]


def _log_notice(message: str) -> None:
    logger.info("Notice: %s", message)


class LessonListAdapter:
    """Row state and user intents for one level's lesson list.

    Favorite and watched flags always come from local preferences, never
    from the fetched item. Edit and delete are only offered to instructors.
    """

    def __init__(
        self,
        level: str,
        cache: LessonCache,
        session: SessionContext,
        preferences: LessonPreferences,
        media_store: MediaStore,
        mirror: FavoriteMirror | None = None,
        *,
        confirm_delete: ConfirmCallback | None = None,
        open_editor: EditorCallback | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self.level = normalize_level(level)
        self.cache = cache
        self.session = session
        self.preferences = preferences
        self.media_store = media_store
        self.mirror = mirror
        self.confirm_delete = confirm_delete
        self.open_editor = open_editor
        self.notify = notify or _log_notice

        self.list_changed: ListChangedCallback | None = None
        self.row_changed: RowChangedCallback | None = None

        self._items: list[LessonItem] = []
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Observer lifecycle
    # ------------------------------------------------------------------

    def attach(self, refresh: bool = True) -> None:
        """Start observing the level's cached list."""
        if self._unsubscribe is not None:
            return
        observable = self.cache.observe(self.level)
        self._unsubscribe = observable.subscribe(self.update_list)
        if refresh:
            self.cache.refresh(self.level)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def update_list(self, items: list[LessonItem]) -> None:
        logger.debug("Adapter for %s received %d lessons", self.level, len(items))
        self._items = list(items)
        if self.list_changed is not None:
            self.list_changed(self.display_states())

    # ------------------------------------------------------------------
    # Display state
    # ------------------------------------------------------------------

    def item_count(self) -> int:
        return len(self._items)

    def items(self) -> list[LessonItem]:
        return list(self._items)

    def index_of(self, lesson_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == lesson_id:
                return index
        raise KeyError(f"Lesson {lesson_id} is not in the {self.level} list")

    def _is_favorite(self, uid: str, lesson_id: str) -> bool:
        if uid == SENTINEL_UID:
            return self.preferences.is_favorite(lesson_id)
        return self.preferences.is_user_favorite(uid, lesson_id)

    def display_state(self, index: int) -> LessonDisplayState:
        item = self._items[index]
        uid = self.session.get_uid()
        privileged = self.session.is_privileged()
        is_favorite = bool(item.id) and self._is_favorite(uid, item.id)
        item.is_favorite = is_favorite
        return LessonDisplayState(
            item=item,
            is_favorite=is_favorite,
            is_watched=bool(item.id) and self.preferences.is_watched(item.id),
            favorite_enabled=not item.is_past_schedule,
            can_edit=privileged,
            can_delete=privileged,
            icon_id=resolve_icon(item.icon_id, item.level),
        )

    def display_states(self) -> list[LessonDisplayState]:
        return [self.display_state(index) for index in range(len(self._items))]

    def _emit_row(self, lesson_id: str) -> None:
        if self.row_changed is None:
            return
        try:
            index = self.index_of(lesson_id)
        except KeyError:
            return
        self.row_changed(index, self.display_state(index))

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def toggle_favorite(self, lesson_id: str) -> bool:
        """Flip the favorite flag and return the resulting state.

        Past lessons are locked and keep their state. Without a signed-in
        user the flag goes to the device favorites set and is not mirrored.
        """
        item = self._items[self.index_of(lesson_id)]
        uid = self.session.get_uid()
        current = self._is_favorite(uid, lesson_id)
        if item.is_past_schedule:
            logger.debug("Favorite toggle ignored for past lesson %s", lesson_id)
            return current

        now_favorite = not current
        if uid == SENTINEL_UID:
            if now_favorite:
                self.preferences.add_favorite(lesson_id)
                self.notify("Saved on this device only. Sign in to keep favorites with your account")
            else:
                self.preferences.remove_favorite(lesson_id)
        elif now_favorite:
            self.preferences.save_user_favorite(uid, lesson_id)
        else:
            self.preferences.remove_user_favorite(uid, lesson_id)
        item.is_favorite = now_favorite
        logger.info("Lesson %s favorite=%s for %s", lesson_id, now_favorite, uid)

        if self.mirror is not None and uid != SENTINEL_UID:
            self.mirror.enqueue(uid, lesson_id, now_favorite)
            self.mirror.schedule_flush()
        self._emit_row(lesson_id)
        return now_favorite

    def set_watched(self, lesson_id: str, watched: bool) -> None:
        self.preferences.set_watched(lesson_id, watched)
        self._emit_row(lesson_id)

    def request_delete(self, lesson_id: str) -> Future | None:
        """Ask for confirmation, then delete remotely and clean up locally.

        Local media and the list entry are only removed after the remote
        delete succeeded. Returns None when nothing was started.
        """
        if not self.session.is_privileged():
            logger.debug("Delete of %s ignored for non-instructor", lesson_id)
            return None
        item = self._items[self.index_of(lesson_id)]
        if self.confirm_delete is not None and not self.confirm_delete(item):
            return None

        def _on_deleted(_: object) -> None:
            if self.media_store.exists(item.media_path):
                self.media_store.delete(item.media_path)
            elif item.media_path:
                logger.debug("No local media to remove for lesson %s", lesson_id)
            self.cache.remove_locally(self.level, lesson_id)
            self.notify("Lesson deleted")

        return self.cache.runner.submit(
            f"delete-lesson:{lesson_id}",
            lambda: self.cache.catalog.delete(lesson_id),
            on_success=_on_deleted,
            on_failure=lambda exc: self.notify(f"Delete failed: {exc}"),
        )

    def edit(self, lesson_id: str) -> EditorResult | None:
        """Hand the lesson to the editor; refresh the level if it committed."""
        if not self.session.is_privileged() or self.open_editor is None:
            return None
        item = self._items[self.index_of(lesson_id)]
        result = self.open_editor(item)
        if result.committed:
            self.cache.refresh(self.level)
        return result
