# -*- coding: utf-8 -*-
"""Lesson-level view over the preference store."""

from __future__ import annotations

import logging

from sambalessons.constants import (
    SENTINEL_UID,
    SET_CREATED,
    SET_FAVORITES,
    SET_WATCHED,
    USER_FAVORITES_PREFIX,
)
from sambalessons.core.preference_store import PreferenceStore

logger = logging.getLogger(__name__)


def _is_real_uid(uid: str | None) -> bool:
    return bool(uid) and uid != SENTINEL_UID


class LessonPreferences:
    """Favorites, created and watched lessons for this device and its users."""

    def __init__(self, store: PreferenceStore) -> None:
        self.store = store

    # Device-scoped favorites
    def add_favorite(self, lesson_id: str) -> bool:
        return self.store.add_to_set(SET_FAVORITES, lesson_id)

    def remove_favorite(self, lesson_id: str) -> bool:
        return self.store.remove_from_set(SET_FAVORITES, lesson_id)

    def is_favorite(self, lesson_id: str) -> bool:
        return self.store.contains(SET_FAVORITES, lesson_id)

    def get_favorites(self) -> set[str]:
        return self.store.get_all(SET_FAVORITES)

    # Created lessons
    def add_created(self, lesson_id: str) -> bool:
        return self.store.add_to_set(SET_CREATED, lesson_id)

    def is_created(self, lesson_id: str) -> bool:
        return self.store.contains(SET_CREATED, lesson_id)

    def get_created(self) -> set[str]:
        return self.store.get_all(SET_CREATED)

    # Watched lessons
    def set_watched(self, lesson_id: str, watched: bool) -> bool:
        if watched:
            return self.store.add_to_set(SET_WATCHED, lesson_id)
        return self.store.remove_from_set(SET_WATCHED, lesson_id)

    def is_watched(self, lesson_id: str) -> bool:
        return self.store.contains(SET_WATCHED, lesson_id)

    def get_watched(self) -> set[str]:
        return self.store.get_all(SET_WATCHED)

    # Per-user favorites
    @staticmethod
    def user_favorites_key(uid: str) -> str:
        return f"{USER_FAVORITES_PREFIX}{uid}"

    def save_user_favorite(self, uid: str, lesson_id: str) -> bool:
        """Mark `lesson_id` as a favorite of `uid`. The sentinel uid is refused."""
        if not _is_real_uid(uid):
            logger.warning("Refusing to save favorite %s without a signed-in user", lesson_id)
            return False
        return self.store.add_to_set(self.user_favorites_key(uid), lesson_id)

    def remove_user_favorite(self, uid: str, lesson_id: str) -> bool:
        if not _is_real_uid(uid):
            logger.warning("Refusing to remove favorite %s without a signed-in user", lesson_id)
            return False
        return self.store.remove_from_set(self.user_favorites_key(uid), lesson_id)

    def is_user_favorite(self, uid: str, lesson_id: str) -> bool:
        if not _is_real_uid(uid):
            return False
        return self.store.contains(self.user_favorites_key(uid), lesson_id)

    def get_user_favorites(self, uid: str) -> set[str]:
        if not _is_real_uid(uid):
            return set()
        return self.store.get_all(self.user_favorites_key(uid))
