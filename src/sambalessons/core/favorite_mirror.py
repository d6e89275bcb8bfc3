# -*- coding: utf-8 -*-
"""Durable retry queue that mirrors local favorites to the remote user document."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any

from sambalessons.constants import KEY_PENDING_MIRROR, SENTINEL_UID
from sambalessons.core.preference_store import PreferenceStore
from sambalessons.core.remote_runner import RemoteRunner
from sambalessons.integrations.catalog_source import CatalogSource

logger = logging.getLogger(__name__)


def _entry_key(uid: str, lesson_id: str) -> str:
    return f"{uid}/{lesson_id}"


class FavoriteMirror:
    """Queue of remote favorite writes; local preferences stay the source of truth.

    Pending writes are keyed by (uid, lesson id) and the newest intent
    replaces an older one. The queue lives in the preference store so it
    survives restarts. A write that keeps failing is dropped after
    `max_attempts` flushes.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        store: PreferenceStore,
        runner: RemoteRunner | None = None,
        *,
        max_attempts: int = 3,
        enabled: bool = True,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.runner = runner
        self.max_attempts = int(max_attempts)
        self.enabled = enabled
        self._flush_lock = threading.Lock()

    def pending(self) -> dict[str, dict[str, Any]]:
        return dict(self.store.get_scalar(KEY_PENDING_MIRROR, {}) or {})

    def enqueue(self, uid: str, lesson_id: str, is_favorite: bool) -> None:
        if not self.enabled:
            return
        if not uid or uid == SENTINEL_UID:
            logger.warning("Not mirroring favorite %s without a signed-in user", lesson_id)
            return

        def _add(queue: dict[str, Any] | None) -> dict[str, Any]:
            queue = dict(queue or {})
            queue[_entry_key(uid, lesson_id)] = {
                "uid": uid,
                "lesson_id": lesson_id,
                "favorite": bool(is_favorite),
                "attempts": 0,
            }
            return queue

        self.store.update_scalar(KEY_PENDING_MIRROR, _add, {})

    def schedule_flush(self) -> Future | None:
        """Flush on the runner in the background. Returns None without a runner."""
        if self.runner is None or not self.enabled:
            return None
        return self.runner.submit("favorite-mirror", self.flush)

    def flush(self) -> int:
        """Try every pending write once. Returns how many succeeded."""
        with self._flush_lock:
            succeeded = 0
            for key, entry in self.pending().items():
                try:
                    if entry["favorite"]:
                        self.catalog.set_user_favorite(entry["uid"], entry["lesson_id"])
                    else:
                        self.catalog.delete_user_favorite(entry["uid"], entry["lesson_id"])
                except Exception as exc:
                    self._record_failure(key, entry, exc)
                    continue
                self._remove_if_unchanged(key, entry)
                succeeded += 1
            return succeeded

    def _record_failure(self, key: str, entry: dict[str, Any], exc: Exception) -> None:
        def _bump(queue: dict[str, Any] | None) -> dict[str, Any]:
            queue = dict(queue or {})
            current = queue.get(key)
            if current is None or current["favorite"] != entry["favorite"]:
                # A newer intent replaced this one while the write was in flight
                return queue
            attempts = int(current.get("attempts", 0)) + 1
            if attempts >= self.max_attempts:
                logger.error(
                    "Giving up mirroring favorite %s for %s after %d attempts: %s",
                    entry["lesson_id"],
                    entry["uid"],
                    attempts,
                    exc,
                )
                queue.pop(key)
            else:
                logger.warning("Mirroring favorite %s failed (attempt %d): %s", entry["lesson_id"], attempts, exc)
                queue[key] = {**current, "attempts": attempts}
            return queue

        self.store.update_scalar(KEY_PENDING_MIRROR, _bump, {})

    def _remove_if_unchanged(self, key: str, entry: dict[str, Any]) -> None:
        def _drop(queue: dict[str, Any] | None) -> dict[str, Any]:
            queue = dict(queue or {})
            current = queue.get(key)
            if current is not None and current["favorite"] == entry["favorite"]:
                queue.pop(key)
            return queue

        self.store.update_scalar(KEY_PENDING_MIRROR, _drop, {})
