# -*- coding: utf-8 -*-
"""Create and update lessons in the remote catalog."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import replace
from pathlib import Path
from typing import Callable

from sambalessons.constants import DEFAULT_ICON_ID, DEFAULT_MAX_PARTICIPANTS
from sambalessons.core.lesson_cache import LessonCache
from sambalessons.core.lesson_preferences import LessonPreferences
from sambalessons.core.media_store import MediaStore
from sambalessons.core.remote_runner import RemoteRunner
from sambalessons.core.session import SessionContext
from sambalessons.integrations.catalog_source import CatalogSource
from sambalessons.models.editor_result import COMMITTED, EditorResult
from sambalessons.models.lesson_item import LessonItem, normalize_level

logger = logging.getLogger(__name__)


Notifier = Callable[[str], None]
ResultCallback = Callable[[EditorResult], None]


class ValidationError(ValueError):
    """Raised before any I/O when a lesson form is incomplete."""


def _log_notice(message: str) -> None:
    logger.info("Notice: %s", message)


class LessonComposer:
    """Instructor-side lesson writes followed by a cache update."""

    def __init__(
        self,
        catalog: CatalogSource,
        runner: RemoteRunner,
        cache: LessonCache,
        session: SessionContext,
        preferences: LessonPreferences,
        media_store: MediaStore,
        notify: Notifier | None = None,
    ) -> None:
        self.catalog = catalog
        self.runner = runner
        self.cache = cache
        self.session = session
        self.preferences = preferences
        self.media_store = media_store
        self.notify = notify or _log_notice

    def _require_instructor(self) -> None:
        if not self.session.is_privileged():
            raise ValidationError("Only instructors can create or edit lessons")

    def create(
        self,
        level: str,
        *,
        title: str,
        scheduled_time: str,
        video_source: str | Path | None,
        subtitle: str = "",
        description: str = "",
        on_done: ResultCallback | None = None,
    ) -> Future:
        """Validate, store the video locally, then add the lesson remotely.

        On success the new id is recorded as created, the item is inserted
        into the level's list right away and the level is refreshed.
        """
        self._require_instructor()
        level = normalize_level(level)
        if not scheduled_time.strip():
            raise ValidationError("Please enter time")
        if not title.strip():
            raise ValidationError("Please enter a title")
        if not video_source:
            raise ValidationError("Please choose a video first")

        try:
            media_path = self.media_store.import_video(video_source)
        except OSError as exc:
            raise ValidationError("Failed to save video locally") from exc

        item = LessonItem(
            title=title.strip(),
            level=level,
            subtitle=subtitle,
            description=description,
            scheduled_time=scheduled_time.strip(),
            media_path=media_path,
            capacity=DEFAULT_MAX_PARTICIPANTS,
            registered_count=0,
            icon_id=DEFAULT_ICON_ID,
            creator_id=self.session.get_uid(),
        )
        logger.info("Saving lesson %r for level %s", item.title, level)

        def _on_added(doc_id: str) -> None:
            created = replace(item, id=doc_id)
            self.preferences.add_created(doc_id)
            self.cache.insert_locally(level, created)
            self.cache.refresh(level)
            self.notify("Lesson saved!")
            if on_done is not None:
                on_done(EditorResult(status=COMMITTED, item=created))

        def _on_failed(exc: Exception) -> None:
            # The remote document does not exist, so the copied video is orphaned
            self.media_store.delete(media_path)
            self.notify(f"Save failed: {exc}")
            if on_done is not None:
                on_done(EditorResult.cancelled())

        return self.runner.submit(
            f"add-lesson:{level}",
            lambda: self.catalog.add(item.to_document()),
            on_success=_on_added,
            on_failure=_on_failed,
        )

    def update(
        self,
        item: LessonItem,
        *,
        title: str,
        subtitle: str,
        description: str,
        video_uri: str | None = None,
        on_done: ResultCallback | None = None,
    ) -> Future:
        """Write edited text fields (and optionally a new video) to an existing lesson."""
        self._require_instructor()
        if not item.id:
            raise ValidationError("Cannot update a lesson that has no id")
        if not title.strip():
            raise ValidationError("Please enter a title")

        fields: dict[str, str] = {
            "title": title.strip(),
            "subtitle": subtitle,
            "description": description,
        }
        if video_uri:
            fields["videoPath"] = video_uri
        updated = replace(
            item,
            title=fields["title"],
            subtitle=subtitle,
            description=description,
            media_path=video_uri or item.media_path,
        )

        def _on_updated(_: object) -> None:
            self.cache.refresh(item.level)
            self.notify("Lesson updated!")
            if on_done is not None:
                on_done(EditorResult(status=COMMITTED, item=updated))

        def _on_update_failed(exc: Exception) -> None:
            self.notify(f"Update failed: {exc}")
            if on_done is not None:
                on_done(EditorResult.cancelled())

        return self.runner.submit(
            f"update-lesson:{item.id}",
            lambda: self.catalog.update(item.id, fields),
            on_success=_on_updated,
            on_failure=_on_update_failed,
        )
