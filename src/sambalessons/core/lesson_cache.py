# -*- coding: utf-8 -*-
"""Per-level reactive cache of lessons fetched from the remote catalog."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable

from sambalessons.core.observable import LessonListObservable
from sambalessons.core.remote_runner import RemoteRunner
from sambalessons.integrations.catalog_source import CatalogSource
from sambalessons.models.lesson_item import LessonItem, normalize_level

logger = logging.getLogger(__name__)


FetchFailedCallback = Callable[[str, str], None]
FetchCompletedCallback = Callable[[str, int], None]


def schedule_order(item: LessonItem) -> tuple[str, str]:
    """Deterministic sort key: scheduled time, then id."""
    return (item.scheduled_time or "", item.id or "")


class LessonCache:
    """One observable lesson list per level, filled from the catalog.

    Each fetch is tagged with a per-level generation number. Only the
    completion of the most recently issued fetch may touch the observable;
    older completions are dropped. A failed fetch keeps the last good list.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        runner: RemoteRunner,
        *,
        sort_by_schedule: bool = False,
    ) -> None:
        self.catalog = catalog
        self.runner = runner
        self.sort_by_schedule = sort_by_schedule
        self._observables: dict[str, LessonListObservable] = {}
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()
        # Serializes the generation check with the write it guards
        self._apply_lock = threading.RLock()

        self.fetch_completed: FetchCompletedCallback | None = None
        self.fetch_failed: FetchFailedCallback | None = None

    def observe(self, level: str) -> LessonListObservable:
        """Return the observable for `level`, creating an empty one. Does not fetch."""
        level = normalize_level(level)
        with self._lock:
            observable = self._observables.get(level)
            if observable is None:
                observable = LessonListObservable(level)
                self._observables[level] = observable
                self._generations.setdefault(level, 0)
            return observable

    def observe_and_refresh(self, level: str) -> LessonListObservable:
        observable = self.observe(level)
        self.refresh(level)
        return observable

    def is_observed(self, level: str) -> bool:
        with self._lock:
            return normalize_level(level) in self._observables

    def refresh(self, level: str) -> Future:
        """(Re)fetch `level` in the background; the observable is created if needed."""
        observable = self.observe(level)
        level = observable.level
        with self._lock:
            generation = self._generations.get(level, 0) + 1
            self._generations[level] = generation
        observable.loading = True
        logger.debug("Fetching lessons for %s (generation %d)", level, generation)
        return self.runner.submit(
            f"fetch:{level}",
            lambda: self._fetch(level),
            on_success=lambda items: self._apply_result(observable, generation, items),
            on_failure=lambda exc: self._apply_failure(observable, generation, exc),
        )

    def insert_locally(self, level: str, item: LessonItem) -> bool:
        """Append `item` to an observed level without a remote round-trip."""
        level = normalize_level(level)
        with self._lock:
            observable = self._observables.get(level)
        if observable is None:
            logger.debug("Optimistic insert into unobserved level %s ignored", level)
            return False
        observable.append(item)
        return True

    def remove_locally(self, level: str, lesson_id: str) -> bool:
        level = normalize_level(level)
        with self._lock:
            observable = self._observables.get(level)
        if observable is None:
            return False
        return observable.remove(lesson_id)

    def release(self, level: str) -> None:
        """Forget a level; in-flight fetches for it complete into nothing."""
        level = normalize_level(level)
        with self._lock:
            self._observables.pop(level, None)
        logger.debug("Released lesson observable for %s", level)

    def close(self, wait_for_tasks: bool = False) -> None:
        with self._lock:
            self._observables.clear()
        self.runner.shutdown(wait_for_tasks=wait_for_tasks)

    def wait_for_all(self, timeout: float | None = None) -> None:
        self.runner.wait_for_all(timeout=timeout)

    # ------------------------------------------------------------------
    # Fetch plumbing
    # ------------------------------------------------------------------

    def _fetch(self, level: str) -> list[LessonItem]:
        documents = self.catalog.query("level", level)
        items = [LessonItem.from_document(doc_id, data) for doc_id, data in documents]
        if self.sort_by_schedule:
            items.sort(key=schedule_order)
        return items

    def _is_current(self, observable: LessonListObservable, generation: int) -> bool:
        with self._lock:
            if self._observables.get(observable.level) is not observable:
                logger.debug("Dropping fetch result for released level %s", observable.level)
                return False
            latest = self._generations.get(observable.level, 0)
        if generation != latest:
            logger.debug(
                "Dropping stale fetch for %s (generation %d, latest %d)",
                observable.level,
                generation,
                latest,
            )
            return False
        return True

    def _apply_result(self, observable: LessonListObservable, generation: int, items: list[LessonItem]) -> None:
        with self._apply_lock:
            if not self._is_current(observable, generation):
                return
            logger.info("Loaded %d lessons for %s", len(items), observable.level)
            observable.set_value(items)
        if self.fetch_completed is not None:
            self.fetch_completed(observable.level, len(items))

    def _apply_failure(self, observable: LessonListObservable, generation: int, exc: Exception) -> None:
        with self._apply_lock:
            if not self._is_current(observable, generation):
                return
            message = f"Error loading lessons: {exc}"
            logger.error("Fetch for %s failed, keeping %d cached lessons: %s", observable.level, len(observable.value), exc)
            observable.set_error(message)
        if self.fetch_failed is not None:
            self.fetch_failed(observable.level, message)
