# -*- coding: utf-8 -*-
"""Observable container for one level's lesson list."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from sambalessons.models.lesson_item import LessonItem

logger = logging.getLogger(__name__)


ListObserver = Callable[[list[LessonItem]], None]


class LessonListObservable:
    """Current lesson list for a level; observers are notified on every replacement.

    Observers are called synchronously, in subscription order, with a copy
    of the new list.
    """

    def __init__(self, level: str) -> None:
        self.level = level
        self._items: list[LessonItem] = []
        self._observers: list[ListObserver] = []
        self._lock = threading.RLock()
        self.error: str | None = None
        self.loading = False
        self.has_value = False

    @property
    def value(self) -> list[LessonItem]:
        with self._lock:
            return list(self._items)

    def subscribe(self, observer: ListObserver, *, emit_current: bool = True) -> Callable[[], None]:
        """Register an observer and return a function that unsubscribes it."""
        with self._lock:
            self._observers.append(observer)
            current = list(self._items) if emit_current and self.has_value else None
        if current is not None:
            observer(current)

        def _unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return _unsubscribe

    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def set_value(self, items: list[LessonItem]) -> None:
        """Replace the whole list, clear any error and notify observers."""
        with self._lock:
            observers, snapshot = self._replace(list(items))
        self._notify(observers, snapshot)

    def set_error(self, message: str) -> None:
        """Flag a failure; the last list stays in place."""
        with self._lock:
            self.error = message
            self.loading = False

    def append(self, item: LessonItem) -> None:
        with self._lock:
            observers, snapshot = self._replace(self._items + [item])
        self._notify(observers, snapshot)

    def remove(self, lesson_id: str) -> bool:
        with self._lock:
            items = [item for item in self._items if item.id != lesson_id]
            if len(items) == len(self._items):
                return False
            observers, snapshot = self._replace(items)
        self._notify(observers, snapshot)
        return True

    def _replace(self, items: list[LessonItem]) -> tuple[list[ListObserver], list[LessonItem]]:
        self._items = items
        self.error = None
        self.loading = False
        self.has_value = True
        return list(self._observers), list(items)

    @staticmethod
    def _notify(observers: list[ListObserver], snapshot: list[LessonItem]) -> None:
        for observer in observers:
            observer(list(snapshot))
