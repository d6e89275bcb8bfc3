# -*- coding: utf-8 -*-
"""Outcome of an editor or composer session."""

from __future__ import annotations

from dataclasses import dataclass

from sambalessons.models.lesson_item import LessonItem


COMMITTED = "committed"
CANCELLED = "cancelled"


@dataclass
class EditorResult:
    """Returned by an editor: committed with the new values, or cancelled."""

    status: str
    item: LessonItem | None = None

    @property
    def committed(self) -> bool:
        return self.status == COMMITTED

    @classmethod
    def cancelled(cls) -> EditorResult:
        return cls(status=CANCELLED)
