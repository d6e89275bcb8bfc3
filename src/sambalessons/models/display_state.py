# -*- coding: utf-8 -*-
"""Effective per-row display state for a lesson list."""

from __future__ import annotations

from dataclasses import dataclass

from sambalessons.models.lesson_item import LessonItem


@dataclass(frozen=True)
class LessonDisplayState:
    """What a list row shows for one lesson after merging local state."""

    item: LessonItem
    is_favorite: bool
    is_watched: bool
    favorite_enabled: bool
    can_edit: bool
    can_delete: bool
    icon_id: str

    @property
    def lesson_id(self) -> str | None:
        return self.item.id
