# -*- coding: utf-8 -*-
"""Lesson item data model and its document mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sambalessons.constants import LEVEL_ALIASES


# Remote document field -> LessonItem attribute
DOCUMENT_FIELDS = {
    "time": "scheduled_time",
    "title": "title",
    "subtitle": "subtitle",
    "description": "description",
    "videoPath": "media_path",
    "likes": "registered_count",
    "maxParticipants": "capacity",
    "iconId": "icon_id",
    "level": "level",
    "createdBy": "creator_id",
}


def normalize_level(value: str) -> str:
    """Return the canonical stored level for `value` ("Beginner" -> "Beginners")."""
    key = str(value or "").strip().lower()
    if key not in LEVEL_ALIASES:
        raise ValueError(f"Unknown lesson level: {value!r}")
    return LEVEL_ALIASES[key]


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class LessonItem:
    """One lesson as mirrored from the remote catalog.

    `is_favorite` is transient: it is recomputed from local preferences on
    every render and never written back to the document.
    """

    title: str
    level: str
    subtitle: str = ""
    description: str = ""
    scheduled_time: str = ""
    media_path: str | None = None
    capacity: int = 0
    registered_count: int = 0
    is_past_schedule: bool = False
    icon_id: str | None = None
    creator_id: str | None = None
    id: str | None = None
    is_favorite: bool = False

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> LessonItem:
        """Build an item from a document id and its field bag."""
        raw_level = data.get("level") or ""
        try:
            level = normalize_level(raw_level)
        except ValueError:
            level = str(raw_level)
        return cls(
            id=doc_id,
            title=str(data.get("title") or ""),
            subtitle=str(data.get("subtitle") or ""),
            description=str(data.get("description") or ""),
            scheduled_time=str(data.get("time") or ""),
            media_path=data.get("videoPath") or None,
            registered_count=_as_int(data.get("likes")),
            capacity=_as_int(data.get("maxParticipants")),
            icon_id=data.get("iconId") or None,
            level=level,
            creator_id=data.get("createdBy") or None,
            is_past_schedule=bool(data.get("isPast", False)),
        )

    def to_document(self) -> dict[str, Any]:
        """Return the remote field bag. The id and transient flags are excluded."""
        return {field: getattr(self, attr) for field, attr in DOCUMENT_FIELDS.items()}
