# -*- coding: utf-8 -*-
"""Lesson icon resolution."""

from __future__ import annotations

from sambalessons.constants import DEFAULT_ICON_ID


LEVEL_ICONS = {
    "Beginners": "basic_icon_image",
    "Advanced": "advanced_icon_image",
    "Expert": "expert_icon_image",
}

KNOWN_ICONS = frozenset({*LEVEL_ICONS.values(), DEFAULT_ICON_ID, "person_icon"})


def resolve_icon(icon_id: str | None, level: str | None = None) -> str:
    """Pick the icon for a lesson.

    An explicitly stored, known icon id wins; otherwise the level decides;
    anything else falls back to the default icon.
    """
    if icon_id and icon_id in KNOWN_ICONS:
        return icon_id
    if level and level in LEVEL_ICONS:
        return LEVEL_ICONS[level]
    return DEFAULT_ICON_ID
