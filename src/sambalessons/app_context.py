# -*- coding: utf-8 -*-
"""Builds the object graph shared by the CLI and the GUI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sambalessons.core.favorite_mirror import FavoriteMirror
from sambalessons.core.lesson_adapter import LessonListAdapter
from sambalessons.core.lesson_cache import LessonCache
from sambalessons.core.lesson_composer import LessonComposer
from sambalessons.core.lesson_preferences import LessonPreferences
from sambalessons.core.media_store import MediaStore
from sambalessons.core.preference_store import PreferenceStore
from sambalessons.core.remote_runner import Dispatcher, RemoteRunner
from sambalessons.core.session import SessionContext
from sambalessons.integrations.catalog_source import CatalogSource, IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything one running app instance needs, created once at startup."""

    settings: dict[str, Any]
    store: PreferenceStore
    preferences: LessonPreferences
    session: SessionContext
    catalog: CatalogSource
    runner: RemoteRunner
    cache: LessonCache
    mirror: FavoriteMirror
    media_store: MediaStore
    composer: LessonComposer
    adapters: dict[str, LessonListAdapter] = field(default_factory=dict)

    def adapter_for(self, level: str, **kwargs: Any) -> LessonListAdapter:
        """Return (and remember) the list adapter for a level."""
        adapter = LessonListAdapter(
            level,
            self.cache,
            self.session,
            self.preferences,
            self.media_store,
            self.mirror,
            **kwargs,
        )
        self.adapters[adapter.level] = adapter
        return adapter

    def close(self) -> None:
        for adapter in self.adapters.values():
            adapter.detach()
        self.adapters.clear()
        self.runner.wait_for_all(timeout=5.0)
        self.cache.close()


def build_app_context(
    settings: dict[str, Any],
    *,
    base_dir: str | Path = ".",
    catalog: CatalogSource | None = None,
    identity: IdentityProvider | None = None,
    dispatcher: Dispatcher | None = None,
) -> AppContext:
    """Wire stores, session, catalog and cache from settings.

    Without an explicit catalog or identity provider the Firebase
    implementations are created from the `firebase` settings.
    """
    base = Path(base_dir)
    storage = settings.get("storage", {})
    store = PreferenceStore(base / storage.get("preferences_file", "samba_prefs.json"))
    preferences = LessonPreferences(store)

    firebase = settings.get("firebase", {})
    if identity is None:
        from sambalessons.integrations.firebase_identity import FirebaseIdentity

        identity = FirebaseIdentity(str(firebase.get("api_key", "")), store)
    if catalog is None:
        from sambalessons.integrations.firestore_catalog import FirestoreCatalog, init_firestore_client

        collections = settings.get("collections", {})
        client = init_firestore_client(
            str(firebase.get("credentials_path", "")),
            str(firebase.get("project_id", "")),
        )
        catalog = FirestoreCatalog(
            client,
            lessons_collection=collections.get("lessons", "lessons"),
            users_collection=collections.get("users", "users"),
            favorites_subcollection=collections.get("favorites", "favorites"),
        )

    session = SessionContext(store, identity)
    session.reload_from_store()

    cache_settings = settings.get("cache", {})
    runner = RemoteRunner(max_workers=int(cache_settings.get("max_workers", 2)), dispatcher=dispatcher)
    cache = LessonCache(catalog, runner, sort_by_schedule=bool(cache_settings.get("sort_by_schedule", False)))

    mirror_settings = settings.get("favorites_mirror", {})
    mirror = FavoriteMirror(
        catalog,
        store,
        runner,
        max_attempts=int(mirror_settings.get("max_attempts", 3)),
        enabled=bool(mirror_settings.get("enabled", True)),
    )
    if mirror.pending():
        logger.info("Retrying %d pending favorite mirror writes", len(mirror.pending()))
        mirror.schedule_flush()

    media_store = MediaStore(base / storage.get("media_dir", "media"))
    composer = LessonComposer(catalog, runner, cache, session, preferences, media_store)

    return AppContext(
        settings=settings,
        store=store,
        preferences=preferences,
        session=session,
        catalog=catalog,
        runner=runner,
        cache=cache,
        mirror=mirror,
        media_store=media_store,
        composer=composer,
    )
