# -*- coding: utf-8 -*-
"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
import threading
from pathlib import Path
from typing import Any

import pytest


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from sambalessons.core.lesson_preferences import LessonPreferences  # noqa: E402
from sambalessons.core.media_store import MediaStore  # noqa: E402
from sambalessons.core.preference_store import PreferenceStore  # noqa: E402
from sambalessons.core.remote_runner import RemoteRunner  # noqa: E402
from sambalessons.core.session import SessionContext  # noqa: E402
from sambalessons.integrations.catalog_source import CatalogSource, IdentityProvider, RemoteError  # noqa: E402


class FakeCatalog(CatalogSource):
    """In-memory catalog with per-method failure injection and query gates."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = {k: dict(v) for k, v in (documents or {}).items()}
        self.users: dict[str, dict[str, Any]] = {}
        self.favorites: dict[str, set[str]] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple]] = []
        # Queued per query call; each query blocks until its gate is set
        self.query_gates: list[threading.Event] = []
        self.query_results: list[list[tuple[str, dict[str, Any]]]] = []
        self._next_id = 100
        self._lock = threading.Lock()

    def fail(self, method: str, error: Exception | None = None) -> None:
        self.failures[method] = error or RemoteError(f"{method} unavailable")

    def heal(self, method: str) -> None:
        self.failures.pop(method, None)

    def _call(self, method: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((method, args))
        error = self.failures.get(method)
        if error is not None:
            raise error

    def query(self, field: str, value: Any) -> list[tuple[str, dict[str, Any]]]:
        with self._lock:
            gate = self.query_gates.pop(0) if self.query_gates else None
            canned = self.query_results.pop(0) if self.query_results else None
        if gate is not None:
            gate.wait(timeout=5)
        self._call("query", field, value)
        if canned is not None:
            return canned
        with self._lock:
            return [(doc_id, dict(data)) for doc_id, data in self.documents.items() if data.get(field) == value]

    def add(self, fields: dict[str, Any]) -> str:
        self._call("add", fields)
        with self._lock:
            doc_id = f"L{self._next_id}"
            self._next_id += 1
            self.documents[doc_id] = dict(fields)
        return doc_id

    def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        self._call("update", doc_id, fields)
        if doc_id not in self.documents:
            raise RemoteError(f"Lesson {doc_id} no longer exists")
        self.documents[doc_id].update(fields)

    def delete(self, doc_id: str) -> None:
        self._call("delete", doc_id)
        self.documents.pop(doc_id, None)

    def set_user_favorite(self, uid: str, lesson_id: str) -> None:
        self._call("set_user_favorite", uid, lesson_id)
        self.favorites.setdefault(uid, set()).add(lesson_id)

    def delete_user_favorite(self, uid: str, lesson_id: str) -> None:
        self._call("delete_user_favorite", uid, lesson_id)
        self.favorites.get(uid, set()).discard(lesson_id)

    def get_user(self, uid: str) -> dict[str, Any] | None:
        self._call("get_user", uid)
        data = self.users.get(uid)
        return dict(data) if data is not None else None

    def save_user(self, uid: str, data: dict[str, Any]) -> None:
        self._call("save_user", uid, data)
        self.users[uid] = dict(data)


class FakeIdentity(IdentityProvider):
    def __init__(self, uid: str | None = None, accept: bool = True) -> None:
        self.uid = uid
        self.accept = accept
        self.new_uid = "uid-new"

    def current_uid(self) -> str | None:
        return self.uid

    def sign_in(self, email: str, password: str) -> bool:
        if self.accept:
            self.uid = f"uid-{email.split('@')[0]}"
        return self.accept

    def sign_up(self, email: str, password: str) -> bool:
        if self.accept:
            self.uid = self.new_uid
        return self.accept

    def sign_out(self) -> None:
        self.uid = None


def lesson_doc(title: str, level: str = "Beginners", **extra: Any) -> dict[str, Any]:
    doc = {
        "title": title,
        "subtitle": f"{title} subtitle",
        "description": f"About {title}",
        "time": "18:00",
        "level": level,
        "likes": 3,
        "maxParticipants": 20,
        "iconId": "icon_image_dance",
        "videoPath": None,
    }
    doc.update(extra)
    return doc


@pytest.fixture
def sample_docs() -> dict[str, dict[str, Any]]:
    return {
        "L1": lesson_doc("Basic Step"),
        "L2": lesson_doc("Samba no Pe", time="19:00"),
        "L3": lesson_doc("Volta", level="Advanced"),
        "L4": lesson_doc("Old Class", isPast=True),
    }


@pytest.fixture
def default_config() -> dict:
    from sambalessons.config import get_default_config

    return get_default_config()


@pytest.fixture
def catalog(sample_docs) -> FakeCatalog:
    return FakeCatalog(sample_docs)


@pytest.fixture
def store(tmp_path: Path) -> PreferenceStore:
    return PreferenceStore(tmp_path / "prefs.json")


@pytest.fixture
def preferences(store: PreferenceStore) -> LessonPreferences:
    return LessonPreferences(store)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(uid="uid-ana")


@pytest.fixture
def session(store: PreferenceStore, identity: FakeIdentity) -> SessionContext:
    return SessionContext(store, identity)


@pytest.fixture
def instructor_session(session: SessionContext) -> SessionContext:
    session.set_identity("Ana", "31", "ana@example.com", "Instructor")
    return session


@pytest.fixture
def media_store(tmp_path: Path) -> MediaStore:
    return MediaStore(tmp_path / "media")


@pytest.fixture
def runner():
    runner = RemoteRunner(max_workers=2)
    yield runner
    runner.shutdown(wait_for_tasks=True)


@pytest.fixture
def qt_app():
    pytest.importorskip("PyQt6")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    return app
