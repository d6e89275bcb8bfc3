# -*- coding: utf-8 -*-
"""Tests for creating and updating lessons."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeCatalog

from sambalessons.core.lesson_cache import LessonCache
from sambalessons.core.lesson_composer import LessonComposer, ValidationError
from sambalessons.core.lesson_preferences import LessonPreferences
from sambalessons.core.media_store import MediaStore
from sambalessons.core.remote_runner import RemoteRunner
from sambalessons.core.session import SessionContext
from sambalessons.models.editor_result import EditorResult
from sambalessons.models.lesson_item import LessonItem


@pytest.fixture
def video(tmp_path: Path) -> Path:
    path = tmp_path / "picked.mp4"
    path.write_bytes(b"video")
    return path


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def cache(catalog: FakeCatalog, runner: RemoteRunner) -> LessonCache:
    return LessonCache(catalog, runner)


@pytest.fixture
def composer(
    catalog: FakeCatalog,
    runner: RemoteRunner,
    cache: LessonCache,
    instructor_session: SessionContext,
    preferences: LessonPreferences,
    media_store: MediaStore,
    notices: list[str],
) -> LessonComposer:
    return LessonComposer(catalog, runner, cache, instructor_session, preferences, media_store, notify=notices.append)


def test_create_adds_lesson_and_updates_cache(
    composer: LessonComposer,
    cache: LessonCache,
    catalog: FakeCatalog,
    preferences: LessonPreferences,
    video: Path,
    notices: list[str],
) -> None:
    observable = cache.observe_and_refresh("Beginners")
    cache.wait_for_all(timeout=2)
    results: list[EditorResult] = []

    composer.create("Beginner", title="Samba Reggae", scheduled_time="17:30", video_source=video, on_done=results.append)
    cache.wait_for_all(timeout=2)

    assert len(results) == 1 and results[0].committed
    new_id = results[0].item.id
    assert catalog.documents[new_id]["title"] == "Samba Reggae"
    assert catalog.documents[new_id]["level"] == "Beginners"
    assert catalog.documents[new_id]["createdBy"] == "uid-ana"
    assert catalog.documents[new_id]["maxParticipants"] == 20
    assert Path(catalog.documents[new_id]["videoPath"]).exists()
    assert preferences.is_created(new_id)
    assert new_id in [item.id for item in observable.value]
    assert notices == ["Lesson saved!"]


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"title": "T", "scheduled_time": " ", "video_source": "x.mp4"}, "Please enter time"),
        ({"title": "", "scheduled_time": "18:00", "video_source": "x.mp4"}, "Please enter a title"),
        ({"title": "T", "scheduled_time": "18:00", "video_source": None}, "Please choose a video first"),
    ],
)
def test_create_validation_happens_before_any_io(
    composer: LessonComposer, catalog: FakeCatalog, media_store: MediaStore, kwargs: dict, message: str
) -> None:
    with pytest.raises(ValidationError, match=message):
        composer.create("Beginners", **kwargs)
    assert catalog.calls == []
    assert not media_store.videos_dir.exists()


def test_create_with_missing_video_file(composer: LessonComposer, catalog: FakeCatalog, tmp_path: Path) -> None:
    with pytest.raises(ValidationError, match="Failed to save video locally"):
        composer.create("Beginners", title="T", scheduled_time="18:00", video_source=tmp_path / "gone.mp4")
    assert catalog.calls == []


def test_create_requires_instructor(
    catalog: FakeCatalog,
    runner: RemoteRunner,
    cache: LessonCache,
    session: SessionContext,
    preferences: LessonPreferences,
    media_store: MediaStore,
    video: Path,
) -> None:
    session.set_identity("Bo", "20", "bo@example.com", "Student")
    composer = LessonComposer(catalog, runner, cache, session, preferences, media_store)
    with pytest.raises(ValidationError):
        composer.create("Beginners", title="T", scheduled_time="18:00", video_source=video)


def test_failed_add_removes_copied_video(
    composer: LessonComposer,
    catalog: FakeCatalog,
    media_store: MediaStore,
    preferences: LessonPreferences,
    video: Path,
    notices: list[str],
) -> None:
    catalog.fail("add")
    results: list[EditorResult] = []
    future = composer.create("Beginners", title="T", scheduled_time="18:00", video_source=video, on_done=results.append)
    with pytest.raises(Exception):
        future.result(timeout=2)

    assert list(media_store.videos_dir.iterdir()) == []
    assert preferences.get_created() == set()
    assert [r.committed for r in results] == [False]
    assert results[0].item is None
    assert notices == ["Save failed: add unavailable"]


def test_update_writes_fields_and_refreshes(
    composer: LessonComposer, cache: LessonCache, catalog: FakeCatalog, notices: list[str]
) -> None:
    observable = cache.observe_and_refresh("Beginners")
    cache.wait_for_all(timeout=2)
    item = next(i for i in observable.value if i.id == "L1")
    results: list[EditorResult] = []

    composer.update(item, title="Basic Step II", subtitle="Week 2", description="Next", on_done=results.append)
    cache.wait_for_all(timeout=2)

    assert catalog.documents["L1"]["title"] == "Basic Step II"
    assert "videoPath" not in [k for c in catalog.calls if c[0] == "update" for k in c[1][1]]
    assert results[0].item.title == "Basic Step II"
    assert next(i for i in observable.value if i.id == "L1").title == "Basic Step II"
    assert notices == ["Lesson updated!"]


def test_update_failure_notifies_and_reports_cancelled(
    composer: LessonComposer, catalog: FakeCatalog, notices: list[str]
) -> None:
    catalog.fail("update")
    item = LessonItem(title="Basic Step", level="Beginners", id="L1")
    results: list[EditorResult] = []
    composer.update(item, title="New", subtitle="", description="", on_done=results.append)
    composer.runner.wait_for_all(timeout=2)
    assert notices == ["Update failed: update unavailable"]
    assert catalog.documents["L1"]["title"] == "Basic Step"
    assert [r.committed for r in results] == [False]


def test_failed_save_lets_the_form_stay_open(
    composer: LessonComposer, catalog: FakeCatalog, cache: LessonCache, video: Path
) -> None:
    catalog.fail("add")
    outcomes: list[bool] = []
    composer.create(
        "Beginners",
        title="T",
        scheduled_time="18:00",
        video_source=video,
        on_done=lambda result: outcomes.append(result.committed),
    )
    composer.runner.wait_for_all(timeout=2)
    assert outcomes == [False]

    catalog.heal("add")
    composer.create(
        "Beginners",
        title="T",
        scheduled_time="18:00",
        video_source=video,
        on_done=lambda result: outcomes.append(result.committed),
    )
    cache.wait_for_all(timeout=2)
    assert outcomes == [False, True]


def test_update_requires_id(composer: LessonComposer) -> None:
    with pytest.raises(ValidationError):
        composer.update(LessonItem(title="X", level="Beginners"), title="Y", subtitle="", description="")
