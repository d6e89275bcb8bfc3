# -*- coding: utf-8 -*-
"""Tests for the JSON-backed preference store."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from sambalessons.core.preference_store import PreferenceStore


def test_add_to_set_twice_keeps_single_member(store: PreferenceStore) -> None:
    assert store.add_to_set("favorite_lessons", "L1") is True
    assert store.add_to_set("favorite_lessons", "L1") is False
    assert store.get_all("favorite_lessons") == {"L1"}


def test_remove_absent_member_is_noop(store: PreferenceStore) -> None:
    store.add_to_set("favorite_lessons", "L1")
    assert store.remove_from_set("favorite_lessons", "L9") is False
    assert store.remove_from_set("missing_set", "L1") is False
    assert store.get_all("favorite_lessons") == {"L1"}


def test_get_all_returns_copy(store: PreferenceStore) -> None:
    store.add_to_set("watched_lessons", "L1")
    values = store.get_all("watched_lessons")
    values.add("L2")
    assert store.contains("watched_lessons", "L2") is False


def test_values_survive_reopen(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    first = PreferenceStore(path)
    first.add_to_set("created_lessons", "L7")
    first.set_scalar("user_name", "Ana")

    second = PreferenceStore(path)
    assert second.contains("created_lessons", "L7")
    assert second.get_scalar("user_name") == "Ana"


def test_every_mutation_is_written_immediately(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    store = PreferenceStore(path)
    store.add_to_set("favorite_lessons", "L1")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sets"]["favorite_lessons"] == ["L1"]

    store.remove_from_set("favorite_lessons", "L1")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sets"]["favorite_lessons"] == []


def test_get_scalar_default_when_missing(store: PreferenceStore) -> None:
    assert store.get_scalar("user_age") is None
    assert store.get_scalar("user_age", "0") == "0"


def test_set_scalar_rejects_unserializable_value(store: PreferenceStore) -> None:
    with pytest.raises(TypeError):
        store.set_scalar("bad", object())


def test_remove_scalar(store: PreferenceStore) -> None:
    store.set_scalar("auth_uid", "uid-1")
    assert store.remove_scalar("auth_uid") is True
    assert store.remove_scalar("auth_uid") is False
    assert store.get_scalar("auth_uid") is None


def test_corrupt_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    store = PreferenceStore(path)
    assert store.get_all("favorite_lessons") == set()
    store.add_to_set("favorite_lessons", "L1")
    assert PreferenceStore(path).contains("favorite_lessons", "L1")


def test_update_scalar_is_read_modify_write(store: PreferenceStore) -> None:
    store.update_scalar("counter", lambda value: value + 1, 0)
    result = store.update_scalar("counter", lambda value: value + 1, 0)
    assert result == 2
    assert store.get_scalar("counter") == 2


def test_update_set_applies_mutation(store: PreferenceStore) -> None:
    store.add_to_set("watched_lessons", "L1")
    result = store.update_set("watched_lessons", lambda values: values.update({"L2", "L3"}))
    assert result == {"L1", "L2", "L3"}
    assert store.get_all("watched_lessons") == {"L1", "L2", "L3"}


def test_concurrent_writers_do_not_lose_updates(store: PreferenceStore) -> None:
    def _worker(prefix: str) -> None:
        for index in range(25):
            store.add_to_set("favorite_lessons", f"{prefix}{index}")
            store.update_scalar("count", lambda value: value + 1, 0)

    threads = [threading.Thread(target=_worker, args=(f"t{n}-",)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store.get_all("favorite_lessons")) == 100
    assert store.get_scalar("count") == 100


def test_clear_removes_everything(store: PreferenceStore) -> None:
    store.add_to_set("favorite_lessons", "L1")
    store.set_scalar("user_name", "Ana")
    store.clear()
    assert store.get_all("favorite_lessons") == set()
    assert store.get_scalar("user_name") is None
