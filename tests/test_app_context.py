# -*- coding: utf-8 -*-
"""Tests for wiring the application context."""

from __future__ import annotations

from pathlib import Path

from conftest import FakeCatalog, FakeIdentity

from sambalessons.app_context import build_app_context
from sambalessons.constants import KEY_PENDING_MIRROR


def test_build_uses_storage_settings(tmp_path: Path, default_config: dict, catalog: FakeCatalog) -> None:
    default_config["storage"]["preferences_file"] = "state/prefs.json"
    ctx = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("u"))
    ctx.preferences.add_favorite("L1")
    assert (tmp_path / "state" / "prefs.json").exists()
    assert ctx.media_store.videos_dir == tmp_path / "media" / "videos"
    ctx.close()


def test_pending_mirror_writes_are_retried_at_startup(tmp_path: Path, default_config: dict) -> None:
    catalog = FakeCatalog()
    catalog.fail("set_user_favorite")
    first = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("uid-a"))
    first.mirror.enqueue("uid-a", "L1", True)
    first.mirror.flush()
    first.close()
    assert catalog.favorites == {}

    catalog.heal("set_user_favorite")
    second = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("uid-a"))
    second.runner.wait_for_all(timeout=2)
    assert catalog.favorites == {"uid-a": {"L1"}}
    assert second.store.get_scalar(KEY_PENDING_MIRROR) == {}
    second.close()


def test_session_restored_from_previous_run(tmp_path: Path, default_config: dict, catalog: FakeCatalog) -> None:
    first = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("u"))
    first.session.set_identity("Ana", "31", "ana@example.com", "Guide")
    first.close()

    second = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("u"))
    assert second.session.name == "Ana"
    assert second.session.is_privileged() is True
    second.close()


def test_adapter_for_registers_by_level(tmp_path: Path, default_config: dict, catalog: FakeCatalog) -> None:
    ctx = build_app_context(default_config, base_dir=tmp_path, catalog=catalog, identity=FakeIdentity("u"))
    adapter = ctx.adapter_for("beginner")
    assert ctx.adapters == {"Beginners": adapter}
    ctx.close()
    assert ctx.adapters == {}
