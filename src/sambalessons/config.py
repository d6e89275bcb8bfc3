# -*- coding: utf-8 -*-
"""Settings persistence and validation."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any

from sambalessons.constants import (
    DEFAULT_MEDIA_DIR,
    DEFAULT_PREFERENCES_FILE,
    DEFAULT_SETTINGS_FILE,
    FAVORITES_SUBCOLLECTION,
    LESSONS_COLLECTION,
    USERS_COLLECTION,
)
from sambalessons.utils.file_utils import read_json_file, write_json_file


DEFAULT_CONFIG: dict[str, Any] = {
    "firebase": {
        "api_key": "USE_ENV_FILE",
        "credentials_path": "./firebase-service-account.json",
        "project_id": "",
    },
    "collections": {
        "lessons": LESSONS_COLLECTION,
        "users": USERS_COLLECTION,
        "favorites": FAVORITES_SUBCOLLECTION,
    },
    "storage": {
        "preferences_file": DEFAULT_PREFERENCES_FILE,
        "media_dir": DEFAULT_MEDIA_DIR,
    },
    "cache": {"max_workers": 2, "sort_by_schedule": False},
    "favorites_mirror": {"enabled": True, "max_attempts": 3},
}


class ConfigError(ValueError):
    """Raised when settings are invalid."""


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default config."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load a simple .env file (KEY=VALUE)."""
    values: dict[str, str] = {}
    if not env_path.exists():
        return values

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        values[key] = value
    return values


# .env variable -> firebase config key
ENV_OVERRIDES = {
    "FIREBASE_API_KEY": "api_key",
    "GOOGLE_APPLICATION_CREDENTIALS": "credentials_path",
    "FIREBASE_PROJECT_ID": "project_id",
}


def _apply_env_overrides(config: dict[str, Any], env_values: dict[str, str]) -> dict[str, Any]:
    """Apply environment-based overrides to runtime config."""
    merged = deepcopy(config)
    for env_name, config_key in ENV_OVERRIDES.items():
        value = env_values.get(env_name, "").strip()
        if value:
            merged.setdefault("firebase", {})
            merged["firebase"][config_key] = value
    return merged


def validate_config(config: dict[str, Any]) -> None:
    """Validate the fields the app depends on at startup."""
    for name in ("lessons", "users", "favorites"):
        value = config.get("collections", {}).get(name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"collections.{name} must be a non-empty string")

    workers = config.get("cache", {}).get("max_workers")
    if not isinstance(workers, int) or isinstance(workers, bool) or not (1 <= workers <= 16):
        raise ConfigError("cache.max_workers must be an int in range 1..16")

    attempts = config.get("favorites_mirror", {}).get("max_attempts")
    if not isinstance(attempts, int) or isinstance(attempts, bool) or not (1 <= attempts <= 20):
        raise ConfigError("favorites_mirror.max_attempts must be an int in range 1..20")

    prefs_file = config.get("storage", {}).get("preferences_file")
    if not isinstance(prefs_file, str) or not prefs_file.strip():
        raise ConfigError("storage.preferences_file must be a non-empty string")


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load config from JSON and merge into defaults."""
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    env_values = _load_env_file(config_path.parent / ".env")
    if not config_path.exists():
        return _apply_env_overrides(get_default_config(), env_values)

    loaded = read_json_file(config_path)
    merged = _deep_merge(get_default_config(), loaded)
    merged = _apply_env_overrides(merged, env_values)
    validate_config(merged)
    return merged


def _strip_api_keys(config: dict[str, Any]) -> dict[str, Any]:
    """Replace a real Firebase API key with the .env placeholder."""
    config_copy = deepcopy(config)
    firebase = config_copy.get("firebase", {})
    current_value = firebase.get("api_key")
    # Web API keys are 39 characters; short values are placeholders or test keys
    if current_value and len(current_value) > 20:
        firebase["api_key"] = "USE_ENV_FILE"
    return config_copy


def save_config(config: dict[str, Any], path: str | Path | None = None) -> Path:
    """Validate and save config as JSON, but without the real API key.

    The API key belongs in the .env file, not in settings.json.
    """
    validate_config(config)
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    write_json_file(config_path, _strip_api_keys(config))
    return config_path
