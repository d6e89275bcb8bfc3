# -*- coding: utf-8 -*-
"""Durable device-local key-value store for sets and scalars."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from copy import deepcopy
from pathlib import Path
from typing import Any

from sambalessons.utils.file_utils import read_json_file, write_json_file

logger = logging.getLogger(__name__)


SetMutation = Callable[[set[str]], None]


class PreferenceStore:
    """String-set and scalar preferences persisted to one JSON file.

    Every mutating call writes the file before returning. All access goes
    through one re-entrant lock, so read-modify-write sequences done inside
    `update_set` or `update_scalar` cannot interleave with another thread.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._sets: dict[str, set[str]] = {}
        self._scalars: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = read_json_file(self.path)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("Preference file %s is unreadable, starting empty: %s", self.path, exc)
            return
        raw_sets = data.get("sets", {})
        if isinstance(raw_sets, dict):
            self._sets = {
                str(name): {str(item) for item in values}
                for name, values in raw_sets.items()
                if isinstance(values, list)
            }
        raw_scalars = data.get("scalars", {})
        if isinstance(raw_scalars, dict):
            self._scalars = dict(raw_scalars)

    def _persist(self) -> None:
        payload = {
            "sets": {name: sorted(values) for name, values in self._sets.items()},
            "scalars": self._scalars,
        }
        write_json_file(self.path, payload)

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def add_to_set(self, set_name: str, key: str) -> bool:
        """Add `key` to a set. Returns True if membership changed."""
        with self._lock:
            values = self._sets.setdefault(set_name, set())
            if key in values:
                return False
            values.add(key)
            self._persist()
            return True

    def remove_from_set(self, set_name: str, key: str) -> bool:
        """Remove `key` from a set. Returns True if membership changed."""
        with self._lock:
            values = self._sets.get(set_name)
            if not values or key not in values:
                return False
            values.discard(key)
            self._persist()
            return True

    def contains(self, set_name: str, key: str) -> bool:
        with self._lock:
            return key in self._sets.get(set_name, ())

    def get_all(self, set_name: str) -> set[str]:
        """Return a copy of a set; mutating it does not touch the store."""
        with self._lock:
            return set(self._sets.get(set_name, ()))

    def update_set(self, set_name: str, mutate: SetMutation) -> set[str]:
        """Apply `mutate` to a copy of the set and store the result atomically."""
        with self._lock:
            current = set(self._sets.get(set_name, ()))
            mutate(current)
            if current != self._sets.get(set_name, set()):
                self._sets[set_name] = current
                self._persist()
            return set(current)

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def set_scalar(self, name: str, value: Any) -> None:
        try:
            json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise TypeError(f"Preference {name!r} is not JSON serializable") from exc
        with self._lock:
            self._scalars[name] = deepcopy(value)
            self._persist()

    def get_scalar(self, name: str, default: Any = None) -> Any:
        with self._lock:
            if name not in self._scalars:
                return default
            return deepcopy(self._scalars[name])

    def update_scalar(self, name: str, update: Callable[[Any], Any], default: Any = None) -> Any:
        """Replace a scalar with `update(current)` inside one lock acquisition."""
        with self._lock:
            current = deepcopy(self._scalars.get(name, default))
            new_value = update(current)
            self.set_scalar(name, new_value)
            return deepcopy(new_value)

    def remove_scalar(self, name: str) -> bool:
        with self._lock:
            if name not in self._scalars:
                return False
            del self._scalars[name]
            self._persist()
            return True

    def clear(self) -> None:
        with self._lock:
            self._sets.clear()
            self._scalars.clear()
            self._persist()
