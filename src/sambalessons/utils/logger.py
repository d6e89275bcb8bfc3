# -*- coding: utf-8 -*-
"""Logging setup: one console stream plus one file per app run."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LEVEL_ENV_VAR = "SAMBALESSONS_LOG_LEVEL"
KEEP_SESSION_LOGS = 20


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def get_logger(name: str, log_file: str | Path | None = None) -> logging.Logger:
    """Return a standalone logger writing to the console and optionally a file."""
    named = logging.getLogger(name)
    if named.handlers:
        return named

    named.setLevel(logging.DEBUG)
    console = logging.StreamHandler()
    console.setFormatter(_formatter())
    named.addHandler(console)

    if log_file is not None:
        target = Path(log_file)
        target.parent.mkdir(parents=True, exist_ok=True)
        to_file = logging.FileHandler(target, encoding="utf-8")
        to_file.setFormatter(_formatter())
        named.addHandler(to_file)

    return named


def level_from_env(default: int = logging.INFO) -> int:
    value = os.getenv(LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(value) if value else default
    return level if isinstance(level, int) else default


def prune_session_logs(logs_dir: Path, prefix: str, keep: int = KEEP_SESSION_LOGS) -> int:
    """Delete all but the newest `keep` session logs. Returns how many were removed."""
    logs = sorted(logs_dir.glob(f"{prefix}-*.log"), key=lambda p: p.name, reverse=True)
    removed = 0
    for stale in logs[keep:]:
        try:
            stale.unlink()
            removed += 1
        except OSError as exc:
            logging.getLogger(__name__).debug("Could not remove old log %s: %s", stale, exc)
    return removed


def setup_session_logging(base_dir: str | Path, app_name: str) -> Path | None:
    """Configure the root logger once per process.

    Writes to the console and to ``<base_dir>/logs/<app>-<timestamp>.log``.
    The level comes from ``SAMBALESSONS_LOG_LEVEL`` (default INFO). Older
    session logs beyond the newest twenty are removed.
    """
    root = logging.getLogger()
    if getattr(root, "_sambalessons_logging_configured", False):
        return getattr(root, "_sambalessons_session_log", None)

    level = level_from_env()
    root.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(_formatter())
        root.addHandler(console)

    prefix = app_name.lower().replace(" ", "-")
    logs_dir = Path(base_dir) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    prune_session_logs(logs_dir, prefix, keep=KEEP_SESSION_LOGS - 1)

    session_log: Path | None = logs_dir / f"{prefix}-{datetime.now():%Y%m%d-%H%M%S}.log"
    try:
        to_file = logging.FileHandler(session_log, encoding="utf-8")
    except OSError as exc:
        root.error("Could not open session log %s: %s", session_log, exc)
        session_log = None
    else:
        to_file.setLevel(level)
        to_file.setFormatter(_formatter())
        root.addHandler(to_file)
        root.info("Logging this session to %s", session_log)

    root._sambalessons_logging_configured = True  # type: ignore[attr-defined]
    root._sambalessons_session_log = session_log  # type: ignore[attr-defined]
    return session_log
