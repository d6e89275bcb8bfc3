# -*- coding: utf-8 -*-
"""App-private storage for lesson videos."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from urllib.parse import urlparse

from sambalessons.constants import VIDEOS_SUBDIR
from sambalessons.utils.file_utils import ensure_dir

logger = logging.getLogger(__name__)


def is_local_path(media_path: str | None) -> bool:
    """True for plain filesystem paths, False for URIs such as content:// or https://."""
    if not media_path:
        return False
    scheme = urlparse(media_path).scheme
    # Single-letter schemes are Windows drive letters
    return scheme in ("", "file") or len(scheme) == 1


def _to_path(media_path: str) -> Path:
    if media_path.startswith("file://"):
        return Path(urlparse(media_path).path)
    return Path(media_path)


class MediaStore:
    """Copies picked videos under `<root>/videos` and deletes them again."""

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)
        self.videos_dir = self.root_dir / VIDEOS_SUBDIR

    def import_video(self, source: str | Path) -> str:
        """Copy `source` into the videos directory and return the stored path."""
        source_path = Path(source)
        if not source_path.is_file():
            raise FileNotFoundError(f"Video not found: {source_path}")
        ensure_dir(self.videos_dir)
        suffix = source_path.suffix or ".mp4"
        target = self.videos_dir / f"lesson_{int(time.time() * 1000)}{suffix}"
        while target.exists():
            target = target.with_name(f"{target.stem}_1{suffix}")
        shutil.copyfile(source_path, target)
        logger.info("Video saved locally: %s", target)
        return str(target)

    def exists(self, media_path: str | None) -> bool:
        return is_local_path(media_path) and _to_path(media_path).exists()

    def delete(self, media_path: str | None) -> bool:
        """Delete a local media file. Returns False if there was nothing to delete."""
        if not is_local_path(media_path):
            logger.debug("Not a local media path, nothing to delete: %s", media_path)
            return False
        path = _to_path(media_path)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Media file already gone: %s", path)
            return False
        logger.info("Deleted media file %s", path)
        return True
