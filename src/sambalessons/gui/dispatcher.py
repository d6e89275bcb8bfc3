# -*- coding: utf-8 -*-
"""Marshals worker-thread continuations onto the Qt GUI thread."""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import QObject, Qt, pyqtSignal

logger = logging.getLogger(__name__)


class QtDispatcher(QObject):
    """Dispatcher for `RemoteRunner`: `post(callback)` runs `callback` on this object's thread.

    Create it on the GUI thread. Emitting from a worker thread queues the
    call into the GUI event loop.
    """

    _invoke = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def post(self, callback: Callable[[], None]) -> None:
        self._invoke.emit(callback)

    __call__ = post

    def _run(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            # Slots must not raise into the event loop
            logger.exception("Continuation failed on the GUI thread")
