# -*- coding: utf-8 -*-
"""Application entry point."""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

from sambalessons.app_context import build_app_context
from sambalessons.cli.lessons_cli import app
from sambalessons.config import load_config
from sambalessons.constants import APP_NAME
from sambalessons.utils.logger import setup_session_logging


def global_exception_handler(exc_type, exc_value, exc_traceback):
    """Log fatal errors before the interpreter prints them."""
    error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    logging.getLogger().critical("FATAL CRASH:\n%s", error_msg)
    sys.__excepthook__(exc_type, exc_value, exc_traceback)


def main() -> int:
    """Run the command line interface."""
    sys.excepthook = global_exception_handler
    session_log_path = setup_session_logging(Path.cwd(), APP_NAME)
    logging.getLogger(__name__).debug("Session log file: %s", session_log_path)
    app()
    return 0


def main_gui() -> int:
    """Start the desktop window."""
    from PyQt6.QtWidgets import QApplication

    from sambalessons.gui.dispatcher import QtDispatcher
    from sambalessons.gui.lesson_window import LessonWindow

    sys.excepthook = global_exception_handler
    session_log_path = setup_session_logging(Path.cwd(), APP_NAME)
    logger = logging.getLogger(__name__)
    qt_app = QApplication.instance() or QApplication(sys.argv)
    if session_log_path is not None:
        logger.info("Session log file: %s", session_log_path)

    settings = load_config()
    # Created on the GUI thread so continuations are queued onto its event loop
    dispatcher = QtDispatcher()
    ctx = build_app_context(settings, dispatcher=dispatcher)
    window = LessonWindow(ctx)
    window.show()
    try:
        return qt_app.exec()
    finally:
        ctx.close()


if __name__ == "__main__":
    raise SystemExit(main())
