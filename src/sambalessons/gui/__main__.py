# -*- coding: utf-8 -*-
"""Module entry point for `python -m sambalessons.gui`."""

from __future__ import annotations

from sambalessons.main import main_gui


if __name__ == "__main__":
    raise SystemExit(main_gui())
