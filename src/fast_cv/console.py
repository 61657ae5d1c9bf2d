# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles for diagnostics written next to the report.

stdout carries the report only, so every console built here targets stderr.
"""

from __future__ import annotations

import sys
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stderr is attached to a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        # Closed or replaced streams (pytest capture, CliRunner) have no TTY.
        return False


@lru_cache(maxsize=8)
def _build_console(styled: bool, emoji: bool) -> Console:
    return Console(
        stderr=True,
        color_system="auto" if styled else None,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def stderr_console(*, color: bool, emoji: bool) -> Console:
    """Return a shared stderr console for the given presentation flags.

    Colour is only enabled when requested *and* stderr is a terminal, so a
    redirected ``2>log`` never receives ANSI escapes.

    Args:
        color: Caller preference for coloured output.
        emoji: Whether Rich should substitute ``:emoji:`` codes.

    Returns:
        Console: Cached console writing to ``sys.stderr``.
    """

    return _build_console(color and detect_tty(), emoji)


__all__ = ["detect_tty", "stderr_console"]
