# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status lines and diagnostic logging for the command line.

Everything here writes to stderr; stdout is reserved for the report.
"""

from __future__ import annotations

import logging
from typing import Final, Literal

from rich.logging import RichHandler
from rich.text import Text

from .console import detect_tty, stderr_console

PACKAGE_LOGGER_NAME: Final[str] = "fast_cv"

StatusKind = Literal["info", "ok", "warn", "fail"]

# kind -> (emoji prefix, rich style)
_STATUS_STYLES: Final[dict[StatusKind, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def status(kind: StatusKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a one-line status message to stderr.

    Args:
        kind: Message category selecting the prefix and colour.
        msg: Text to print.
        use_emoji: Prefix the line with the category emoji.
        use_color: Force colour on or off; ``None`` follows TTY detection.
    """

    prefix, style = _STATUS_STYLES[kind]
    colored = detect_tty() if use_color is None else use_color
    text = Text(f"{prefix if use_emoji else ''}{msg}")
    if colored:
        text.stylize(style)
    stderr_console(color=colored, emoji=use_emoji).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("fail", msg, use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, verbose: bool, use_color: bool = True) -> logging.Logger:
    """Route ``fast_cv.*`` log records through a Rich handler on stderr.

    Calling this again replaces the previously installed handler, so the CLI
    can be invoked repeatedly in one process (as the tests do).

    Args:
        verbose: Emit DEBUG records; otherwise only WARNING and above.
        use_color: Whether the handler's console may use colour.

    Returns:
        logging.Logger: The package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for existing in [handler for handler in logger.handlers if isinstance(handler, RichHandler)]:
        logger.removeHandler(existing)
    handler = RichHandler(
        console=stderr_console(color=use_color, emoji=False),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger


__all__ = [
    "PACKAGE_LOGGER_NAME",
    "StatusKind",
    "configure_logging",
    "fail",
    "info",
    "ok",
    "status",
    "warn",
]
