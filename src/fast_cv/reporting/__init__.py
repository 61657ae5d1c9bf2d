# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report renderers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from ..config import OutputFormat
from .context import ReportContext
from .markdown import format_markdown
from .sarif import build_sarif, format_sarif

_RENDERERS: Final[dict[str, Callable[[ReportContext], str]]] = {
    "markdown": format_markdown,
    "sarif": format_sarif,
}


def render_report(context: ReportContext, output_format: OutputFormat = "markdown") -> str:
    """Render ``context`` in ``output_format``.

    Raises:
        ValueError: If ``output_format`` has no renderer.
    """

    try:
        renderer = _RENDERERS[output_format]
    except KeyError as exc:
        raise ValueError(f"unsupported output format: {output_format}") from exc
    return renderer(context)


__all__ = ["ReportContext", "build_sarif", "format_markdown", "format_sarif", "render_report"]
