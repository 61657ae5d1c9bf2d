# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in check flagging source files that exceed a line budget."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .constants import DEFAULT_MAX_LINES
from .discovery.filters import IgnoreFilter
from .models import Finding, Severity, Tag, ToolResult

LOGGER = logging.getLogger(__name__)

LINE_CHECK_TOOL: Final[str] = "line-check"
MAX_LINES_RULE: Final[str] = "max-lines"


def count_lines(path: Path) -> int | None:
    """Return the number of lines in ``path`` or ``None`` when it cannot be read."""

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.debug("line check skipped %s: %s", path, exc)
        return None
    return len(content.splitlines())


def check_file_lines(
    files: Sequence[str],
    target_dir: Path,
    *,
    max_lines: int = DEFAULT_MAX_LINES,
    omit_patterns: Sequence[str] = (),
) -> ToolResult:
    """Report every file in ``files`` that is longer than ``max_lines``.

    Args:
        files: Scanned paths relative to ``target_dir``.
        target_dir: Directory the paths are relative to.
        max_lines: Line budget; ``0`` or less disables the check.
        omit_patterns: Gitignore-style patterns exempt from the check.

    Returns:
        ToolResult: Result named ``line-check`` with one ``REFACTOR`` finding per oversized file.
    """

    started = time.perf_counter()
    findings: list[Finding] = []
    if max_lines > 0:
        omit = IgnoreFilter(omit_patterns) if omit_patterns else None
        for rel_path in files:
            if omit is not None and omit.ignores(rel_path):
                continue
            line_count = count_lines(target_dir / rel_path)
            if line_count is None or line_count <= max_lines:
                continue
            findings.append(
                Finding(
                    file=rel_path,
                    line=line_count,
                    tag=Tag.REFACTOR,
                    rule=MAX_LINES_RULE,
                    severity=Severity.WARNING,
                    message=(
                        f"File has {line_count} lines (limit: {max_lines}). Consider splitting into smaller modules."
                    ),
                ),
            )
    return ToolResult(
        tool=LINE_CHECK_TOOL,
        findings=findings,
        duration=(time.perf_counter() - started) * 1000.0,
    )


__all__ = ["LINE_CHECK_TOOL", "MAX_LINES_RULE", "check_file_lines", "count_lines"]
