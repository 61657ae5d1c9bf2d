# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rewrite finding paths relative to the target and drop filtered findings."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path, PurePath

from .discovery.filters import IgnoreFilter, IncludeFilter
from .models import Finding, ToolResult


def relativize(file: str, target_dir: Path) -> str:
    """Return ``file`` relative to ``target_dir`` using forward slashes.

    Relative paths pass through unchanged apart from separator normalisation.
    Absolute paths outside ``target_dir`` come back with a leading ``../``.
    """

    if not os.path.isabs(file):
        return file.replace("\\", "/")
    return PurePath(os.path.relpath(file, target_dir)).as_posix()


def _keep(rel_path: str, ignore_filter: IgnoreFilter, include_filter: IncludeFilter | None) -> bool:
    if ignore_filter.ignores(rel_path):
        return False
    return include_filter is None or include_filter.includes(rel_path)


def filter_results(
    results: Sequence[ToolResult],
    target_dir: Path,
    ignore_filter: IgnoreFilter,
    include_filter: IncludeFilter | None = None,
) -> list[ToolResult]:
    """Return copies of ``results`` with relative paths and filtered findings.

    Results that carry an error or no findings are returned as-is. Order is
    preserved at both the result and the finding level.

    Args:
        results: Raw analyzer results.
        target_dir: Absolute directory that was scanned.
        ignore_filter: Filter built by the scanner; matching findings are dropped.
        include_filter: Optional allow-list; findings outside it are dropped.

    Returns:
        list[ToolResult]: Normalised results.
    """

    normalised: list[ToolResult] = []
    for result in results:
        if result.error is not None or not result.findings:
            normalised.append(result)
            continue
        kept: list[Finding] = []
        for finding in result.findings:
            rel_path = relativize(finding.file, target_dir)
            if _keep(rel_path, ignore_filter, include_filter):
                kept.append(finding if rel_path == finding.file else finding.model_copy(update={"file": rel_path}))
        normalised.append(result.model_copy(update={"findings": kept}))
    return normalised


__all__ = ["filter_results", "relativize"]
