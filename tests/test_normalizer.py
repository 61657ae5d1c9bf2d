# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for path normalisation and post-filtering."""

from __future__ import annotations

from pathlib import Path

from fast_cv.discovery import IgnoreFilter, IncludeFilter
from fast_cv.models import Finding, ToolResult
from fast_cv.normalizer import filter_results, relativize


def _finding(file: str) -> Finding:
    return Finding(file=file, line=1, rule="r", message="m")


def test_relativize(tmp_path: Path) -> None:
    assert relativize(str(tmp_path / "src" / "a.py"), tmp_path) == "src/a.py"
    assert relativize("src/a.py", tmp_path) == "src/a.py"
    assert relativize("src\\win.py", tmp_path) == "src/win.py"
    assert relativize(str(tmp_path.parent / "other.py"), tmp_path) == "../other.py"


def test_filter_drops_ignored_and_excluded_findings(tmp_path: Path) -> None:
    result = ToolResult(
        tool="t",
        findings=[
            _finding(str(tmp_path / "src" / "a.py")),
            _finding("node_modules/x/index.js"),
            _finding("src/b.py"),
            _finding(str(tmp_path / "docs" / "c.py")),
        ],
    )

    (filtered,) = filter_results(
        [result],
        tmp_path,
        IgnoreFilter.for_directory(tmp_path),
        IncludeFilter(["src/*.py"]),
    )

    assert [finding.file for finding in filtered.findings] == ["src/a.py", "src/b.py"]
    assert filtered.tool == "t"


def test_error_results_pass_through_unchanged(tmp_path: Path) -> None:
    failed = ToolResult(tool="t", error="Timeout after 1s", duration=5.0)
    empty = ToolResult(tool="u")

    assert filter_results([failed, empty], tmp_path, IgnoreFilter([])) == [failed, empty]
