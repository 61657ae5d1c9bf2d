# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the Markdown and SARIF renderers."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path

import pytest

from fast_cv import __version__
from fast_cv.models import Finding, ToolResult
from fast_cv.reporting import ReportContext, build_sarif, format_markdown, render_report

STAMP = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
TARGET = Path("/repo")


def _context(results: list[ToolResult], warnings: list[str] | None = None, *, fix: bool = False) -> ReportContext:
    return ReportContext(target_dir=TARGET, results=results, warnings=warnings or [], fix=fix, generated_at=STAMP)


def _result(tool: str, *findings: Finding, duration: float = 1500.0) -> ToolResult:
    return ToolResult(tool=tool, findings=list(findings), duration=duration)


def test_clean_markdown_report() -> None:
    report = format_markdown(_context([_result("ruff")]))

    assert report.startswith("# fast-cv report\n\n**Target**: `/repo`\n**Date**: 2025-01-02T03:04:05Z\n")
    assert "**Tools**: ruff (1.5s)" in report
    assert "## No issues found" in report
    assert "*0 findings from 1 tool in 1.5s*" in report


def test_markdown_groups_by_file_and_sorts_by_line() -> None:
    results = [
        _result(
            "ruff",
            Finding(file="src/b.py", line=9, col=2, tag="BUG", rule="B006", message="mutable default"),
            Finding(file="src/b.py", line=3, tag="LINTER", rule="F401", message="unused import"),
        ),
        _result("semgrep", Finding(file="src/a.py", line=1, tag="SECURITY", rule="eval", message="eval used")),
        ToolResult(tool="eslint", error="Failed to spawn eslint: not found"),
    ]

    report = format_markdown(_context(results, ["eslint: Failed to spawn eslint: not found"], fix=True))

    assert "## Findings (3 issues)" in report
    assert report.index("### `src/a.py`") < report.index("### `src/b.py`")
    assert report.index("`F401`") < report.index("`B006`")
    assert "- **[BUG]** `B006` mutable default (line 9, col 2)" in report
    assert "- **[LINTER]** `F401` unused import (line 3)" in report
    assert "**Mode**: fix" in report
    assert "## Warnings\n\n- **[WARN]** eslint: Failed to spawn eslint: not found" in report
    tools_line = next(line for line in report.splitlines() if line.startswith("**Tools**"))
    assert "eslint" not in tools_line
    assert "*3 findings from 2 tools in 3.0s*" in report


@pytest.mark.parametrize("count", [1, 4, 11])
def test_markdown_findings_count_matches_input(count: int) -> None:
    findings = [Finding(file=f"f{index % 3}.py", line=index, rule="r", message="m") for index in range(count)]

    report = format_markdown(_context([_result("t", *findings)]))

    match = re.search(r"## Findings \((\d+) issues?\)", report)
    assert match is not None
    assert int(match.group(1)) == count


def test_sarif_deduplicates_rules() -> None:
    shared = [
        Finding(file="a.py", line=0, tag="SECURITY", rule="S101", message="assert"),
        Finding(file="b.py", line=4, col=2, tag="SECURITY", rule="S101", message="assert"),
    ]
    distinct = Finding(file="sub\\c.py", line=2, tag="FORMAT", rule="E501", message="long line")

    sarif = build_sarif(_context([_result("ruff", *shared, distinct)], ["w1"], fix=True))

    run = sarif["runs"][0]
    assert sarif["version"] == "2.1.0"
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == ["S101", "E501"]
    assert run["tool"]["driver"]["rules"][1]["defaultConfiguration"] == {"level": "note"}
    assert run["tool"]["driver"]["version"] == __version__
    assert len(run["results"]) == 3
    assert run["results"][0]["ruleIndex"] == run["results"][1]["ruleIndex"] == 0
    assert run["results"][2]["ruleIndex"] == 1
    first_location = run["results"][0]["locations"][0]["physicalLocation"]
    assert first_location["region"] == {"startLine": 1}
    assert first_location["artifactLocation"]["uriBaseId"] == "%SRCROOT%"
    assert run["results"][1]["locations"][0]["physicalLocation"]["region"] == {"startLine": 4, "startColumn": 2}
    assert run["results"][2]["locations"][0]["physicalLocation"]["artifactLocation"]["uri"] == "sub/c.py"
    assert run["results"][0]["level"] == "error"
    assert run["properties"]["warnings"] == ["w1"]
    assert run["properties"]["fixMode"] is True
    assert run["properties"]["toolBreakdown"] == [{"tool": "ruff", "duration": 1500.0, "findings": 3}]


def test_sarif_omits_failed_tools_and_optional_properties() -> None:
    sarif = build_sarif(_context([ToolResult(tool="ghost", error="boom", duration=3.0)]))

    properties = sarif["runs"][0]["properties"]
    assert properties["toolBreakdown"] == []
    assert properties["totalDuration"] == 3.0
    assert "warnings" not in properties and "fixMode" not in properties


def test_render_report_dispatches_by_format() -> None:
    context = _context([_result("ruff")])

    assert json.loads(render_report(context, "sarif"))["runs"][0]["results"] == []
    assert render_report(context).startswith("# fast-cv report")
    with pytest.raises(ValueError, match="unsupported output format"):
        render_report(context, "html")  # type: ignore[arg-type]
