# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render scan results as a Markdown report."""

from __future__ import annotations

from collections import defaultdict

from ..constants import PROJECT_NAME
from ..models import Finding
from .context import ReportContext


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _seconds(duration_ms: float) -> str:
    return f"{duration_ms / 1000:.1f}s"


def format_finding(finding: Finding) -> str:
    """Return the bullet line for ``finding``."""

    location = f"line {finding.line}" if finding.col is None else f"line {finding.line}, col {finding.col}"
    return f"- **[{finding.tag}]** `{finding.rule}` {finding.message} ({location})"


def _header(context: ReportContext) -> list[str]:
    lines = [
        f"# {PROJECT_NAME} report",
        "",
        f"**Target**: `{context.target_dir}`",
        f"**Date**: {context.generated_at.strftime('%Y-%m-%dT%H:%M:%SZ')}",
    ]
    timings = [f"{result.tool} ({_seconds(result.duration)})" for result in context.successful]
    if timings:
        lines.append(f"**Tools**: {', '.join(timings)}")
    if context.fix:
        lines.append("**Mode**: fix")
    lines.extend(["", "---", ""])
    return lines


def _findings_section(findings: list[Finding]) -> list[str]:
    lines = [f"## Findings ({_plural(len(findings), 'issue')})", ""]
    by_file: defaultdict[str, list[Finding]] = defaultdict(list)
    for finding in findings:
        by_file[finding.file].append(finding)
    for file in sorted(by_file):
        lines.extend([f"### `{file}`", ""])
        # stable sort keeps analyzer order for findings on the same line
        lines.extend(format_finding(finding) for finding in sorted(by_file[file], key=lambda item: item.line))
        lines.append("")
    return lines


def _warnings_section(warnings: list[str]) -> list[str]:
    lines = ["---", "", "## Warnings", ""]
    lines.extend(f"- **[WARN]** {warning}" for warning in warnings)
    lines.append("")
    return lines


def format_markdown(context: ReportContext) -> str:
    """Render ``context`` as Markdown.

    Layout: a header with target, timestamp, per-tool timings and fix mode; a
    "No issues found" section when there is nothing to report, otherwise the
    findings grouped by file followed by warnings; a footer with totals.

    Args:
        context: Normalised results and run metadata.

    Returns:
        str: UTF-8 Markdown document ending with a newline.
    """

    findings = [finding for _, finding in context.iter_findings()]
    warnings = list(context.warnings)
    lines = _header(context)

    if not findings and not warnings:
        lines.extend(["## No issues found", "", "All checks passed.", ""])
    else:
        if findings:
            lines.extend(_findings_section(findings))
        if warnings:
            lines.extend(_warnings_section(warnings))

    tool_count = len(context.successful)
    lines.extend(
        [
            "---",
            "",
            f"*{_plural(len(findings), 'finding')} from {_plural(tool_count, 'tool')} in "
            f"{_seconds(context.total_duration)}*",
            "",
        ],
    )
    return "\n".join(lines)


__all__ = ["format_finding", "format_markdown"]
