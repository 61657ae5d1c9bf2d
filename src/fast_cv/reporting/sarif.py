# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render scan results as a SARIF 2.1.0 document."""

from __future__ import annotations

import json
from typing import Any, Final

from .. import __version__
from ..constants import PROJECT_NAME
from ..models import Finding
from ..severity import tag_to_sarif
from .context import ReportContext

SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://json.schemastore.org/sarif-2.1.0.json"
SRCROOT: Final[str] = "%SRCROOT%"


def _region(finding: Finding) -> dict[str, int]:
    # SARIF lines are 1-based; line 0 means the finding is file-level
    region = {"startLine": finding.line or 1}
    if finding.col is not None:
        region["startColumn"] = finding.col
    return region


def _result(tool: str, finding: Finding, rule_index: int) -> dict[str, Any]:
    return {
        "ruleId": finding.rule,
        "ruleIndex": rule_index,
        "level": tag_to_sarif(finding.tag),
        "message": {"text": finding.message},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {"uri": finding.file.replace("\\", "/"), "uriBaseId": SRCROOT},
                    "region": _region(finding),
                },
            },
        ],
        "properties": {"sourceTool": tool, "tag": finding.tag},
    }


def build_sarif(context: ReportContext) -> dict[str, Any]:
    """Return the SARIF document for ``context`` as a JSON-compatible mapping.

    The single run's ``rules`` are deduplicated by rule id in first-seen order
    and every result references its rule through ``ruleIndex``.
    """

    rules: list[dict[str, Any]] = []
    rule_index: dict[str, int] = {}
    results: list[dict[str, Any]] = []
    for tool, finding in context.iter_findings():
        index = rule_index.get(finding.rule)
        if index is None:
            index = rule_index[finding.rule] = len(rules)
            rules.append(
                {
                    "id": finding.rule,
                    "shortDescription": {"text": finding.rule},
                    "defaultConfiguration": {"level": tag_to_sarif(finding.tag)},
                },
            )
        results.append(_result(tool, finding, index))

    properties: dict[str, Any] = {
        "targetDir": str(context.target_dir),
        "totalDuration": context.total_duration,
        "toolBreakdown": [
            {"tool": result.tool, "duration": result.duration, "findings": len(result.findings)}
            for result in context.successful
        ],
    }
    if context.warnings:
        properties["warnings"] = list(context.warnings)
    if context.fix:
        properties["fixMode"] = True

    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {"driver": {"name": PROJECT_NAME, "version": __version__, "rules": rules}},
                "columnKind": "utf16CodeUnits",
                "results": results,
                "properties": properties,
            },
        ],
    }


def format_sarif(context: ReportContext) -> str:
    """Render ``context`` as indented SARIF JSON ending with a newline."""

    return json.dumps(build_sarif(context), indent=2) + "\n"


__all__ = ["SARIF_SCHEMA", "SARIF_VERSION", "build_sarif", "format_sarif"]
