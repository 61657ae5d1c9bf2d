# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ESLint adapter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fast_cv.errors import ToolOutputError
from fast_cv.models import Severity, Tag
from fast_cv.tools.base import ToolOptions
from fast_cv.tools.builtins.javascript import EslintAdapter, classify_eslint_rule


@pytest.mark.parametrize(
    ("rule", "tag"),
    [
        ("no-eval", Tag.SECURITY),
        ("security/detect-object-injection", Tag.SECURITY),
        ("sonarjs/no-identical-expressions", Tag.BUG),
        ("sonarjs/cognitive-complexity", Tag.REFACTOR),
        ("complexity", Tag.REFACTOR),
        ("no-unused-vars", Tag.BUG),
        ("semi", Tag.LINTER),
        (None, Tag.LINTER),
    ],
)
def test_classify_eslint_rule(rule: str | None, tag: Tag) -> None:
    assert classify_eslint_rule(rule) is tag


def test_command_passes_fix_config_and_files(tmp_path: Path) -> None:
    files = (tmp_path / "a.js",)
    command = EslintAdapter().build_command(tmp_path, tmp_path / "eslint.config.mjs", ToolOptions(files=files, fix=True))

    assert command.args == ("--format", "json", "--fix", "--config", str(tmp_path / "eslint.config.mjs"), str(files[0]))
    assert command.working_dir == tmp_path


def test_parse_skips_unconfigured_file_notice() -> None:
    payload = [
        {
            "filePath": "/repo/a.js",
            "messages": [
                {"ruleId": "no-eval", "severity": 2, "message": "eval can be harmful.", "line": 2, "column": 1},
                {"ruleId": None, "severity": 1, "message": "File ignored because no matching configuration was supplied."},
            ],
        },
        {"filePath": "/repo/b.js", "messages": []},
        {"filePath": "/repo/c.js", "messages": [{"ruleId": None, "severity": 2, "message": "Parsing error"}]},
    ]

    findings = EslintAdapter().parse_output(json.dumps(payload), "", 1, options=ToolOptions())

    assert [(f.file, f.rule, f.severity) for f in findings] == [
        ("/repo/a.js", "no-eval", Severity.ERROR),
        ("/repo/c.js", "parse-error", Severity.ERROR),
    ]


def test_fatal_exit_without_output_raises() -> None:
    with pytest.raises(ToolOutputError, match="eslint error"):
        EslintAdapter().parse_output("", "Oops! Something went wrong", 2, options=ToolOptions())
