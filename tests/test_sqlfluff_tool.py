# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the sqlfluff adapter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fast_cv.errors import ToolOutputError
from fast_cv.models import Severity, Tag
from fast_cv.tools.base import ToolOptions
from fast_cv.tools.builtins.sql import SqlfluffAdapter, classify_sqlfluff_code


def test_lint_and_fix_commands(tmp_path: Path) -> None:
    lint = SqlfluffAdapter().build_command(tmp_path, None, ToolOptions())
    fix = SqlfluffAdapter().build_command(tmp_path, None, ToolOptions(fix=True, files=(tmp_path / "q.sql",)))

    assert lint.args == ("lint", "--format", "json", "--disable-progress-bar", "--processes", "1", str(tmp_path))
    assert fix.args[0] == "fix"
    assert fix.args[-2:] == ("--force", str(tmp_path / "q.sql"))


@pytest.mark.parametrize(
    ("code", "tag"),
    [("PRS", Tag.BUG), ("LT01", Tag.FORMAT), ("CP02", Tag.FORMAT), ("AM04", Tag.LINTER), (None, Tag.LINTER)],
)
def test_classify_sqlfluff_code(code: str | None, tag: Tag) -> None:
    assert classify_sqlfluff_code(code) is tag


def test_parse_accepts_both_position_schemas() -> None:
    payload = [
        {
            "filepath": "models/orders.sql",
            "violations": [
                {"code": "LT01", "start_line_no": 4, "start_line_pos": 10, "description": "Expected single space."},
                {"code": "PRS", "line_no": 9, "line_pos": 1, "description": "Line 9: found unparsable section"},
            ],
        },
        {"filepath": "models/clean.sql", "violations": []},
    ]

    findings = SqlfluffAdapter().parse_output(json.dumps(payload), "", 1, options=ToolOptions())

    assert [(f.file, f.line, f.col, f.tag, f.severity) for f in findings] == [
        ("models/orders.sql", 4, 10, "FORMAT", Severity.WARNING),
        ("models/orders.sql", 9, 1, "BUG", Severity.ERROR),
    ]


def test_fatal_exit_without_output_raises() -> None:
    with pytest.raises(ToolOutputError, match="sqlfluff error \\(exit 3\\)"):
        SqlfluffAdapter().parse_output("", "bad dialect", 3, options=ToolOptions())

    assert SqlfluffAdapter().parse_output("", "", 0, options=ToolOptions()) == []
