# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the jscpd and typos adapters."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fast_cv.errors import ToolOutputError
from fast_cv.tools.base import ToolOptions
from fast_cv.tools.builtins.misc import JSCPD_REPORT_NAME, JscpdAdapter, TyposAdapter


def test_jscpd_writes_into_scratch_dir_and_scans_whole_tree(tmp_path: Path) -> None:
    scratch = tmp_path / "scratch"
    options = ToolOptions(files=(tmp_path / "only.py",), scratch_dir=scratch)

    command = JscpdAdapter().build_command(tmp_path, None, options)

    assert command.args[command.args.index("--output") + 1] == str(scratch)
    assert command.args[-1] == str(tmp_path)


def test_jscpd_requires_scratch_dir(tmp_path: Path) -> None:
    with pytest.raises(ToolOutputError):
        JscpdAdapter().build_command(tmp_path, None, ToolOptions())


def test_jscpd_reads_pairs_from_report(tmp_path: Path) -> None:
    report = {
        "duplicates": [
            {
                "format": "python",
                "lines": 12,
                "tokens": 80,
                "firstFile": {"name": "/repo/a.py", "startLoc": {"line": 10, "column": 1}},
                "secondFile": {"name": "/repo/b.py", "start": 30},
            },
        ],
    }
    (tmp_path / JSCPD_REPORT_NAME).write_text(json.dumps(report), encoding="utf-8")

    findings = JscpdAdapter().parse_output("", "", 0, options=ToolOptions(scratch_dir=tmp_path))

    assert [(f.file, f.line, f.rule) for f in findings] == [("/repo/a.py", 10, "jscpd/python"), ("/repo/b.py", 30, "jscpd/python")]
    assert findings[0].message.endswith("also in /repo/b.py:30")
    assert findings[1].message.endswith("also in /repo/a.py:10")


def test_jscpd_missing_report(tmp_path: Path) -> None:
    adapter = JscpdAdapter()

    assert adapter.parse_output("", "", 0, options=ToolOptions(scratch_dir=tmp_path)) == []
    with pytest.raises(ToolOutputError):
        adapter.parse_output("", "crash", 2, options=ToolOptions(scratch_dir=tmp_path))


def test_typos_is_opt_in_and_parses_json_lines() -> None:
    stdout = "\n".join(
        [
            json.dumps({"type": "typo", "path": "a.py", "line_num": 3, "typo": "teh", "corrections": ["the"]}),
            json.dumps({"type": "binary_file", "path": "img.png"}),
        ],
    )

    findings = TyposAdapter().parse_output(stdout, "", 2, options=ToolOptions())

    assert TyposAdapter.opt_in
    assert [(f.file, f.line, f.tag) for f in findings] == [("a.py", 3, "TYPO")]
    assert findings[0].message == '"teh" -> the'
