# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the built-in max-lines check."""

from __future__ import annotations

from pathlib import Path

from fast_cv.line_check import LINE_CHECK_TOOL, check_file_lines


def _write_lines(path: Path, count: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"x_{index} = {index}\n" for index in range(count)), encoding="utf-8")


def test_long_file_yields_one_refactor_finding(tmp_path: Path) -> None:
    _write_lines(tmp_path / "big.py", 700)
    _write_lines(tmp_path / "small.py", 600)

    result = check_file_lines(["big.py", "small.py"], tmp_path, max_lines=600)

    assert result.tool == LINE_CHECK_TOOL
    assert len(result.findings) == 1
    finding = result.findings[0]
    assert (finding.file, finding.line, finding.tag, finding.rule) == ("big.py", 700, "REFACTOR", "max-lines")
    assert "limit: 600" in finding.message
    assert finding.message == "File has 700 lines (limit: 600). Consider splitting into smaller modules."


def test_omit_patterns_and_unreadable_files_are_skipped(tmp_path: Path) -> None:
    _write_lines(tmp_path / "generated/big.py", 50)

    result = check_file_lines(["generated/big.py", "missing.py"], tmp_path, max_lines=10, omit_patterns=["generated/"])

    assert result.findings == []


def test_zero_limit_disables_the_check(tmp_path: Path) -> None:
    _write_lines(tmp_path / "big.py", 5)

    assert check_file_lines(["big.py"], tmp_path, max_lines=0).findings == []
