# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for single analyzer invocations."""

from __future__ import annotations

from pathlib import Path

import pytest

from fast_cv.execution import ExecutionOptions, ScheduledTool, effective_fix, run_tool, run_tools
from fast_cv.models import ConfigSource, ResolvedConfig

NO_CONFIG = ResolvedConfig()


def test_findings_are_parsed_from_stdout(shell_adapter, tmp_path: Path) -> None:
    adapter = shell_adapter("echoer", "echo 'a.py:3:eval used'; echo 'b.py:1:exec used'; exit 1")

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=10))

    assert result.error is None
    assert [(f.file, f.line, f.message) for f in result.findings] == [("a.py", 3, "eval used"), ("b.py", 1, "exec used")]
    assert result.duration >= 0
    assert not result.fix_skipped


def test_timeout_discards_buffered_output(shell_adapter, tmp_path: Path) -> None:
    adapter = shell_adapter("sleeper", "echo 'a.py:1:partial'; sleep 30")

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=0.5))

    assert result.error is not None
    assert "Timeout" in result.error
    assert result.findings == []
    assert result.duration < 10_000


def test_spawn_failure_is_recorded(shell_adapter, tmp_path: Path) -> None:
    adapter = shell_adapter("ghost", "true", executable="fast-cv-no-such-binary")

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert result.error is not None
    assert result.error.startswith("Failed to spawn fast-cv-no-such-binary")
    assert result.findings == []


def test_parser_error_becomes_result_error(shell_adapter, tmp_path: Path) -> None:
    adapter = shell_adapter("crashy", "exit 5")

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert result.error == "fake tool failed with exit 5"


def test_unexpected_parser_exception_is_contained(shell_adapter, tmp_path: Path) -> None:
    def explode(stdout, stderr, exit_code, options):
        raise KeyError("missing")

    adapter = shell_adapter("buggy", "true", parser=explode)

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert result.error == "'missing'"


@pytest.mark.parametrize(
    "returned",
    [None, ["not a finding"], [{"file": "a.py"}]],
    ids=["none", "strings", "incomplete-dicts"],
)
def test_malformed_parser_return_is_contained(shell_adapter, tmp_path: Path, returned: object) -> None:
    adapter = shell_adapter("sloppy", "true", parser=lambda stdout, stderr, exit_code, options: returned)

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert result.tool == "sloppy"
    assert result.findings == []
    assert result.error is not None
    assert result.error.startswith("invalid parser output:")


def test_malformed_parser_return_does_not_abort_parallel_run(shell_adapter, tmp_path: Path) -> None:
    scheduled = [
        ScheduledTool(shell_adapter("sloppy", "true", parser=lambda *args: None), NO_CONFIG),
        ScheduledTool(shell_adapter("sound", "echo 'a.py:1:kept'; exit 1"), NO_CONFIG),
    ]

    results = run_tools(scheduled, tmp_path, ExecutionOptions(timeout=5), jobs=2)

    assert [result.tool for result in results] == ["sloppy", "sound"]
    assert results[0].error is not None
    assert [f.message for f in results[1].findings] == ["kept"]


def test_fix_skip_only_applies_to_fixing_tools(shell_adapter, tmp_path: Path) -> None:
    resolved = ResolvedConfig(path=tmp_path / "cfg", source=ConfigSource.PACKAGE_DEFAULT)
    checker = shell_adapter("checker", "true", fixes=False)

    result = run_tool(checker, resolved, tmp_path, ExecutionOptions(timeout=5, fix=True))

    assert result.error is None
    assert not result.fix_skipped


@pytest.mark.parametrize(
    ("source", "requested", "expected_fix", "skipped"),
    [
        (ConfigSource.PACKAGE_DEFAULT, True, False, True),
        (ConfigSource.LOCAL, True, True, False),
        (ConfigSource.USER_DEFAULT, True, True, False),
        (ConfigSource.PACKAGE_DEFAULT, False, False, False),
    ],
)
def test_fix_is_gated_on_config_provenance(
    shell_adapter,
    tmp_path: Path,
    source: ConfigSource,
    requested: bool,
    expected_fix: bool,
    skipped: bool,
) -> None:
    resolved = ResolvedConfig(path=tmp_path / "cfg", source=source)
    adapter = shell_adapter("fixer", "true")

    result = run_tool(adapter, resolved, tmp_path, ExecutionOptions(timeout=5, fix=requested))

    assert adapter.seen_options[-1].fix is expected_fix
    assert effective_fix(requested, resolved) is expected_fix
    assert result.fix_skipped is skipped


def test_pre_fix_runs_before_main_command_even_with_package_default(shell_adapter, tmp_path: Path) -> None:
    marker = tmp_path / "formatted"
    adapter = shell_adapter(
        "formatter",
        f"test -f {marker} && echo 'a.py:1:after format'",
        pre_fix=[f"touch {marker}", "fast-cv-no-such-command-either"],
    )
    resolved = ResolvedConfig(path=tmp_path / "cfg", source=ConfigSource.PACKAGE_DEFAULT)

    result = run_tool(adapter, resolved, tmp_path, ExecutionOptions(timeout=10, fix=True))

    assert marker.exists()
    assert [f.message for f in result.findings] == ["after format"]
    assert result.fix_skipped


def test_pre_fix_is_skipped_without_fix(shell_adapter, tmp_path: Path) -> None:
    marker = tmp_path / "formatted"
    adapter = shell_adapter("formatter", "true", pre_fix=[f"touch {marker}"])

    run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert not marker.exists()


def test_scratch_dir_is_scoped_to_the_invocation(shell_adapter, tmp_path: Path) -> None:
    seen: list[Path] = []

    def read_report(stdout, stderr, exit_code, options):
        seen.append(options.scratch_dir)
        assert (options.scratch_dir / "report.txt").read_text(encoding="utf-8").strip() == "done"
        return []

    adapter = shell_adapter("crossfile", "echo done > {scratch}/report.txt", parser=read_report, scratch=True)

    first = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))
    second = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert first.error is None and second.error is None
    assert len(seen) == 2 and seen[0] != seen[1]
    assert not any(path.exists() for path in seen)


def test_scratch_dir_is_removed_when_the_parser_fails(shell_adapter, tmp_path: Path) -> None:
    seen: list[Path] = []

    def fail(stdout, stderr, exit_code, options):
        seen.append(options.scratch_dir)
        raise ValueError("bad report")

    adapter = shell_adapter("crossfile", "true", parser=fail, scratch=True)

    result = run_tool(adapter, NO_CONFIG, tmp_path, ExecutionOptions(timeout=5))

    assert result.error == "bad report"
    assert seen and not seen[0].exists()
