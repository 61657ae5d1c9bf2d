# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for subprocess helpers."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from fast_cv.errors import FastCVError, SubprocessExecutionError, ToolTimeoutError
from fast_cv.process_utils import run_command, run_process_group


def test_run_command_raises_on_failure_when_checked() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command(["sh", "-c", "echo boom >&2; exit 3"], capture_output=True)

    assert isinstance(excinfo.value, FastCVError)
    assert excinfo.value.returncode == 3
    assert "boom" in excinfo.value.stderr
    assert str(excinfo.value) == "sh exited with status 3: boom"


@pytest.mark.parametrize(("timeout", "expected"), [(0.4, "Timeout after 0.4s"), (120, "Timeout after 120s")])
def test_timeout_message_keeps_fractional_seconds(timeout: float, expected: str) -> None:
    assert str(ToolTimeoutError(timeout)) == expected


def test_run_command_reports_timeout_as_status() -> None:
    completed = run_command(["sh", "-c", "sleep 5"], check=False, capture_output=True, timeout=0.2)

    assert completed.returncode == 124
    assert "timed out" in completed.stderr


def test_missing_executable_is_reported() -> None:
    with pytest.raises(FileNotFoundError):
        run_process_group(["definitely-not-a-real-binary-xyz"], timeout=1)


def test_process_group_captures_output_and_disables_colour() -> None:
    completed = run_process_group(["sh", "-c", "echo out; echo err >&2; echo $NO_COLOR; exit 1"], timeout=5)

    assert completed.returncode == 1
    assert completed.stdout.split() == ["out", "1"]
    assert completed.stderr.strip() == "err"


def test_process_group_timeout_kills_children() -> None:
    started = time.monotonic()

    with pytest.raises(ToolTimeoutError, match="Timeout after 1s"):
        run_process_group(["sh", "-c", "sleep 30 & sleep 30; wait"], timeout=1, grace=0.5)

    assert time.monotonic() - started < 10


def _process_gone(pid: int) -> bool:
    try:
        stat = Path(f"/proc/{pid}/stat").read_text(encoding="utf-8")
    except FileNotFoundError:
        return True
    # An unreaped zombie has already been killed.
    return stat.rsplit(")", 1)[1].split()[0] == "Z"


@pytest.mark.skipif(not Path("/proc/self/stat").exists(), reason="needs procfs")
def test_process_group_escalates_to_sigkill_when_sigterm_is_ignored(tmp_path: Path) -> None:
    pid_file = tmp_path / "child.pid"
    script = f"trap '' TERM; sleep 30 & echo $! > {pid_file}; sleep 30; wait"
    started = time.monotonic()

    with pytest.raises(ToolTimeoutError):
        run_process_group(["sh", "-c", script], timeout=1, grace=0.5)

    assert time.monotonic() - started < 5
    child = int(pid_file.read_text(encoding="utf-8").strip())
    deadline = time.monotonic() + 2
    while not _process_gone(child) and time.monotonic() < deadline:
        time.sleep(0.05)
    assert _process_gone(child)
