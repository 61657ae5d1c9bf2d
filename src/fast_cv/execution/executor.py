# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run a single analyzer invocation and capture its outcome as a ``ToolResult``."""

from __future__ import annotations

import logging
import subprocess  # nosec B404
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from ..constants import DEFAULT_TIMEOUT_SECONDS
from ..errors import ToolTimeoutError
from ..models import ConfigSource, Finding, ResolvedConfig, ToolResult
from ..process_utils import run_process_group
from ..tools.base import Command, ToolAdapter, ToolOptions

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    """Run-wide options shared by every analyzer invocation."""

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    files: tuple[Path, ...] = field(default_factory=tuple)
    fix: bool = False
    licenses: bool = False


class _InvocationFailed(Exception):
    """Carries the error text recorded on a failed ``ToolResult``."""


def effective_fix(requested: bool, resolved: ResolvedConfig) -> bool:
    """Return whether semantic fixes may run under ``resolved``.

    Bundled package defaults never authorise rewriting the user's code.
    """

    return requested and resolved.source is not ConfigSource.PACKAGE_DEFAULT


@contextmanager
def _scratch_dir(adapter: ToolAdapter) -> Iterator[Path | None]:
    if not adapter.uses_scratch_dir:
        yield None
        return
    with tempfile.TemporaryDirectory(prefix=f"fast-cv-{adapter.name}-") as name:
        yield Path(name)


def _spawn(command: Command, *, timeout: float) -> subprocess.CompletedProcess[str]:
    try:
        return run_process_group(command.argv, timeout=timeout, cwd=command.working_dir)
    except ToolTimeoutError as exc:
        raise _InvocationFailed(str(exc)) from exc
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        raise _InvocationFailed(f"Failed to spawn {command.executable}: {exc}") from exc


def _run_pre_fix(
    adapter: ToolAdapter,
    config_path: Path | None,
    target_dir: Path,
    options: ToolOptions,
    *,
    timeout: float,
) -> None:
    for command in adapter.pre_fix_commands(target_dir, config_path, options):
        LOGGER.debug("%s pre-fix: %s", adapter.name, " ".join(command.argv))
        try:
            _spawn(command, timeout=timeout)
        except _InvocationFailed as exc:
            if isinstance(exc.__cause__, ToolTimeoutError):
                raise
            LOGGER.warning("%s pre-fix step skipped: %s", adapter.name, exc)


def _invoke(
    adapter: ToolAdapter,
    resolved: ResolvedConfig,
    target_dir: Path,
    run: ExecutionOptions,
) -> list[Finding]:
    with _scratch_dir(adapter) as scratch:
        options = ToolOptions(
            files=run.files,
            fix=effective_fix(run.fix, resolved),
            licenses=run.licenses,
            scratch_dir=scratch,
        )
        if run.fix:
            _run_pre_fix(adapter, resolved.path, target_dir, options, timeout=run.timeout)
        command = adapter.build_command(target_dir, resolved.path, options)
        LOGGER.debug("%s: %s", adapter.name, " ".join(command.argv))
        completed = _spawn(command, timeout=run.timeout)
        return adapter.parse_output(
            completed.stdout or "",
            completed.stderr or "",
            completed.returncode,
            options=options,
        )


def run_tool(
    adapter: ToolAdapter,
    resolved: ResolvedConfig,
    target_dir: Path,
    run: ExecutionOptions,
) -> ToolResult:
    """Execute ``adapter`` once and return its result.

    Never raises: a timeout, a spawn failure or a parser error becomes the
    result's ``error`` with no findings. Any scratch directory the adapter asked
    for is removed before this returns.

    Args:
        adapter: Ready adapter to execute.
        resolved: Configuration chosen for the adapter.
        target_dir: Directory being scanned.
        run: Timeout, file subset, fix and licenses flags.

    Returns:
        ToolResult: Findings or an error, the duration in milliseconds and the fix-skip flag.
    """

    fix_skipped = run.fix and adapter.supports_fix and resolved.source is ConfigSource.PACKAGE_DEFAULT
    LOGGER.debug("running %s (config: %s)", adapter.name, resolved.source.value)
    started = time.perf_counter()
    findings: object = []
    error: str | None = None
    try:
        findings = _invoke(adapter, resolved, target_dir, run)
    except _InvocationFailed as exc:
        error = str(exc)
    except Exception as exc:  # adapter faults stay confined to this result
        error = str(exc) or type(exc).__name__
    duration = (time.perf_counter() - started) * 1000.0

    if error is None:
        try:
            result = ToolResult(tool=adapter.name, findings=findings, duration=duration, fix_skipped=fix_skipped)
        except ValidationError as exc:
            error = f"invalid parser output: {exc.errors()[0]['msg']}"
        else:
            LOGGER.debug("%s finished in %.0fms with %d finding(s)", adapter.name, duration, len(result.findings))
            return result

    LOGGER.debug("%s failed after %.0fms: %s", adapter.name, duration, error)
    return ToolResult(tool=adapter.name, error=error, duration=duration, fix_skipped=fix_skipped)


__all__ = ["ExecutionOptions", "effective_fix", "run_tool"]
