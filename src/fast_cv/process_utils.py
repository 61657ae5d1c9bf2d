# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Subprocess helpers for analyzer probes, installers and analyzer runs."""

from __future__ import annotations

import logging
import os
import shutil
import signal

# Bandit: every call passes an argument vector; ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .constants import KILL_GRACE_SECONDS
from .errors import SubprocessExecutionError, ToolTimeoutError

LOGGER = logging.getLogger(__name__)

_POSIX: Final[bool] = os.name == "posix"
TIMEOUT_RETURNCODE: Final[int] = 124
# Analyzers must never colourise machine-readable output.
_TOOL_ENV: Final[dict[str, str]] = {"NO_COLOR": "1"}


def _resolve_argv(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable replaced by its absolute path.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable is not on ``PATH``.
    """

    if not args:
        raise ValueError("cannot run an empty command")
    executable, *rest = args
    if Path(executable).is_absolute():
        return [executable, *rest]
    located = shutil.which(executable)
    if located is None:
        raise FileNotFoundError(f"Executable '{executable}' was not found on PATH")
    return [located, *rest]


def _child_env(overrides: Mapping[str, str] | None) -> dict[str, str]:
    env = {**os.environ, **_TOOL_ENV}
    if overrides:
        env.update({str(key): str(value) for key, value in overrides.items()})
    return env


def _as_text(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode(errors="replace")
    return stream


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    timeout: float | None = None,
    discard_stdin: bool = False,
) -> CompletedProcess[str]:
    """Run a short-lived helper such as ``<tool> --version`` or an installer.

    A timeout does not raise: it is reported as exit status ``124`` with a
    note appended to stderr, which ``check`` then treats like any failure.

    Raises:
        FileNotFoundError: If the executable is not on ``PATH``.
        SubprocessExecutionError: If ``check`` is set and the command failed.
    """

    argv = _resolve_argv(args)
    try:
        # Bandit: argument vector only, no shell expansion.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            argv,
            cwd=cwd,
            env=_child_env(env),
            check=False,
            capture_output=capture_output,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL if discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        LOGGER.debug("%s timed out after %ss", argv[0], timeout)
        stderr = _as_text(exc.stderr)
        note = f"Command timed out after {timeout}s"
        completed = CompletedProcess(
            argv,
            TIMEOUT_RETURNCODE,
            _as_text(exc.stdout),
            f"{stderr}\n{note}" if stderr else note,
        )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(argv, completed.returncode, completed.stdout or "", completed.stderr or "")
    return completed


def run_process_group(
    args: Sequence[str],
    *,
    timeout: float,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    grace: float = KILL_GRACE_SECONDS,
) -> CompletedProcess[str]:
    """Run an analyzer in its own process group under a hard timeout.

    The child is started as a session leader so that worker processes it forks
    share its process group. When ``timeout`` expires the whole group receives
    ``SIGTERM``; if it is still alive after ``grace`` seconds it receives
    ``SIGKILL``. Output captured before the timeout is discarded.

    Args:
        args: Command arguments where the first item is the executable.
        timeout: Seconds to wait for the process to exit.
        cwd: Optional working directory for the child.
        env: Optional environment overrides merged over ``os.environ``.
        grace: Seconds between the graceful and the forceful signal.

    Returns:
        CompletedProcess[str]: Exit status plus captured stdout and stderr.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        OSError: If the process cannot be spawned.
        ToolTimeoutError: If the process did not exit within ``timeout``.
    """

    argv = _resolve_argv(args)
    # Bandit: argument vector only, no shell expansion.
    process = subprocess.Popen(  # nosec B603
        argv,
        cwd=cwd,
        env=_child_env(env),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        start_new_session=_POSIX,
    )
    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        LOGGER.debug("%s exceeded %.1fs; terminating process group %s", argv[0], timeout, process.pid)
        _terminate_group(process, grace)
        raise ToolTimeoutError(timeout) from None
    return CompletedProcess(argv, process.returncode, stdout, stderr)


def _terminate_group(process: subprocess.Popen[str], grace: float) -> None:
    """Send ``SIGTERM`` to the process group and escalate to ``SIGKILL`` after ``grace``."""

    _signal_group(process, signal.SIGTERM)
    try:
        process.communicate(timeout=grace)
        return
    except subprocess.TimeoutExpired:
        LOGGER.debug("process group %s ignored SIGTERM; sending SIGKILL", process.pid)

    _signal_group(process, getattr(signal, "SIGKILL", signal.SIGTERM))
    try:
        process.communicate(timeout=grace)
    except subprocess.TimeoutExpired:
        # A detached descendant still holds the pipes open.
        LOGGER.warning("process %s did not release its output pipes after SIGKILL", process.pid)
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()
        process.wait()


def _signal_group(process: subprocess.Popen[str], sig: int) -> None:
    if not _POSIX:
        if sig == signal.SIGTERM:
            process.terminate()
        else:
            process.kill()
        return
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        LOGGER.debug("process group %s already exited", process.pid)
    except PermissionError:
        process.send_signal(sig)


__all__ = ["TIMEOUT_RETURNCODE", "run_command", "run_process_group"]
