# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Availability checks for selected analyzers, with optional self-installation."""

from __future__ import annotations

import logging
import re
import shlex
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Final

from .constants import INSTALL_TIMEOUT_SECONDS
from .errors import SubprocessExecutionError
from .process_utils import run_command
from .tools.base import ToolAdapter

LOGGER = logging.getLogger(__name__)

_ALTERNATIVE_HINT: Final[re.Pattern[str]] = re.compile(r"\s*\(or:.*\)\s*$")


@dataclass(frozen=True, slots=True)
class PrecheckResult:
    """Outcome of the availability phase.

    Attributes:
        ok: ``False`` only when analyzers are missing and auto-install was not requested.
        tools: Adapters confirmed available, in the order they were supplied.
        missing: Adapters that remain unavailable.
        warnings: One line per auto-install attempt.
        message: Remediation text when ``ok`` is ``False``.
    """

    ok: bool
    tools: tuple[ToolAdapter, ...]
    missing: tuple[ToolAdapter, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)
    message: str | None = None


def probe(adapter: ToolAdapter) -> bool:
    """Return whether ``adapter`` is usable, treating any probe failure as unavailable."""

    try:
        return adapter.check_installed()
    except Exception as exc:  # any probe failure means unavailable
        LOGGER.debug("%s probe failed: %s", adapter.name, exc)
        return False


def _probe_all(adapters: Sequence[ToolAdapter]) -> list[bool]:
    if not adapters:
        return []
    with ThreadPoolExecutor(max_workers=len(adapters)) as executor:
        return list(executor.map(probe, adapters))


def install_argv(hint: str) -> list[str]:
    """Translate an install hint into an argument vector.

    Alternatives such as ``"(or: brew install x)"`` are dropped; pipelines run through ``bash -c``.
    """

    command = _ALTERNATIVE_HINT.sub("", hint).strip()
    if "|" in command:
        return ["bash", "-c", command]
    return shlex.split(command)


def try_auto_install(adapter: ToolAdapter) -> bool:
    """Run ``adapter``'s install hint and re-probe it.

    Returns:
        bool: ``True`` when the analyzer is available after installation.
    """

    try:
        argv = install_argv(adapter.install_hint)
    except ValueError as exc:
        LOGGER.debug("cannot parse install hint for %s: %s", adapter.name, exc)
        return False
    if not argv:
        return False
    LOGGER.info("installing %s: %s", adapter.name, " ".join(argv))
    try:
        run_command(argv, check=True, capture_output=True, timeout=INSTALL_TIMEOUT_SECONDS, discard_stdin=True)
    except (OSError, SubprocessExecutionError) as exc:
        LOGGER.debug("auto-install of %s failed: %s", adapter.name, exc)
        return False
    return probe(adapter)


def format_missing_message(missing: Sequence[ToolAdapter]) -> str:
    """Return the remediation text listing each missing analyzer and how to install it."""

    lines = ["[PRECHECK FAILED] Missing tools for detected languages:", ""]
    for adapter in missing:
        lines.append(f"  {adapter.name} (needed for {', '.join(sorted(adapter.extensions))} files)")
        lines.append(f"    Install: {adapter.install_hint}")
        lines.append("")
    lines.append("Run with --auto-install to install missing tools automatically.")
    return "\n".join(lines)


def precheck(adapters: Sequence[ToolAdapter], *, auto_install: bool = False) -> PrecheckResult:
    """Determine which of ``adapters`` can run.

    Probes run concurrently. Installation attempts, when requested, run one at a
    time and never fail the phase: every attempt becomes a warning and the run
    continues with whatever is ready.

    Args:
        adapters: Selected adapters in catalog order.
        auto_install: Whether to try each missing analyzer's install hint.

    Returns:
        PrecheckResult: Ready adapters plus remediation details.
    """

    statuses = _probe_all(adapters)
    ready = [adapter for adapter, available in zip(adapters, statuses, strict=True) if available]
    missing = [adapter for adapter, available in zip(adapters, statuses, strict=True) if not available]
    LOGGER.debug("precheck: ready=%s missing=%s", [a.name for a in ready], [a.name for a in missing])

    if not missing:
        return PrecheckResult(ok=True, tools=tuple(ready))

    if not auto_install:
        return PrecheckResult(
            ok=False,
            tools=tuple(ready),
            missing=tuple(missing),
            message=format_missing_message(missing),
        )

    warnings: list[str] = []
    still_missing: list[ToolAdapter] = []
    for adapter in missing:
        if try_auto_install(adapter):
            ready.append(adapter)
            warnings.append(f"{adapter.name}: auto-installed successfully")
        else:
            still_missing.append(adapter)
            warnings.append(f"{adapter.name}: auto-install failed, install manually: {adapter.install_hint}")
    order = {adapter.name: index for index, adapter in enumerate(adapters)}
    ready.sort(key=lambda adapter: order[adapter.name])
    return PrecheckResult(ok=True, tools=tuple(ready), missing=tuple(still_missing), warnings=tuple(warnings))


__all__ = ["PrecheckResult", "format_missing_message", "install_argv", "precheck", "probe", "try_auto_install"]
