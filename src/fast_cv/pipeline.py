# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end scan: discovery, selection, precheck, execution and reporting."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Final

from .config import Config
from .config_resolver import resolve_config
from .constants import EXIT_CLEAN, EXIT_FINDINGS, EXIT_PRECHECK_FAILED
from .discovery import ScanResult, scan_directory
from .execution import ExecutionOptions, ScheduledTool, run_tools
from .line_check import check_file_lines
from .models import ToolResult
from .normalizer import filter_results
from .precheck import PrecheckResult, precheck
from .reporting import ReportContext, render_report
from .reporting.context import utc_now
from .tools import ToolRegistry, default_registry

LOGGER = logging.getLogger(__name__)

NO_FILES_WARNING: Final[str] = "No scannable files found."
NO_TOOLS_WARNING: Final[str] = "No applicable tools for detected languages."


class ExitStatus(IntEnum):
    """Process exit codes for a scan."""

    CLEAN = EXIT_CLEAN
    FINDINGS = EXIT_FINDINGS
    PRECHECK_FAILED = EXIT_PRECHECK_FAILED


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Everything a caller needs after a scan.

    ``report`` is empty when the run halted at precheck; ``message`` then
    carries the remediation text.
    """

    exit_status: ExitStatus
    report: str = ""
    results: tuple[ToolResult, ...] = ()
    warnings: tuple[str, ...] = ()
    message: str | None = None
    scan: ScanResult | None = field(default=None, compare=False)

    @property
    def finding_count(self) -> int:
        """Return the number of findings across all results."""
        return sum(len(result.findings) for result in self.results)


def decide_exit_status(results: Sequence[ToolResult], *, precheck_ok: bool = True) -> ExitStatus:
    """Return the exit status for the final results.

    Args:
        results: Normalised results.
        precheck_ok: Whether the analyzers the run depends on were available.

    Returns:
        ExitStatus: ``PRECHECK_FAILED``, ``FINDINGS`` or ``CLEAN``.
    """

    if not precheck_ok:
        return ExitStatus.PRECHECK_FAILED
    if any(result.findings for result in results):
        return ExitStatus.FINDINGS
    return ExitStatus.CLEAN


def _collect_warnings(precheck_outcome: PrecheckResult, results: Sequence[ToolResult]) -> list[str]:
    warnings = list(precheck_outcome.warnings)
    for result in results:
        if result.error is not None:
            warnings.append(f"{result.tool}: {result.error}")
        elif result.fix_skipped:
            warnings.append(f"{result.tool}: fix skipped because the configuration is a bundled default")
    return warnings


def run_scan(
    target_dir: Path,
    config: Config,
    *,
    registry: ToolRegistry | None = None,
    user_dir: Path | None = None,
    package_dir: Path | None = None,
    generated_at: datetime | None = None,
) -> PipelineResult:
    """Scan ``target_dir`` and render the report.

    Args:
        target_dir: Directory to scan.
        config: Effective run configuration.
        registry: Adapter catalog; defaults to the built-in catalog.
        user_dir: Override for the per-user defaults directory.
        package_dir: Override for the bundled defaults directory.
        generated_at: Timestamp shown in the report; defaults to now.

    Returns:
        PipelineResult: Report text, results and exit status.

    Raises:
        ScanError: If ``target_dir`` cannot be scanned.
        UnknownToolError: If ``config.tools`` names an unregistered analyzer.
    """

    catalog = registry if registry is not None else default_registry()
    scan = scan_directory(target_dir, exclude=config.exclude, only=config.only)
    root = scan.root

    timestamp = generated_at or utc_now()

    def _report(results: Sequence[ToolResult], warnings: Sequence[str]) -> str:
        context = ReportContext(
            target_dir=root,
            results=results,
            warnings=warnings,
            fix=config.fix,
            generated_at=timestamp,
        )
        return render_report(context, config.output_format)

    if scan.is_empty:
        return PipelineResult(ExitStatus.CLEAN, report=_report([], [NO_FILES_WARNING]), warnings=(NO_FILES_WARNING,))

    selected = catalog.select(scan.extensions, config.tools)
    LOGGER.debug("selected tools: %s", ", ".join(adapter.name for adapter in selected) or "-")
    if not selected:
        return PipelineResult(ExitStatus.CLEAN, report=_report([], [NO_TOOLS_WARNING]), warnings=(NO_TOOLS_WARNING,))

    outcome = precheck(selected, auto_install=config.auto_install)
    if not outcome.ok:
        return PipelineResult(ExitStatus.PRECHECK_FAILED, message=outcome.message, warnings=outcome.warnings)

    scheduled = [
        ScheduledTool(adapter, resolve_config(adapter.name, root, user_dir=user_dir, package_dir=package_dir))
        for adapter in outcome.tools
    ]
    run = ExecutionOptions(
        timeout=config.timeout,
        files=tuple(root / rel_path for rel_path in scan.files) if scan.include_filter is not None else (),
        fix=config.fix,
        licenses=config.licenses,
    )
    LOGGER.debug("running %s", ", ".join(item.adapter.name for item in scheduled))
    raw_results = run_tools(scheduled, root, run, jobs=config.jobs)
    if config.max_lines > 0:
        raw_results.append(
            check_file_lines(scan.files, root, max_lines=config.max_lines, omit_patterns=config.line_check_omit),
        )

    results = filter_results(raw_results, root, scan.ignore_filter, scan.include_filter)
    warnings = _collect_warnings(outcome, results)
    return PipelineResult(
        decide_exit_status(results),
        report=_report(results, warnings),
        results=tuple(results),
        warnings=tuple(warnings),
        scan=scan,
    )


__all__ = [
    "NO_FILES_WARNING",
    "NO_TOOLS_WARNING",
    "ExitStatus",
    "PipelineResult",
    "decide_exit_status",
    "run_scan",
]
