# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fan analyzer invocations out sequentially or over a thread pool."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from ..models import ResolvedConfig, ToolResult
from ..tools.base import ToolAdapter
from .executor import ExecutionOptions, run_tool

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScheduledTool:
    """Ready adapter paired with the configuration resolved for it."""

    adapter: ToolAdapter
    config: ResolvedConfig


def run_tools(
    scheduled: Sequence[ScheduledTool],
    target_dir: Path,
    run: ExecutionOptions,
    *,
    jobs: int = 1,
) -> list[ToolResult]:
    """Execute every scheduled adapter and return results in scheduled order.

    With ``jobs == 1`` adapters run one at a time; otherwise up to ``jobs`` run
    concurrently. Invocations share no state, so one adapter's failure never
    affects another's result.

    Args:
        scheduled: Adapters in catalog order with their resolved configuration.
        target_dir: Directory being scanned.
        run: Options applied to every invocation.
        jobs: Maximum number of concurrent invocations.

    Returns:
        list[ToolResult]: One result per scheduled adapter.
    """

    if jobs <= 1 or len(scheduled) <= 1:
        return _execute_serial(scheduled, target_dir, run)
    return _execute_in_parallel(scheduled, target_dir, run, jobs=jobs)


def _execute_serial(
    scheduled: Sequence[ScheduledTool],
    target_dir: Path,
    run: ExecutionOptions,
) -> list[ToolResult]:
    return [run_tool(item.adapter, item.config, target_dir, run) for item in scheduled]


def _execute_in_parallel(
    scheduled: Sequence[ScheduledTool],
    target_dir: Path,
    run: ExecutionOptions,
    *,
    jobs: int,
) -> list[ToolResult]:
    runner = partial(run_tool, target_dir=target_dir, run=run)
    results: list[ToolResult | None] = [None] * len(scheduled)
    LOGGER.debug("running %d tools with %d workers", len(scheduled), jobs)
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        future_map = {
            executor.submit(runner, item.adapter, item.config): index for index, item in enumerate(scheduled)
        }
        for future in as_completed(future_map):
            results[future_map[future]] = future.result()
    return [result for result in results if result is not None]


__all__ = ["ScheduledTool", "run_tools"]
