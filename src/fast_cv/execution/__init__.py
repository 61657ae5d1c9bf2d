# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analyzer execution: single invocations and their fan-out."""

from __future__ import annotations

from .executor import ExecutionOptions, effective_fix, run_tool
from .orchestrator import ScheduledTool, run_tools

__all__ = ["ExecutionOptions", "ScheduledTool", "effective_fix", "run_tool", "run_tools"]
