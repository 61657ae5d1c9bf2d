# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Input shared by the report renderers."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ..models import Finding, ToolResult


def utc_now() -> datetime:
    """Return the current UTC time truncated to whole seconds."""
    return datetime.now(UTC).replace(microsecond=0)


@dataclass(frozen=True, slots=True)
class ReportContext:
    """Normalised results plus run metadata ready for rendering."""

    target_dir: Path
    results: Sequence[ToolResult]
    warnings: Sequence[str] = ()
    fix: bool = False
    generated_at: datetime = field(default_factory=utc_now)

    @property
    def successful(self) -> tuple[ToolResult, ...]:
        """Return results that completed without an error."""
        return tuple(result for result in self.results if result.error is None)

    @property
    def total_duration(self) -> float:
        """Return the summed duration of every result in milliseconds."""
        return sum(result.duration for result in self.results)

    def iter_findings(self) -> Iterator[tuple[str, Finding]]:
        """Yield ``(tool, finding)`` pairs from successful results in result order."""
        for result in self.successful:
            for finding in result.findings:
                yield result.tool, finding


__all__ = ["ReportContext", "utc_now"]
