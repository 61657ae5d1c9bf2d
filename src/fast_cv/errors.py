# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the scan pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class FastCVError(Exception):
    """Base class for errors raised by fast-cv."""


class ScanError(FastCVError):
    """Raised when the target directory cannot be scanned."""


class ConfigError(FastCVError):
    """Raised when configuration input is invalid."""


class UnknownToolError(ConfigError):
    """Raised when an explicitly requested analyzer is not in the catalog."""

    def __init__(self, names: Sequence[str], available: Sequence[str]) -> None:
        """Record the unknown analyzer names alongside the catalog contents.

        Args:
            names: Requested analyzer names that could not be resolved.
            available: Names registered in the catalog.
        """

        self.names = tuple(names)
        self.available = tuple(available)
        super().__init__(
            f"Unknown tool(s): {', '.join(self.names)}. Available: {', '.join(self.available)}",
        )


class ToolOutputError(FastCVError):
    """Raised by adapters when analyzer output is malformed or signals a fatal error."""


class SubprocessExecutionError(FastCVError):
    """Raised when a checked helper command exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stdout: str, stderr: str) -> None:
        self.argv = tuple(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or "<no stderr>"
        super().__init__(f"{Path(argv[0]).name} exited with status {returncode}: {detail}")


class ToolTimeoutError(FastCVError):
    """Raised once a timed-out process group has been torn down."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Timeout after {timeout:g}s")


__all__ = [
    "ConfigError",
    "FastCVError",
    "ScanError",
    "SubprocessExecutionError",
    "ToolOutputError",
    "ToolTimeoutError",
    "UnknownToolError",
]
