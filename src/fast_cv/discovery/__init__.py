# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File discovery and path filtering."""

from __future__ import annotations

from .filters import IgnoreFilter, IncludeFilter, load_ignore_file
from .scanner import ScanResult, ensure_scannable, scan_directory

__all__ = [
    "IgnoreFilter",
    "IncludeFilter",
    "ScanResult",
    "ensure_scannable",
    "load_ignore_file",
    "scan_directory",
]
