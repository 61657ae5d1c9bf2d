# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analyzer adapter contract, registry and built-in catalog."""

from __future__ import annotations

from .base import Command, ToolAdapter, ToolOptions
from .builtins import default_registry
from .registry import ToolRegistry

__all__ = ["Command", "ToolAdapter", "ToolOptions", "ToolRegistry", "default_registry"]
