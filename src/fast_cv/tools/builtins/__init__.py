# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in analyzer adapters and the default catalog."""

from __future__ import annotations

from ..base import ToolAdapter
from ..registry import ToolRegistry
from .go import GolangciLintAdapter
from .javascript import EslintAdapter, KnipAdapter, StylelintAdapter, TscAdapter
from .misc import JscpdAdapter, TyposAdapter
from .python import MypyAdapter, RuffAdapter, VultureAdapter
from .rust import ClippyAdapter
from .security import BearerAdapter, SemgrepAdapter, TrivyAdapter
from .sql import SqlfluffAdapter


def builtin_adapters() -> tuple[ToolAdapter, ...]:
    """Return fresh instances of every built-in adapter in execution order."""

    return (
        RuffAdapter(),
        MypyAdapter(),
        VultureAdapter(),
        EslintAdapter(),
        TscAdapter(),
        StylelintAdapter(),
        SemgrepAdapter(),
        BearerAdapter(),
        GolangciLintAdapter(),
        ClippyAdapter(),
        SqlfluffAdapter(),
        TrivyAdapter(),
        JscpdAdapter(),
        KnipAdapter(),
        TyposAdapter(),
    )


def default_registry() -> ToolRegistry:
    """Return a registry populated with the built-in catalog."""

    return ToolRegistry(builtin_adapters())


__all__ = [
    "BearerAdapter",
    "ClippyAdapter",
    "EslintAdapter",
    "GolangciLintAdapter",
    "JscpdAdapter",
    "KnipAdapter",
    "MypyAdapter",
    "RuffAdapter",
    "SemgrepAdapter",
    "SqlfluffAdapter",
    "StylelintAdapter",
    "TrivyAdapter",
    "TscAdapter",
    "TyposAdapter",
    "VultureAdapter",
    "builtin_adapters",
    "default_registry",
]
