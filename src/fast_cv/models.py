# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the fast-cv package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Tag(str, Enum):
    """Coarse category attached to every finding."""

    SECURITY = "SECURITY"
    BUG = "BUG"
    REFACTOR = "REFACTOR"
    LINTER = "LINTER"
    FORMAT = "FORMAT"
    TYPE_ERROR = "TYPE_ERROR"
    DEPENDENCY = "DEPENDENCY"
    INFRA = "INFRA"
    SECRET = "SECRET"
    PRIVACY = "PRIVACY"
    LICENSE = "LICENSE"
    DOCS = "DOCS"
    TYPO = "TYPO"
    DEAD_CODE = "DEAD_CODE"
    DUPLICATION = "DUPLICATION"


class Severity(str, Enum):
    """Severity levels reported by adapters."""

    ERROR = "error"
    WARNING = "warning"


class ConfigSource(str, Enum):
    """Tier of the configuration search chain that supplied a config file."""

    LOCAL = "local"
    USER_DEFAULT = "user-default"
    PACKAGE_DEFAULT = "package-default"
    NONE = "none"


class Finding(BaseModel):
    """Normalised issue reported by a single analyzer."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = 0
    col: int | None = None
    tag: str = Tag.LINTER.value
    rule: str
    severity: Severity = Severity.WARNING
    message: str

    @field_validator("tag", mode="before")
    @classmethod
    def _coerce_tag(cls, value: object) -> object:
        """Store tags as their plain upper-case string value."""
        if isinstance(value, Tag):
            return value.value
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("line", mode="before")
    @classmethod
    def _coerce_line(cls, value: object) -> object:
        """Treat missing line numbers as ``0`` (not applicable)."""
        return 0 if value is None else value


class ToolResult(BaseModel):
    """Outcome of a single analyzer invocation."""

    model_config = ConfigDict(frozen=True)

    tool: str
    findings: list[Finding] = Field(default_factory=list)
    error: str | None = None
    duration: float = Field(default=0.0, ge=0.0)
    fix_skipped: bool = False

    @model_validator(mode="after")
    def _error_excludes_findings(self) -> ToolResult:
        """Ensure a failed invocation never carries findings."""
        if self.error is not None and self.findings:
            raise ValueError("a ToolResult with an error must not carry findings")
        return self

    @property
    def ok(self) -> bool:
        """Return ``True`` when the invocation completed without an error."""
        return self.error is None


class ResolvedConfig(BaseModel):
    """Configuration artifact governing one analyzer for one target directory."""

    model_config = ConfigDict(frozen=True)

    path: Path | None = None
    source: ConfigSource = ConfigSource.NONE

    @model_validator(mode="after")
    def _path_matches_source(self) -> ResolvedConfig:
        """Keep ``path`` and ``source`` consistent with each other."""
        if (self.path is None) != (self.source is ConfigSource.NONE):
            raise ValueError("path must be set exactly when a configuration source was found")
        return self


__all__ = [
    "ConfigSource",
    "Finding",
    "ResolvedConfig",
    "Severity",
    "Tag",
    "ToolResult",
]
