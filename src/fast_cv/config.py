# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run configuration model and layered TOML loading."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_MAX_LINES, DEFAULT_TIMEOUT_SECONDS
from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "fast-cv"
PROJECT_CONFIG_FILENAME: Final[str] = ".fast-cv.toml"

OutputFormat = Literal["markdown", "sarif"]


class Config(BaseModel):
    """Options controlling a single scan."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    tools: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    only: list[str] = Field(default_factory=list)
    fix: bool = False
    licenses: bool = False
    auto_install: bool = False
    output_format: OutputFormat = "markdown"
    max_lines: int = Field(default=DEFAULT_MAX_LINES, ge=0)
    line_check_omit: list[str] = Field(default_factory=list)
    jobs: int = Field(default=1, ge=1)
    verbose: bool = False

    @field_validator("tools", "exclude", "only", "line_check_omit", mode="before")
    @classmethod
    def _split_lists(cls, value: object) -> object:
        """Accept comma-separated strings wherever a list of names is expected."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("tools", mode="after")
    @classmethod
    def _lower_tools(cls, value: list[str]) -> list[str]:
        return [name.strip().lower() for name in value if name.strip()]


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in payload.items()}


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc


def load_project_settings(target_dir: Path) -> dict[str, Any]:
    """Return merged configuration fragments found inside ``target_dir``.

    ``[tool.fast-cv]`` in ``pyproject.toml`` is applied first; ``.fast-cv.toml``
    overrides it.

    Args:
        target_dir: Directory being scanned.

    Returns:
        dict[str, Any]: Raw settings with keys normalised to underscores.

    Raises:
        ConfigError: If a document cannot be parsed.
    """

    merged: dict[str, Any] = {}
    pyproject = target_dir / PYPROJECT_FILENAME
    if pyproject.is_file():
        tool_section = _read_toml(pyproject).get(PYPROJECT_TOOL_KEY)
        if isinstance(tool_section, Mapping):
            section = tool_section.get(PYPROJECT_SECTION_KEY)
            if isinstance(section, Mapping):
                merged.update(_normalise_keys(section))
    project_file = target_dir / PROJECT_CONFIG_FILENAME
    if project_file.is_file():
        merged.update(_normalise_keys(_read_toml(project_file)))
    return merged


def build_config(target_dir: Path, overrides: Mapping[str, Any] | None = None) -> Config:
    """Build the effective :class:`Config` for ``target_dir``.

    Args:
        target_dir: Directory being scanned.
        overrides: Explicit values (typically CLI flags); ``None`` values are ignored.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """

    payload = load_project_settings(target_dir)
    if overrides:
        payload.update({key: value for key, value in _normalise_keys(overrides).items() if value is not None})
    try:
        return Config.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "Config",
    "OutputFormat",
    "PROJECT_CONFIG_FILENAME",
    "build_config",
    "load_project_settings",
]
