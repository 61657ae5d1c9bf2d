# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the configuration artifact governing each analyzer."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from .constants import PROJECT_NAME
from .models import ConfigSource, ResolvedConfig

PACKAGE_DEFAULTS_DIR: Final[Path] = Path(__file__).resolve().parent / "defaults"

# Local configuration filenames per analyzer, highest priority first.
TOOL_CONFIG_FILES: Final[Mapping[str, tuple[str, ...]]] = {
    "ruff": ("ruff.toml", ".ruff.toml", "pyproject.toml"),
    "eslint": (
        "eslint.config.js",
        "eslint.config.mjs",
        "eslint.config.cjs",
        ".eslintrc.json",
        ".eslintrc.js",
        ".eslintrc.yml",
        ".eslintrc.yaml",
        ".eslintrc",
    ),
    "semgrep": (".semgrep.yml", ".semgrep.yaml", ".semgrep"),
    "golangci-lint": (".golangci.yml", ".golangci.yaml", ".golangci.toml", ".golangci.json"),
    "jscpd": (".jscpd.json",),
    "trivy": ("trivy.yaml", ".trivy.yaml"),
    "mypy": ("mypy.ini", ".mypy.ini", "setup.cfg", "pyproject.toml"),
    "typos": ("typos.toml", ".typos.toml", "_typos.toml"),
    "tsc": ("tsconfig.json",),
    "stylelint": (
        ".stylelintrc",
        ".stylelintrc.json",
        ".stylelintrc.yml",
        ".stylelintrc.yaml",
        ".stylelintrc.js",
        "stylelint.config.js",
        "stylelint.config.mjs",
        "stylelint.config.cjs",
    ),
    "bearer": (".bearer.yml", "bearer.yml"),
}

# Shipped default per analyzer; ``semgrep`` points at a rules directory.
PACKAGE_DEFAULT_FILES: Final[Mapping[str, str]] = {
    "ruff": "ruff.toml",
    "eslint": "eslint.config.mjs",
    "semgrep": "semgrep",
    "mypy": "mypy.ini",
}


def user_defaults_dir() -> Path:
    """Return the per-user override directory for shipped defaults.

    Returns:
        Path: ``~/.config/fast-cv/defaults``.
    """

    return Path.home() / ".config" / PROJECT_NAME / "defaults"


def _readable(path: Path) -> bool:
    return path.exists() and os.access(path, os.R_OK)


def resolve_config(
    tool_name: str,
    target_dir: Path,
    *,
    user_dir: Path | None = None,
    package_dir: Path | None = None,
) -> ResolvedConfig:
    """Return the first configuration hit for ``tool_name``.

    Search order: the analyzer's local filenames inside ``target_dir`` in
    priority order, then the shipped default filename in the user override
    directory, then in the bundled defaults directory.

    Args:
        tool_name: Analyzer name.
        target_dir: Directory being scanned.
        user_dir: Override for :func:`user_defaults_dir`.
        package_dir: Override for the bundled defaults directory.

    Returns:
        ResolvedConfig: Path and provenance, or ``source == "none"`` when nothing matched.
    """

    for filename in TOOL_CONFIG_FILES.get(tool_name, ()):
        candidate = target_dir / filename
        if _readable(candidate):
            return ResolvedConfig(path=candidate, source=ConfigSource.LOCAL)

    default_name = PACKAGE_DEFAULT_FILES.get(tool_name)
    if default_name is None:
        return ResolvedConfig()

    user_candidate = (user_dir if user_dir is not None else user_defaults_dir()) / default_name
    if _readable(user_candidate):
        return ResolvedConfig(path=user_candidate, source=ConfigSource.USER_DEFAULT)

    package_candidate = (package_dir if package_dir is not None else PACKAGE_DEFAULTS_DIR) / default_name
    if _readable(package_candidate):
        return ResolvedConfig(path=package_candidate, source=ConfigSource.PACKAGE_DEFAULT)

    return ResolvedConfig()


__all__ = [
    "PACKAGE_DEFAULTS_DIR",
    "PACKAGE_DEFAULT_FILES",
    "TOOL_CONFIG_FILES",
    "resolve_config",
    "user_defaults_dir",
]
