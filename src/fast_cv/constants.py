# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core scanning constants shared by discovery, selection and the CLI."""

from __future__ import annotations

from typing import Final

PROJECT_NAME: Final[str] = "fast-cv"

SCANNABLE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".py",
        ".pyi",
        ".js",
        ".jsx",
        ".mjs",
        ".cjs",
        ".ts",
        ".tsx",
        ".mts",
        ".cts",
        ".go",
        ".java",
        ".rb",
        ".php",
        ".rs",
        ".c",
        ".h",
        ".cpp",
        ".hpp",
        ".cs",
        ".swift",
        ".kt",
        ".kts",
        ".scala",
        ".sh",
        ".bash",
        ".yaml",
        ".yml",
        ".json",
        ".toml",
        ".tf",
        ".sql",
        ".css",
        ".scss",
        ".sass",
        ".less",
        ".svelte",
        ".vue",
    },
)

# Build outputs, caches and dependency trees that are never scanned.
ALWAYS_EXCLUDE_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    "bower_components",
    "jspm_packages",
    "vendor",
    ".yarn",
    ".pnp",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    "*.egg-info",
    ".git",
    ".hg",
    ".svn",
    "dist",
    "build",
    "out",
    "target",
    "_build",
    ".next",
    ".nuxt",
    ".svelte-kit",
    ".angular",
    ".astro",
    ".docusaurus",
    ".vite",
    ".parcel-cache",
    ".turbo",
    ".expo",
    ".vercel",
    ".netlify",
    ".serverless",
    ".idea",
    ".vscode",
    ".gradle",
    ".cargo",
    ".sass-cache",
    ".cache",
    ".output",
    "coverage",
    ".terraform",
)

ALWAYS_EXCLUDE_FILES: Final[tuple[str, ...]] = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Pipfile.lock",
    "poetry.lock",
    "go.sum",
    "Gemfile.lock",
    "composer.lock",
)

# Only the first existing entry is read.
PROJECT_IGNORE_FILES: Final[tuple[str, ...]] = (".gitignore", ".ignore")
TOOL_IGNORE_FILE: Final[str] = ".fcvignore"

EXIT_CLEAN: Final[int] = 0
EXIT_FINDINGS: Final[int] = 1
EXIT_PRECHECK_FAILED: Final[int] = 2

DEFAULT_TIMEOUT_SECONDS: Final[float] = 120.0
DEFAULT_MAX_LINES: Final[int] = 600
KILL_GRACE_SECONDS: Final[float] = 5.0
PROBE_TIMEOUT_SECONDS: Final[float] = 30.0
INSTALL_TIMEOUT_SECONDS: Final[float] = 300.0

__all__ = [
    "ALWAYS_EXCLUDE_DIRS",
    "ALWAYS_EXCLUDE_FILES",
    "DEFAULT_MAX_LINES",
    "DEFAULT_TIMEOUT_SECONDS",
    "EXIT_CLEAN",
    "EXIT_FINDINGS",
    "EXIT_PRECHECK_FAILED",
    "INSTALL_TIMEOUT_SECONDS",
    "KILL_GRACE_SECONDS",
    "PROBE_TIMEOUT_SECONDS",
    "PROJECT_IGNORE_FILES",
    "PROJECT_NAME",
    "SCANNABLE_EXTENSIONS",
    "TOOL_IGNORE_FILE",
]
