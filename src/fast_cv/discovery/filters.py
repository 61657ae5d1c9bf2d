# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Gitignore-style path matchers compiled once and reused across the pipeline."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from pathspec import GitIgnoreSpec, PathSpec

from ..constants import ALWAYS_EXCLUDE_DIRS, ALWAYS_EXCLUDE_FILES, PROJECT_IGNORE_FILES, TOOL_IGNORE_FILE

LOGGER = logging.getLogger(__name__)

_GLOB_CHARS: Final[re.Pattern[str]] = re.compile(r"[*?\[{!]")


def _clean_patterns(patterns: Iterable[str]) -> tuple[str, ...]:
    cleaned: list[str] = []
    for raw in patterns:
        entry = raw.rstrip("\r\n")
        if not entry.strip() or entry.lstrip().startswith("#"):
            continue
        cleaned.append(entry.strip())
    return tuple(cleaned)


def _as_posix(rel_path: str | Path) -> str:
    return Path(rel_path).as_posix() if isinstance(rel_path, Path) else rel_path.replace("\\", "/")


def load_ignore_file(path: Path) -> tuple[str, ...]:
    """Return the patterns stored in an ignore file.

    Blank lines and ``#`` comments are dropped. An unreadable file is treated as empty.

    Args:
        path: Ignore file to read.

    Returns:
        tuple[str, ...]: Patterns in file order.
    """

    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ()
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.debug("ignoring unreadable ignore file %s: %s", path, exc)
        return ()
    return _clean_patterns(content.splitlines())


class IgnoreFilter:
    """Union of the hardcoded denylist, caller excludes and project ignore files.

    A path is ignored when **any** layer matches it.
    """

    __slots__ = ("_patterns", "_spec")

    def __init__(self, patterns: Sequence[str]) -> None:
        """Compile ``patterns`` using gitignore semantics.

        Args:
            patterns: Gitignore-style patterns in precedence order.
        """

        self._patterns = _clean_patterns(patterns)
        self._spec = GitIgnoreSpec.from_lines(self._patterns)

    @classmethod
    def for_directory(cls, target_dir: Path, *, exclude: Sequence[str] = ()) -> IgnoreFilter:
        """Build the layered ignore filter for ``target_dir``.

        Layers: hardcoded directories and lock files, ``exclude`` patterns, the
        first project ignore file found, then the tool-specific ignore file.

        Args:
            target_dir: Directory being scanned.
            exclude: Caller-supplied gitignore-style patterns.

        Returns:
            IgnoreFilter: Compiled filter.
        """

        patterns: list[str] = [f"{name}/" for name in ALWAYS_EXCLUDE_DIRS]
        patterns.extend(ALWAYS_EXCLUDE_FILES)
        patterns.extend(exclude)
        for name in PROJECT_IGNORE_FILES:
            candidate = target_dir / name
            if candidate.is_file():
                patterns.extend(load_ignore_file(candidate))
                break
        patterns.extend(load_ignore_file(target_dir / TOOL_IGNORE_FILE))
        return cls(patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        """Return the compiled patterns in precedence order."""
        return self._patterns

    def ignores(self, rel_path: str | Path) -> bool:
        """Return ``True`` when ``rel_path`` is excluded by any layer.

        Args:
            rel_path: Path relative to the scanned directory.

        Returns:
            bool: ``True`` when the path is ignored.
        """

        candidate = _as_posix(rel_path)
        if not candidate or candidate.startswith("../"):
            return False
        return self._spec.match_file(candidate)


class IncludeFilter:
    """Allow-list of exact relative paths or gitignore-style globs."""

    __slots__ = ("_literals", "_patterns", "_spec")

    def __init__(self, patterns: Sequence[str]) -> None:
        """Compile the allow-list.

        Args:
            patterns: Exact relative paths or glob patterns.
        """

        self._patterns = _clean_patterns(patterns)
        self._literals = frozenset(p for p in self._patterns if not _GLOB_CHARS.search(p))
        self._spec = PathSpec.from_lines("gitwildmatch", self._patterns)

    @classmethod
    def from_patterns(cls, patterns: Sequence[str] | None) -> IncludeFilter | None:
        """Return a filter for ``patterns`` or ``None`` when no inclusion list was given."""

        if not patterns:
            return None
        instance = cls(patterns)
        return instance if instance.patterns else None

    @property
    def patterns(self) -> tuple[str, ...]:
        """Return the compiled patterns."""
        return self._patterns

    def includes(self, rel_path: str | Path) -> bool:
        """Return ``True`` when ``rel_path`` matches at least one include pattern.

        Args:
            rel_path: Path relative to the scanned directory.

        Returns:
            bool: ``True`` when the path is in the allow-list.
        """

        candidate = _as_posix(rel_path)
        if candidate in self._literals:
            return True
        return self._spec.match_file(candidate)


__all__ = ["IgnoreFilter", "IncludeFilter", "load_ignore_file"]
