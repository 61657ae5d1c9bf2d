# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single-pass directory scanner applying layered ignore and include rules."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..constants import SCANNABLE_EXTENSIONS
from ..errors import ScanError
from .filters import IgnoreFilter, IncludeFilter

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Files selected for analysis plus the compiled filters for reuse downstream."""

    root: Path
    files: tuple[str, ...]
    extensions: frozenset[str]
    ignore_filter: IgnoreFilter
    include_filter: IncludeFilter | None

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no scannable file survived filtering."""
        return not self.files


def ensure_scannable(target_dir: Path) -> Path:
    """Return the resolved ``target_dir`` or raise when it cannot be scanned.

    Args:
        target_dir: Directory requested by the caller.

    Returns:
        Path: Absolute, resolved directory path.

    Raises:
        ScanError: If the path is missing, not a directory, or unreadable.
    """

    try:
        resolved = target_dir.expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ScanError(f"directory not found or not readable: {target_dir}") from exc
    if not resolved.is_dir() or not os.access(resolved, os.R_OK | os.X_OK):
        raise ScanError(f"directory not found or not readable: {resolved}")
    return resolved


def scan_directory(
    target_dir: Path,
    *,
    exclude: Sequence[str] = (),
    only: Sequence[str] = (),
) -> ScanResult:
    """Walk ``target_dir`` once and return the scannable file set.

    A file survives when no ignore layer matches it, its extension is in
    :data:`~fast_cv.constants.SCANNABLE_EXTENSIONS`, and it matches the include
    filter when ``only`` is supplied. An empty result is valid.

    Args:
        target_dir: Directory to scan.
        exclude: Caller-supplied gitignore-style exclude patterns.
        only: Optional include patterns (exact relative paths or globs).

    Returns:
        ScanResult: Sorted, de-duplicated relative paths, observed extensions and filters.

    Raises:
        ScanError: If ``target_dir`` cannot be read.
    """

    root = ensure_scannable(target_dir)
    ignore_filter = IgnoreFilter.for_directory(root, exclude=exclude)
    include_filter = IncludeFilter.from_patterns(only)

    files: set[str] = set()
    extensions: set[str] = set()
    for rel_path in _walk(root, ignore_filter):
        suffix = Path(rel_path).suffix.lower()
        if suffix not in SCANNABLE_EXTENSIONS:
            continue
        if include_filter is not None and not include_filter.includes(rel_path):
            continue
        files.add(rel_path)
        extensions.add(suffix)

    ordered = tuple(sorted(files))
    LOGGER.debug("scanned %s: %d files, extensions: %s", root, len(ordered), ", ".join(sorted(extensions)) or "-")
    return ScanResult(
        root=root,
        files=ordered,
        extensions=frozenset(extensions),
        ignore_filter=ignore_filter,
        include_filter=include_filter,
    )


def _walk(root: Path, ignore_filter: IgnoreFilter) -> Iterator[str]:
    """Yield POSIX relative paths of regular files not matched by ``ignore_filter``."""

    def _on_error(exc: OSError) -> None:
        LOGGER.debug("skipping unreadable path %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"
        dirnames[:] = sorted(name for name in dirnames if not ignore_filter.ignores(f"{prefix}{name}/"))
        for filename in filenames:
            candidate = current / filename
            if not candidate.is_file():
                continue
            rel_path = f"{prefix}{filename}"
            if ignore_filter.ignores(rel_path):
                continue
            yield rel_path


__all__ = ["ScanResult", "ensure_scannable", "scan_directory"]
