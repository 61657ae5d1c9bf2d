# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from typing import Final

from .models import Tag

_TAG_TO_SARIF_LEVEL: Final[dict[str, str]] = {
    Tag.SECURITY.value: "error",
    Tag.BUG.value: "error",
    Tag.PRIVACY.value: "error",
    Tag.SECRET.value: "error",
    Tag.LICENSE.value: "error",
    Tag.REFACTOR.value: "warning",
    Tag.LINTER.value: "warning",
    Tag.DEPENDENCY.value: "warning",
    Tag.INFRA.value: "warning",
    Tag.TYPE_ERROR.value: "warning",
    Tag.DOCS.value: "warning",
    Tag.TYPO.value: "warning",
    Tag.DEAD_CODE.value: "warning",
    Tag.FORMAT.value: "note",
    Tag.DUPLICATION.value: "note",
}


def tag_to_sarif(tag: str | Tag) -> str:
    """Map a finding tag to a SARIF reporting level.

    Args:
        tag: Tag attached to a finding.

    Returns:
        str: ``error``, ``warning`` or ``note``; unknown tags map to ``warning``.
    """

    key = tag.value if isinstance(tag, Tag) else str(tag).upper()
    return _TAG_TO_SARIF_LEVEL.get(key, "warning")


__all__ = ["tag_to_sarif"]
