# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter for ``cargo clippy``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from ...errors import ToolOutputError
from ...models import Finding, Severity, Tag
from ..base import (
    Command,
    ToolAdapter,
    ToolOptions,
    as_mapping,
    excerpt,
    iter_dicts,
    optional_int,
    optional_str,
    parse_json_lines,
)

_BUG_LINTS: Final[re.Pattern[str]] = re.compile(r"correctness|suspicious")
_REFACTOR_LINTS: Final[re.Pattern[str]] = re.compile(r"perf|complexity")
# cargo exits 101 when the build itself failed
_CARGO_FAILURE: Final[int] = 101


def classify_clippy_lint(lint: str | None) -> Tag:
    """Return the tag for a clippy lint code such as ``clippy::perf``."""

    if not lint:
        return Tag.LINTER
    if _BUG_LINTS.search(lint):
        return Tag.BUG
    if _REFACTOR_LINTS.search(lint):
        return Tag.REFACTOR
    return Tag.LINTER


class ClippyAdapter(ToolAdapter):
    """Run clippy over the cargo workspace rooted at the target directory.

    Compiler notes are dropped; every other diagnostic is anchored at its
    primary span.
    """

    name = "clippy"
    extensions = frozenset({".rs"})
    install_hint = "rustup component add clippy"
    executable = "cargo"
    version_args = ("clippy", "--version")
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del config_path
        args = ["clippy"]
        if options.fix:
            args.extend(["--fix", "--allow-dirty", "--allow-staged"])
        args.extend(["--message-format=json", "--all-targets", "--all-features", "--", "--no-deps"])
        return Command(executable="cargo", args=args, working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if exit_code >= _CARGO_FAILURE:
            raise ToolOutputError(f"clippy error (exit {exit_code}): {excerpt(stderr or stdout)}")
        findings: list[Finding] = []
        for record in parse_json_lines(stdout):
            if record.get("reason") != "compiler-message":
                continue
            message = as_mapping(record.get("message"))
            level = message.get("level")
            if not message or level == "note":
                continue
            spans = list(iter_dicts(message.get("spans")))
            span = next((candidate for candidate in spans if candidate.get("is_primary")), spans[0] if spans else None)
            if span is None:
                continue
            lint = optional_str(as_mapping(message.get("code")).get("code"))
            findings.append(
                Finding(
                    file=optional_str(span.get("file_name")) or "unknown",
                    line=optional_int(span.get("line_start")) or 0,
                    col=optional_int(span.get("column_start")),
                    tag=classify_clippy_lint(lint),
                    rule=lint or "clippy",
                    severity=Severity.ERROR if level == "error" else Severity.WARNING,
                    message=optional_str(message.get("message")) or "",
                ),
            )
        return findings


__all__ = ["ClippyAdapter", "classify_clippy_lint"]
