# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter for golangci-lint."""

from __future__ import annotations

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
    load_json,
    optional_int,
    optional_str,
)

_LINTER_TAGS: Final[dict[str, Tag]] = {
    **dict.fromkeys(("gocognit", "cyclop", "funlen", "gocyclo", "maintidx", "nestif"), Tag.REFACTOR),
    **dict.fromkeys(("govet", "staticcheck", "ineffassign", "unused", "errcheck", "bodyclose", "nilerr"), Tag.BUG),
    "gosec": Tag.SECURITY,
    "revive": Tag.DOCS,
}


def classify_go_linter(linter: str | None) -> Tag:
    """Return the tag for the golangci-lint sub-linter that produced an issue."""

    if not linter:
        return Tag.LINTER
    return _LINTER_TAGS.get(linter, Tag.LINTER)


class GolangciLintAdapter(ToolAdapter):
    """Run ``golangci-lint run`` with JSON output from the module root."""

    name = "golangci-lint"
    extensions = frozenset({".go"})
    install_hint = (
        "curl -sSfL https://raw.githubusercontent.com/golangci/golangci-lint/master/install.sh"
        " | sh -s -- -b ~/.local/bin"
    )
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["run", "--out-format", "json"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        else:
            args.extend(["--enable", "gocognit"])
        if options.fix:
            args.append("--fix")
        if options.files:
            args.extend(str(path) for path in options.files)
        else:
            args.append("./...")
        return Command(executable="golangci-lint", args=args, working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if exit_code > 1:
                raise ToolOutputError(f"golangci-lint error (exit {exit_code}): {excerpt(stderr)}")
            return []
        payload = as_mapping(load_json(self.name, stdout))
        findings: list[Finding] = []
        for issue in iter_dicts(payload.get("Issues")):
            position = as_mapping(issue.get("Pos"))
            linter = optional_str(issue.get("FromLinter"))
            findings.append(
                Finding(
                    file=optional_str(position.get("Filename")) or "unknown",
                    line=optional_int(position.get("Line")) or 0,
                    col=optional_int(position.get("Column")),
                    tag=classify_go_linter(linter),
                    rule=linter or "unknown",
                    severity=Severity.ERROR if issue.get("Severity") == "error" else Severity.WARNING,
                    message=optional_str(issue.get("Text")) or "Issue detected",
                ),
            )
        return findings


__all__ = ["GolangciLintAdapter", "classify_go_linter"]
