# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter for sqlfluff."""

from __future__ import annotations

from pathlib import Path

from ...errors import ToolOutputError
from ...models import Finding, Severity, Tag
from ..base import (
    Command,
    ToolAdapter,
    ToolOptions,
    excerpt,
    iter_dicts,
    load_json,
    optional_int,
    optional_str,
    path_arguments,
)


def classify_sqlfluff_code(code: str | None) -> Tag:
    """Return ``BUG`` for parse errors, ``FORMAT`` for layout/capitalisation rules, ``LINTER`` otherwise."""

    if not code:
        return Tag.LINTER
    if code.startswith("PRS"):
        return Tag.BUG
    if code.startswith(("LT", "CP")):
        return Tag.FORMAT
    return Tag.LINTER


class SqlfluffAdapter(ToolAdapter):
    """Run ``sqlfluff lint`` (or ``sqlfluff fix`` in fix mode) with JSON output.

    sqlfluff discovers its own ``.sqlfluff`` files, so no config path is passed.
    """

    name = "sqlfluff"
    extensions = frozenset({".sql"})
    install_hint = "pipx install sqlfluff  (or: pip3 install --user sqlfluff)"
    version_args = ("version",)
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del config_path
        args = ["fix" if options.fix else "lint", "--format", "json", "--disable-progress-bar", "--processes", "1"]
        if options.fix:
            args.append("--force")
        args.extend(path_arguments(target_dir, options))
        return Command(executable="sqlfluff", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if exit_code >= 3:
                raise ToolOutputError(f"sqlfluff error (exit {exit_code}): {excerpt(stderr)}")
            return []
        findings: list[Finding] = []
        for file_result in iter_dicts(load_json(self.name, stdout)):
            path = optional_str(file_result.get("filepath")) or optional_str(file_result.get("file")) or "unknown"
            for violation in iter_dicts(file_result.get("violations")):
                code = optional_str(violation.get("code"))
                # sqlfluff 3.x renamed line_no/line_pos to start_line_no/start_line_pos
                line = optional_int(violation.get("start_line_no")) or optional_int(violation.get("line_no"))
                findings.append(
                    Finding(
                        file=path,
                        line=line or 0,
                        col=optional_int(violation.get("start_line_pos")) or optional_int(violation.get("line_pos")),
                        tag=classify_sqlfluff_code(code),
                        rule=code or "unknown",
                        severity=Severity.ERROR if code and code.startswith("PRS") else Severity.WARNING,
                        message=(
                            optional_str(violation.get("description"))
                            or optional_str(violation.get("name"))
                            or "SQL lint issue"
                        ),
                    ),
                )
        return findings


__all__ = ["SqlfluffAdapter", "classify_sqlfluff_code"]
