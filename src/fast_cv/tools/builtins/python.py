# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters for Python analyzers (ruff, mypy, vulture)."""

from __future__ import annotations

import re
from collections.abc import Sequence
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
    parse_json_lines,
    path_arguments,
)

PYTHON_EXTENSIONS: Final[frozenset[str]] = frozenset({".py", ".pyi"})

_RUFF_REFACTOR = re.compile(r"^(SIM|UP|PERF|C4|RET|PIE)")
_RUFF_SECURITY = re.compile(r"^S\d")
_RUFF_FORMAT = re.compile(r"^[EWI]\d")
_VULTURE_LINE = re.compile(r"^(?P<file>.+?):(?P<line>\d+):\s+(?P<message>.+)\s+\((?P<confidence>\d+)% confidence\)\s*$")


def classify_ruff_rule(code: str | None) -> Tag:
    """Return the tag for a ruff rule code.

    Refactor prefixes are checked before the security prefix so ``SIM`` codes
    are never mistaken for bandit ``S`` rules.
    """

    if not code:
        return Tag.LINTER
    if _RUFF_REFACTOR.match(code):
        return Tag.REFACTOR
    if _RUFF_SECURITY.match(code):
        return Tag.SECURITY
    if _RUFF_FORMAT.match(code):
        return Tag.FORMAT
    if code.startswith("B"):
        return Tag.BUG
    return Tag.LINTER


class RuffAdapter(ToolAdapter):
    """Run ``ruff check`` with JSON output."""

    name = "ruff"
    extensions = PYTHON_EXTENSIONS
    install_hint = "pipx install ruff  (or: pip3 install --user ruff)"
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["check", "--output-format", "json", "--fix" if options.fix else "--no-fix"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        args.extend(path_arguments(target_dir, options))
        return Command(executable="ruff", args=args)

    def pre_fix_commands(
        self,
        target_dir: Path,
        config_path: Path | None,
        options: ToolOptions,
    ) -> Sequence[Command]:
        args = ["format"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        args.extend(path_arguments(target_dir, options))
        return (Command(executable="ruff", args=args),)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean, 1 findings, 2 error
        if exit_code == 2 and not stdout.strip():
            raise ToolOutputError(f"ruff error: {excerpt(stderr)}")
        if not stdout.strip():
            return []
        payload = load_json(self.name, stdout)
        if isinstance(payload, dict):
            payload = payload.get("diagnostics")
        findings: list[Finding] = []
        for item in iter_dicts(payload):
            location = as_mapping(item.get("location"))
            code = optional_str(item.get("code"))
            findings.append(
                Finding(
                    file=optional_str(item.get("filename")) or "unknown",
                    line=optional_int(location.get("row")) or 0,
                    col=optional_int(location.get("column")),
                    tag=classify_ruff_rule(code),
                    rule=code or "unknown",
                    severity=Severity.ERROR if item.get("type") == "E" else Severity.WARNING,
                    message=optional_str(item.get("message")) or "",
                ),
            )
        return findings


class MypyAdapter(ToolAdapter):
    """Run mypy with newline-delimited JSON output."""

    name = "mypy"
    extensions = PYTHON_EXTENSIONS
    install_hint = "pipx install mypy  (or: pip3 install --user mypy)"

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["--output", "json", "--no-error-summary"]
        if config_path is not None:
            args.extend(["--config-file", str(config_path)])
        args.extend(path_arguments(target_dir, options))
        return Command(executable="mypy", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if exit_code == 2 and stderr.strip():
                raise ToolOutputError(f"mypy error: {excerpt(stderr)}")
            return []
        # notes are attached context for a preceding error, not findings
        return [
            Finding(
                file=optional_str(item.get("file")) or "unknown",
                line=optional_int(item.get("line")) or 0,
                col=optional_int(item.get("column")),
                tag=Tag.TYPE_ERROR,
                rule=optional_str(item.get("code")) or "type-error",
                severity=Severity.ERROR,
                message=optional_str(item.get("message")) or "",
            )
            for item in parse_json_lines(stdout)
            if item.get("severity") == "error"
        ]


class VultureAdapter(ToolAdapter):
    """Run vulture and parse its line-oriented report."""

    name = "vulture"
    extensions = PYTHON_EXTENSIONS
    install_hint = "pipx install vulture  (or: pip3 install --user vulture)"
    min_confidence: Final[int] = 80

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del config_path
        args = ["--min-confidence", str(self.min_confidence), *path_arguments(target_dir, options)]
        return Command(executable="vulture", args=args, working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean, 1 findings (3 in newer releases), 2 usage error
        if exit_code == 2:
            raise ToolOutputError(f"vulture error (exit {exit_code}): {excerpt(stderr)}")
        findings: list[Finding] = []
        for line in stdout.strip().splitlines():
            match = _VULTURE_LINE.match(line)
            if match is None:
                continue
            findings.append(
                Finding(
                    file=match["file"],
                    line=int(match["line"]),
                    tag=Tag.DEAD_CODE,
                    rule="vulture/unused",
                    severity=Severity.WARNING,
                    message=f"{match['message']} ({match['confidence']}% confidence)",
                ),
            )
        return findings


__all__ = [
    "PYTHON_EXTENSIONS",
    "MypyAdapter",
    "RuffAdapter",
    "VultureAdapter",
    "classify_ruff_rule",
]
