# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language-agnostic adapters (jscpd, typos)."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from ...constants import SCANNABLE_EXTENSIONS
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
    path_arguments,
)

LOGGER = logging.getLogger(__name__)

JSCPD_REPORT_NAME: Final[str] = "jscpd-report.json"


def _clone_start(side: Mapping[str, Any]) -> tuple[int, int | None]:
    start = as_mapping(side.get("startLoc"))
    line = optional_int(start.get("line")) or optional_int(side.get("start")) or 0
    return line, optional_int(start.get("column"))


class JscpdAdapter(ToolAdapter):
    """Detect copy-paste across the whole tree with jscpd.

    jscpd writes its report to a file, so the command points ``--output`` at the
    invocation's scratch directory and :meth:`parse_output` reads it back from there.
    """

    name = "jscpd"
    extensions = SCANNABLE_EXTENSIONS
    install_hint = "npm install -g jscpd"
    uses_scratch_dir = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        if options.scratch_dir is None:
            raise ToolOutputError("jscpd requires a scratch directory for its report")
        args = [
            "--reporters",
            "json",
            "--output",
            str(options.scratch_dir),
            "--min-tokens",
            "50",
            "--min-lines",
            "5",
            "--absolute",
            "--silent",
        ]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        # cross-file analysis needs the whole tree, never the file subset
        args.append(str(target_dir))
        return Command(executable="jscpd", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del stdout
        report_path = options.scratch_dir / JSCPD_REPORT_NAME if options.scratch_dir is not None else None
        if report_path is None or not report_path.is_file():
            if exit_code > 1:
                raise ToolOutputError(f"jscpd error (exit {exit_code}): {excerpt(stderr)}")
            LOGGER.debug("jscpd produced no report")
            return []
        try:
            report = json.loads(report_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ToolOutputError(f"jscpd: failed to read report {report_path.name}: {exc}") from exc

        findings: list[Finding] = []
        for duplicate in iter_dicts(as_mapping(report).get("duplicates")):
            first = as_mapping(duplicate.get("firstFile"))
            second = as_mapping(duplicate.get("secondFile"))
            rule = f"jscpd/{optional_str(duplicate.get('format')) or 'unknown'}"
            size = f"{duplicate.get('lines') or 0} lines, {duplicate.get('tokens') or 0} tokens"
            for here, there in ((first, second), (second, first)):
                line, col = _clone_start(here)
                other_line = _clone_start(there)[0] or "?"
                findings.append(
                    Finding(
                        file=optional_str(here.get("name")) or "unknown",
                        line=line,
                        col=col,
                        tag=Tag.DUPLICATION,
                        rule=rule,
                        severity=Severity.WARNING,
                        message=(
                            f"Duplicated block ({size}), also in "
                            f"{optional_str(there.get('name')) or 'unknown'}:{other_line}"
                        ),
                    ),
                )
        return findings


class TyposAdapter(ToolAdapter):
    """Spell-check identifiers and comments with typos; runs only when named."""

    name = "typos"
    extensions = frozenset(
        {
            ".py",
            ".pyi",
            ".js",
            ".jsx",
            ".ts",
            ".tsx",
            ".go",
            ".java",
            ".rb",
            ".php",
            ".rs",
            ".c",
            ".cpp",
            ".h",
            ".cs",
            ".swift",
            ".kt",
            ".kts",
            ".sql",
            ".mts",
            ".cts",
            ".scala",
            ".sh",
            ".bash",
        },
    )
    install_hint = "cargo install typos-cli  (or: brew install typos-cli)"
    opt_in = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["--format", "json"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        args.extend(path_arguments(target_dir, options))
        return Command(executable="typos", args=args, working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if exit_code > 1 and stderr.strip():
                raise ToolOutputError(f"typos error: {excerpt(stderr)}")
            return []
        findings: list[Finding] = []
        for item in parse_json_lines(stdout):
            typo = optional_str(item.get("typo"))
            if typo is None:
                continue
            corrections = [str(entry) for entry in item.get("corrections") or ()]
            findings.append(
                Finding(
                    file=optional_str(item.get("path")) or "unknown",
                    line=optional_int(item.get("line_num")) or 0,
                    tag=Tag.TYPO,
                    rule="typo",
                    severity=Severity.WARNING,
                    message=f'"{typo}" -> {", ".join(corrections) or "?"}',
                ),
            )
        return findings


__all__ = ["JSCPD_REPORT_NAME", "JscpdAdapter", "TyposAdapter"]
