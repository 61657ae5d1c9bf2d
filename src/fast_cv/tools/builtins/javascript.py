# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters for the JavaScript and TypeScript toolchain (eslint, tsc, stylelint, knip)."""

from __future__ import annotations

import re
from collections.abc import Mapping
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
    path_arguments,
)

_SECURITY_RULES: Final[frozenset[str]] = frozenset(
    {
        "no-eval",
        "no-implied-eval",
        "no-new-func",
        "no-script-url",
        "no-proto",
        "no-caller",
        "no-extend-native",
    },
)
_REFACTOR_RULES: Final[frozenset[str]] = frozenset(
    {
        "complexity",
        "max-depth",
        "max-lines-per-function",
        "max-lines",
        "max-nested-callbacks",
        "max-params",
        "max-statements",
    },
)
_BUG_RULES: Final[frozenset[str]] = frozenset(
    {
        "no-unreachable",
        "no-unreachable-loop",
        "no-unused-vars",
        "no-constant-condition",
        "no-dupe-keys",
        "no-duplicate-case",
    },
)
_SONARJS_BUG_RULES: Final[frozenset[str]] = frozenset(
    {
        "sonarjs/no-all-duplicated-branches",
        "sonarjs/no-element-overwrite",
        "sonarjs/no-empty-collection",
        "sonarjs/no-extra-arguments",
        "sonarjs/no-identical-conditions",
        "sonarjs/no-identical-expressions",
        "sonarjs/no-ignored-return",
        "sonarjs/no-one-iteration-loop",
        "sonarjs/no-use-of-empty-return-value",
        "sonarjs/non-existent-operator",
    },
)

# ESLint 9 reports files outside every flat-config block with this text and no rule id.
_UNCONFIGURED_FILE_MARKER: Final[str] = "no matching configuration was supplied"


def classify_eslint_rule(rule_id: str | None) -> Tag:
    """Return the tag for an ESLint rule id, including plugin-prefixed ids."""

    if not rule_id:
        return Tag.LINTER
    if rule_id in _SONARJS_BUG_RULES:
        return Tag.BUG
    if rule_id.startswith("sonarjs/"):
        return Tag.REFACTOR
    if rule_id in _SECURITY_RULES or rule_id.startswith("security/"):
        return Tag.SECURITY
    if rule_id in _REFACTOR_RULES:
        return Tag.REFACTOR
    if rule_id in _BUG_RULES:
        return Tag.BUG
    return Tag.LINTER


class EslintAdapter(ToolAdapter):
    """Run ESLint with the JSON formatter."""

    name = "eslint"
    extensions = frozenset(
        {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts", ".cts", ".svelte", ".vue", ".json", ".jsonc"},
    )
    install_hint = "npm install -g eslint eslint-plugin-security eslint-plugin-sonarjs"
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["--format", "json"]
        if options.fix:
            args.append("--fix")
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        args.extend(path_arguments(target_dir, options))
        return Command(executable="eslint", args=args, working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean, 1 findings, 2 fatal
        if exit_code == 2 and not stdout.strip():
            raise ToolOutputError(f"eslint error: {excerpt(stderr)}")
        if not stdout.strip():
            return []
        findings: list[Finding] = []
        for file_result in iter_dicts(load_json(self.name, stdout)):
            path = optional_str(file_result.get("filePath")) or "unknown"
            for message in iter_dicts(file_result.get("messages")):
                rule_id = optional_str(message.get("ruleId"))
                text = optional_str(message.get("message")) or ""
                if rule_id is None and _UNCONFIGURED_FILE_MARKER in text:
                    continue
                findings.append(
                    Finding(
                        file=path,
                        line=optional_int(message.get("line")) or 0,
                        col=optional_int(message.get("column")),
                        tag=classify_eslint_rule(rule_id),
                        rule=rule_id or "parse-error",
                        severity=Severity.ERROR if message.get("severity") == 2 else Severity.WARNING,
                        message=text,
                    ),
                )
        return findings


_TSC_LINE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<col>\d+)\):\s+(?P<level>error|warning)\s+(?P<code>TS\d+):\s+(?P<msg>.+)$",
)


class TscAdapter(ToolAdapter):
    """Type-check a TypeScript project with ``tsc --noEmit``."""

    name = "tsc"
    extensions = frozenset({".ts", ".tsx", ".mts", ".cts"})
    install_hint = "npm install -g typescript"

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del options
        project = config_path if config_path is not None else target_dir
        return Command(executable="tsc", args=["--noEmit", "--pretty", "false", "--project", str(project)])

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean, 1-2 diagnostics, 3+ fatal
        if exit_code >= 3:
            raise ToolOutputError(f"tsc error (exit {exit_code}): {excerpt(stderr or stdout)}")
        findings: list[Finding] = []
        for line in stdout.splitlines():
            match = _TSC_LINE.match(line.strip())
            if match is None:
                continue
            findings.append(
                Finding(
                    file=match["file"],
                    line=int(match["line"]),
                    col=optional_int(match["col"]),
                    tag=Tag.TYPE_ERROR,
                    rule=match["code"],
                    severity=Severity(match["level"]),
                    message=match["msg"],
                ),
            )
        return findings


_STYLELINT_FORMAT_RULE: Final[re.Pattern[str]] = re.compile(
    r"indentation|whitespace|empty-line|no-eol|no-missing-end-of-source-newline|no-extra-semicolons",
)
# 1 fatal, 64 invalid CLI usage, 78 invalid configuration
_STYLELINT_FATAL_CODES: Final[frozenset[int]] = frozenset({1, 64, 78})


def classify_stylelint_rule(rule: str | None) -> Tag:
    """Return ``FORMAT`` for layout rules and ``LINTER`` for everything else."""

    if rule and _STYLELINT_FORMAT_RULE.search(rule):
        return Tag.FORMAT
    return Tag.LINTER


class StylelintAdapter(ToolAdapter):
    """Lint stylesheets with stylelint's JSON formatter."""

    name = "stylelint"
    extensions = frozenset({".css", ".scss", ".sass", ".less"})
    install_hint = "npm install -g stylelint stylelint-config-standard"
    supports_fix = True

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["--formatter", "json", "--allow-empty-input"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        if options.fix:
            args.append("--fix")
        if options.files:
            args.extend(str(path) for path in options.files)
        else:
            args.append(f"{target_dir}/**/*.{{css,scss,sass,less}}")
        return Command(executable="stylelint", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if exit_code in _STYLELINT_FATAL_CODES:
                raise ToolOutputError(f"stylelint error (exit {exit_code}): {excerpt(stderr)}")
            return []
        findings: list[Finding] = []
        for file_result in iter_dicts(load_json(self.name, stdout)):
            source = optional_str(file_result.get("source")) or "unknown"
            for warning in iter_dicts(file_result.get("warnings")):
                rule = optional_str(warning.get("rule"))
                findings.append(
                    Finding(
                        file=source,
                        line=optional_int(warning.get("line")) or 0,
                        col=optional_int(warning.get("column")),
                        tag=classify_stylelint_rule(rule),
                        rule=rule or "unknown",
                        severity=Severity.ERROR if warning.get("severity") == "error" else Severity.WARNING,
                        message=optional_str(warning.get("text")) or "",
                    ),
                )
        return findings


# stderr fragments knip prints when the target is not a package it can analyse
_KNIP_NO_PROJECT_MARKERS: Final[tuple[str, ...]] = ("Unable to find", "no such file")


def _named(item: object) -> str:
    if isinstance(item, Mapping):
        return optional_str(item.get("name")) or "unknown"
    return str(item)


class KnipAdapter(ToolAdapter):
    """Report unused files, exports and dependencies with knip.

    knip needs a ``package.json`` at the target root, so it only runs when
    requested by name.
    """

    name = "knip"
    extensions = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})
    install_hint = "npx knip (runs via npx, no global install needed)"
    opt_in = True
    executable = "npx"

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del config_path, options
        return Command(executable="npx", args=["knip", "--reporter", "json", "--no-progress"], working_dir=target_dir)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        if not stdout.strip():
            if any(marker in stderr for marker in _KNIP_NO_PROJECT_MARKERS):
                return []
            if exit_code >= 2 and stderr.strip():
                raise ToolOutputError(f"knip error (exit {exit_code}): {excerpt(stderr)}")
            return []
        payload = as_mapping(load_json(self.name, stdout))
        findings = [
            Finding(
                file=str(path),
                tag=Tag.DEAD_CODE,
                rule="knip/unused-file",
                message="Unused file: not imported or referenced by any other module",
            )
            for path in payload.get("files") or ()
        ]
        for item in iter_dicts(payload.get("exports")):
            symbol = optional_str(item.get("name")) or optional_str(item.get("symbol")) or "unknown"
            findings.append(
                Finding(
                    file=optional_str(item.get("file")) or optional_str(item.get("path")) or "unknown",
                    line=optional_int(item.get("line")) or optional_int(item.get("row")) or 0,
                    col=optional_int(item.get("col")),
                    tag=Tag.DEAD_CODE,
                    rule="knip/unused-export",
                    message=f"Unused export: {symbol}",
                ),
            )
        for key, rule, label in (
            ("dependencies", "knip/unused-dependency", "Unused dependency"),
            ("unlisted", "knip/unlisted-dependency", "Unlisted dependency"),
        ):
            findings.extend(
                Finding(file="package.json", tag=Tag.DEAD_CODE, rule=rule, message=f"{label}: {_named(item)}")
                for item in payload.get(key) or ()
            )
        return findings


__all__ = [
    "EslintAdapter",
    "KnipAdapter",
    "StylelintAdapter",
    "TscAdapter",
    "classify_eslint_rule",
    "classify_stylelint_rule",
]
