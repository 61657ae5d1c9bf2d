# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters for security and privacy scanners (semgrep, trivy, bearer)."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

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

_BLOCKING_SEVERITIES: Final[frozenset[str]] = frozenset({"CRITICAL", "HIGH"})
_SECRET_MATCH_PREVIEW: Final[int] = 30


def classify_semgrep_metadata(metadata: Mapping[str, Any]) -> Tag:
    """Return the tag for a semgrep result from its rule metadata.

    Rules without a recognised category default to ``SECURITY``.
    """

    category = metadata.get("category") or ""
    impact = metadata.get("impact") or ""
    if category == "security" or impact in {"HIGH", "MEDIUM"}:
        return Tag.SECURITY
    if category == "correctness":
        return Tag.BUG
    return Tag.SECURITY


class SemgrepAdapter(ToolAdapter):
    """Run ``semgrep scan`` with JSON output."""

    name = "semgrep"
    extensions = frozenset({".py", ".js", ".jsx", ".ts", ".tsx", ".go", ".java", ".rb"})
    install_hint = "pipx install semgrep  (or: pip3 install --user semgrep)"

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        args = ["scan", "--json", "--quiet", "--config", str(config_path) if config_path is not None else "auto"]
        args.extend(path_arguments(target_dir, options))
        return Command(executable="semgrep", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean or findings, 1 findings with errors, 2+ fatal
        if not stdout.strip():
            if exit_code >= 2:
                raise ToolOutputError(f"semgrep error (exit {exit_code}): {excerpt(stderr)}")
            return []
        payload = as_mapping(load_json(self.name, stdout))
        findings: list[Finding] = []
        for item in iter_dicts(payload.get("results")):
            start = as_mapping(item.get("start"))
            extra = as_mapping(item.get("extra"))
            metadata = as_mapping(extra.get("metadata"))
            findings.append(
                Finding(
                    file=optional_str(item.get("path")) or "unknown",
                    line=optional_int(start.get("line")) or 0,
                    col=optional_int(start.get("col")),
                    tag=classify_semgrep_metadata(metadata),
                    rule=optional_str(item.get("check_id")) or "unknown",
                    severity=Severity.ERROR if extra.get("severity") == "ERROR" else Severity.WARNING,
                    message=(
                        optional_str(extra.get("message")) or optional_str(metadata.get("message")) or "Issue detected"
                    ),
                ),
            )
        return findings


def _blocking(severity: object) -> Severity:
    return Severity.ERROR if severity in _BLOCKING_SEVERITIES else Severity.WARNING


class TrivyAdapter(ToolAdapter):
    """Run ``trivy fs`` over the whole target directory.

    Vulnerabilities map to ``DEPENDENCY``, misconfigurations to ``INFRA``,
    secrets to ``SECRET`` and, when license scanning is enabled, license
    findings to ``LICENSE``. The file subset is ignored because trivy resolves
    dependency manifests relative to the project root.
    """

    name = "trivy"
    extensions = frozenset({".py", ".js", ".ts", ".go", ".java", ".rb", ".php", ".tf", ".yaml", ".yml"})
    install_hint = (
        "curl -sfL https://raw.githubusercontent.com/aquasecurity/trivy/main/contrib/install.sh"
        " | sh -s -- -b ~/.local/bin"
    )

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        scanners = "vuln,misconfig,secret,license" if options.licenses else "vuln,misconfig,secret"
        args = ["fs", "--scanners", scanners, "--format", "json", "--quiet"]
        if config_path is not None:
            args.extend(["--config", str(config_path)])
        args.append(str(target_dir))
        return Command(executable="trivy", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        if not stdout.strip():
            if exit_code > 0 and stderr.strip():
                raise ToolOutputError(f"trivy error: {excerpt(stderr)}")
            return []
        payload = as_mapping(load_json(self.name, stdout))
        findings: list[Finding] = []
        for entry in iter_dicts(payload.get("Results")):
            target = optional_str(entry.get("Target")) or "unknown"
            findings.extend(_vulnerabilities(target, entry))
            findings.extend(_misconfigurations(target, entry))
            findings.extend(_secrets(target, entry))
            if options.licenses:
                findings.extend(_licenses(target, entry))
        return findings


def _vulnerabilities(target: str, entry: Mapping[str, Any]) -> list[Finding]:
    findings: list[Finding] = []
    for vuln in iter_dicts(entry.get("Vulnerabilities")):
        vuln_id = optional_str(vuln.get("VulnerabilityID")) or "unknown-cve"
        fixed = optional_str(vuln.get("FixedVersion"))
        remedy = f"Upgrade to {fixed}" if fixed else "No fix available"
        message = (
            f"Vulnerable dependency: {vuln.get('PkgName')}@{vuln.get('InstalledVersion')} has {vuln_id}"
            f" ({vuln.get('Severity')}). {remedy}."
        )
        title = optional_str(vuln.get("Title"))
        if title:
            message = f"{message} {title}"
        findings.append(
            Finding(
                file=target,
                tag=Tag.DEPENDENCY,
                rule=vuln_id,
                severity=_blocking(vuln.get("Severity")),
                message=message,
            ),
        )
    return findings


def _misconfigurations(target: str, entry: Mapping[str, Any]) -> list[Finding]:
    return [
        Finding(
            file=target,
            line=optional_int(as_mapping(misconf.get("CauseMetadata")).get("StartLine")) or 0,
            tag=Tag.INFRA,
            rule=optional_str(misconf.get("ID")) or "unknown-misconfig",
            severity=_blocking(misconf.get("Severity")),
            message=optional_str(misconf.get("Title")) or optional_str(misconf.get("Message")) or "Misconfiguration",
        )
        for misconf in iter_dicts(entry.get("Misconfigurations"))
    ]


def _secrets(target: str, entry: Mapping[str, Any]) -> list[Finding]:
    findings: list[Finding] = []
    for secret in iter_dicts(entry.get("Secrets")):
        match = str(secret.get("Match") or "")[:_SECRET_MATCH_PREVIEW]
        findings.append(
            Finding(
                file=target,
                line=optional_int(secret.get("StartLine")) or 0,
                tag=Tag.SECRET,
                rule=optional_str(secret.get("RuleID")) or "secret",
                severity=Severity.ERROR,
                message=f"{secret.get('Category')}: {secret.get('Title')} (match: {match}...)",
            ),
        )
    return findings


def _licenses(target: str, entry: Mapping[str, Any]) -> list[Finding]:
    findings: list[Finding] = []
    for license_entry in iter_dicts(entry.get("Licenses")):
        name = optional_str(license_entry.get("Name")) or "unknown"
        package = optional_str(license_entry.get("PkgName"))
        subject = f"Package {package}" if package else "File"
        category = optional_str(license_entry.get("Category")) or "unknown"
        findings.append(
            Finding(
                file=optional_str(license_entry.get("FilePath")) or target,
                tag=Tag.LICENSE,
                rule=f"license/{name}",
                severity=_blocking(license_entry.get("Severity")),
                message=f"{subject} uses license {name} (category: {category})",
            ),
        )
    return findings


class BearerAdapter(ToolAdapter):
    """Run ``bearer scan`` for privacy and data-flow findings.

    Each location of a bearer warning becomes its own ``PRIVACY`` finding;
    ``critical`` and ``high`` severities are reported as errors.
    """

    name = "bearer"
    extensions = frozenset({".py", ".js", ".jsx", ".ts", ".tsx", ".go", ".java", ".rb", ".php"})
    install_hint = (
        "curl -sfL https://raw.githubusercontent.com/Bearer/bearer/main/contrib/install.sh"
        " | sh -s -- -b ~/.local/bin"
    )
    version_args = ("version",)

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        del options
        args = ["scan", "--format", "json", "--quiet"]
        if config_path is not None:
            args.extend(["--config-file", str(config_path)])
        args.append(str(target_dir))
        return Command(executable="bearer", args=args)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        del options
        # 0 clean, 1 findings, 2+ fatal
        if not stdout.strip():
            if exit_code >= 2:
                raise ToolOutputError(f"bearer error (exit {exit_code}): {excerpt(stderr)}")
            return []
        payload = as_mapping(load_json(self.name, stdout))
        warnings = payload.get("warnings") or payload.get("findings")
        findings: list[Finding] = []
        for item in iter_dicts(warnings):
            locations = list(iter_dicts(item.get("locations"))) or [item]
            severity = Severity.ERROR if item.get("severity") in {"critical", "high"} else Severity.WARNING
            rule = optional_str(item.get("rule_id")) or optional_str(item.get("id")) or "unknown"
            message = (
                optional_str(item.get("title"))
                or optional_str(item.get("description"))
                or optional_str(item.get("message"))
                or "Privacy/data-flow issue detected"
            )
            for location in locations:
                start = as_mapping(location.get("start"))
                findings.append(
                    Finding(
                        file=(
                            optional_str(location.get("filename"))
                            or optional_str(location.get("file"))
                            or optional_str(item.get("filename"))
                            or "unknown"
                        ),
                        line=optional_int(location.get("line_number")) or optional_int(start.get("line")) or 0,
                        col=optional_int(location.get("column_number")) or optional_int(start.get("column")),
                        tag=Tag.PRIVACY,
                        rule=rule,
                        severity=severity,
                        message=message,
                    ),
                )
        return findings


__all__ = ["BearerAdapter", "SemgrepAdapter", "TrivyAdapter", "classify_semgrep_metadata"]
