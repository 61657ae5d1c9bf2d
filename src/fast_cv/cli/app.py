# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing ``fast-cv scan`` and ``fast-cv tools``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import build_config
from ..console import detect_tty
from ..constants import PROJECT_NAME
from ..errors import ConfigError, ScanError
from ..logging import configure_logging, fail, info, ok, warn
from ..pipeline import ExitStatus, run_scan
from ..tools import ToolRegistry, default_registry

app = typer.Typer(
    name=PROJECT_NAME,
    help="Fast code validation: run linters and security scanners, emit one Markdown or SARIF report.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PROJECT_NAME} {__version__}")
        raise typer.Exit(code=0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Fast code validation."""
    del version


@app.command("scan")
def scan_command(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory to scan.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-tool timeout in seconds.",
    ),
    tools: str | None = typer.Option(
        None,
        "--tools",
        help="Comma-separated tools to run (default: all applicable).",
    ),
    exclude: str | None = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Comma-separated ignore patterns (gitignore syntax).",
    ),
    only: str | None = typer.Option(
        None,
        "--only",
        help="Comma-separated paths or globs; restrict scanning and findings to them.",
    ),
    fix: bool | None = typer.Option(
        None,
        "--fix/--no-fix",
        help="Let tools auto-fix issues; semantic fixes need a project or user config.",
    ),
    licenses: bool | None = typer.Option(
        None,
        "--licenses/--no-licenses",
        help="Include license scanning in trivy.",
    ),
    auto_install: bool | None = typer.Option(
        None,
        "--auto-install/--no-auto-install",
        help="Try each missing tool's install command before running.",
    ),
    output_format: str | None = typer.Option(
        None,
        "--format",
        help="Report format: markdown or sarif.",
    ),
    max_lines: int | None = typer.Option(
        None,
        "--max-lines",
        help="Flag files longer than this many lines (0 disables).",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        help="Number of tools to run concurrently.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show diagnostics on stderr.",
    ),
    emoji: bool = typer.Option(
        True,
        "--emoji/--no-emoji",
        help="Toggle emoji in CLI output.",
    ),
    color: bool | None = typer.Option(
        None,
        "--color/--no-color",
        help="Force colour on or off (default: detect).",
    ),
) -> None:
    """Scan DIRECTORY and write the report to stdout."""

    use_color = detect_tty() if color is None else color
    overrides: dict[str, Any] = {
        "timeout": timeout,
        "tools": tools,
        "exclude": exclude,
        "only": only,
        "fix": fix,
        "licenses": licenses,
        "auto_install": auto_install,
        "output_format": output_format,
        "max_lines": max_lines,
        "jobs": jobs,
        "verbose": verbose or None,
    }

    try:
        config = build_config(directory, overrides)
        configure_logging(verbose=config.verbose, use_color=use_color)
        if config.verbose:
            info(f"Scanning {directory.resolve()}", use_emoji=emoji, use_color=use_color)
        result = run_scan(directory, config)
    except (ScanError, ConfigError) as exc:
        fail(str(exc), use_emoji=emoji, use_color=use_color)
        raise typer.Exit(code=ExitStatus.PRECHECK_FAILED) from exc

    if result.exit_status is ExitStatus.PRECHECK_FAILED:
        fail("Required tools are not installed.", use_emoji=emoji, use_color=use_color)
        if result.message:
            typer.echo(result.message, err=True)
        raise typer.Exit(code=int(result.exit_status))

    typer.echo(result.report, nl=False)
    if config.verbose:
        for warning in result.warnings:
            warn(warning, use_emoji=emoji, use_color=use_color)
        if result.exit_status is ExitStatus.CLEAN:
            ok("No issues found.", use_emoji=emoji, use_color=use_color)
        else:
            info(f"{result.finding_count} finding(s) reported.", use_emoji=emoji, use_color=use_color)
    raise typer.Exit(code=int(result.exit_status))


def build_tools_table(registry: ToolRegistry) -> Table:
    """Return a table describing every adapter in ``registry``."""

    table = Table(title="Available tools", show_lines=False)
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Extensions")
    table.add_column("Opt-in", justify="center")
    table.add_column("Install")
    for adapter in registry.tools():
        table.add_row(
            adapter.name,
            ", ".join(sorted(adapter.extensions)),
            "yes" if adapter.opt_in else "",
            adapter.install_hint,
        )
    return table


@app.command("tools")
def tools_command() -> None:
    """List the analyzers fast-cv can run."""

    Console().print(build_tools_table(default_registry()))


__all__ = ["app", "build_tools_table"]
