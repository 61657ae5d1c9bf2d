# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from fast_cv.errors import ToolOutputError
from fast_cv.models import Finding, Tag
from fast_cv.tools.base import Command, ToolAdapter, ToolOptions

Parser = Callable[[str, str, int, ToolOptions], list[Finding]]


def parse_colon_lines(stdout: str, stderr: str, exit_code: int, options: ToolOptions) -> list[Finding]:
    """Parse ``file:line:message`` lines into SECURITY findings."""
    del stderr, options
    if exit_code > 1:
        raise ToolOutputError(f"fake tool failed with exit {exit_code}")
    findings: list[Finding] = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        file, lineno, message = line.split(":", 2)
        findings.append(Finding(file=file, line=int(lineno), tag=Tag.SECURITY, rule="fake-rule", message=message))
    return findings


class ShellAdapter(ToolAdapter):
    """Adapter running a POSIX shell snippet instead of a real analyzer."""

    name = "shell"
    extensions = frozenset({".py"})
    install_hint = "true"

    def __init__(
        self,
        name: str,
        script: str,
        *,
        extensions: Sequence[str] = (".py",),
        installed: bool = True,
        parser: Parser = parse_colon_lines,
        pre_fix: Sequence[str] = (),
        executable: str = "sh",
        scratch: bool = False,
        opt_in: bool = False,
        fixes: bool = True,
    ) -> None:
        self.name = name  # type: ignore[misc]
        self.extensions = frozenset(extensions)  # type: ignore[misc]
        self.opt_in = opt_in  # type: ignore[misc]
        self.supports_fix = fixes  # type: ignore[misc]
        self.uses_scratch_dir = scratch  # type: ignore[misc]
        self.script = script
        self.installed = installed
        self.parser = parser
        self.pre_fix = tuple(pre_fix)
        self.shell = executable
        self.seen_options: list[ToolOptions] = []

    def check_installed(self) -> bool:
        return self.installed

    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        self.seen_options.append(options)
        script = self.script.format(scratch=options.scratch_dir, target=target_dir, config=config_path)
        return Command(executable=self.shell, args=["-c", script], working_dir=target_dir)

    def pre_fix_commands(
        self,
        target_dir: Path,
        config_path: Path | None,
        options: ToolOptions,
    ) -> Sequence[Command]:
        del config_path, options
        return tuple(Command(executable="sh", args=["-c", step], working_dir=target_dir) for step in self.pre_fix)

    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        return self.parser(stdout, stderr, exit_code, options)


@pytest.fixture
def shell_adapter() -> type[ShellAdapter]:
    """Return the shell-backed adapter class."""
    return ShellAdapter


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Return a helper that writes ``{relative path: content}`` under ``tmp_path``."""

    def _write(files: Mapping[str, str]) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def isolated_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``HOME`` at an empty directory so user defaults never leak into tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    return home
