# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Definitions for analyzer adapters and the commands they produce."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import PROBE_TIMEOUT_SECONDS
from ..errors import ToolOutputError
from ..models import Finding
from ..process_utils import run_command


_EXCERPT_LIMIT = 500


class Command(BaseModel):
    """External process invocation produced by an adapter."""

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = ()
    working_dir: Path | None = None

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        return value

    @property
    def argv(self) -> tuple[str, ...]:
        """Return the full argument vector including the executable."""
        return (self.executable, *self.args)


class ToolOptions(BaseModel):
    """Per-invocation options threaded through ``build_command`` and ``parse_output``.

    ``scratch_dir`` is created by the executor for adapters that set
    :attr:`ToolAdapter.uses_scratch_dir` and is removed before the result is returned.
    """

    model_config = ConfigDict(frozen=True)

    files: tuple[Path, ...] = Field(default_factory=tuple)
    fix: bool = False
    licenses: bool = False
    scratch_dir: Path | None = None


class ToolAdapter(ABC):
    """Contract implemented by every external analyzer.

    Adapters are stateless: anything scoped to a run travels through
    :class:`ToolOptions` rather than living on the instance.
    """

    name: ClassVar[str]
    extensions: ClassVar[frozenset[str]]
    install_hint: ClassVar[str]
    opt_in: ClassVar[bool] = False
    supports_fix: ClassVar[bool] = False
    uses_scratch_dir: ClassVar[bool] = False
    executable: ClassVar[str | None] = None
    version_args: ClassVar[tuple[str, ...]] = ("--version",)

    @property
    def binary(self) -> str:
        """Return the executable probed by :meth:`check_installed`."""
        return self.executable or self.name

    def is_relevant(self, extensions: Iterable[str]) -> bool:
        """Return ``True`` when any of ``extensions`` is handled by this analyzer."""
        return not self.extensions.isdisjoint(extensions)

    def check_installed(self) -> bool:
        """Return ``True`` when ``<binary> <version_args>`` exits successfully.

        Raises:
            FileNotFoundError: If the executable is not on ``PATH``.
        """

        completed = run_command(
            [self.binary, *self.version_args],
            check=False,
            capture_output=True,
            timeout=PROBE_TIMEOUT_SECONDS,
            discard_stdin=True,
        )
        return completed.returncode == 0

    @abstractmethod
    def build_command(self, target_dir: Path, config_path: Path | None, options: ToolOptions) -> Command:
        """Return the main analyzer invocation.

        Args:
            target_dir: Directory being scanned.
            config_path: Resolved configuration artifact, if any.
            options: File subset, fix/licenses flags and scratch directory.

        Returns:
            Command: Process invocation to execute.
        """

    @abstractmethod
    def parse_output(self, stdout: str, stderr: str, exit_code: int, *, options: ToolOptions) -> list[Finding]:
        """Convert raw analyzer output into findings.

        Args:
            stdout: Captured standard output.
            stderr: Captured standard error.
            exit_code: Process exit status.
            options: Options the command was built with.

        Returns:
            list[Finding]: Findings in analyzer order.

        Raises:
            ToolOutputError: If the output is malformed or signals a fatal analyzer error.
        """

    def pre_fix_commands(
        self,
        target_dir: Path,
        config_path: Path | None,
        options: ToolOptions,
    ) -> Sequence[Command]:
        """Return pure formatting commands to run before the main invocation in fix mode."""
        del target_dir, config_path, options
        return ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def path_arguments(target_dir: Path, options: ToolOptions) -> list[str]:
    """Return the requested file subset, or the whole directory when none was given."""

    if options.files:
        return [str(path) for path in options.files]
    return [str(target_dir)]


def excerpt(text: str, limit: int = _EXCERPT_LIMIT) -> str:
    """Return at most ``limit`` characters of ``text`` for error messages."""

    return text.strip()[:limit]


def load_json(tool: str, stdout: str) -> Any:
    """Decode a JSON document emitted by ``tool``.

    Raises:
        ToolOutputError: If ``stdout`` is not valid JSON.
    """

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise ToolOutputError(f"{tool}: failed to parse JSON output: {excerpt(stdout, 200)}") from exc


def parse_json_lines(stdout: str) -> list[dict[str, Any]]:
    """Decode newline-delimited JSON, skipping lines that are not JSON objects."""

    records: list[dict[str, Any]] = []
    for line in stdout.strip().splitlines():
        try:
            decoded = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, dict):
            records.append(decoded)
    return records


def optional_int(value: object) -> int | None:
    """Return ``value`` as a positive integer or ``None``."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def as_mapping(value: object) -> Mapping[str, Any]:
    """Return ``value`` when it is a mapping, otherwise an empty mapping."""

    return value if isinstance(value, Mapping) else {}


def iter_dicts(value: object) -> Iterator[Mapping[str, Any]]:
    """Yield the mapping entries of a JSON array, ignoring anything else."""

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for entry in value:
            if isinstance(entry, Mapping):
                yield entry


def optional_str(value: object) -> str | None:
    """Return a stripped non-empty string or ``None``."""

    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


__all__ = [
    "Command",
    "ToolAdapter",
    "ToolOptions",
    "as_mapping",
    "excerpt",
    "iter_dicts",
    "load_json",
    "optional_int",
    "optional_str",
    "parse_json_lines",
    "path_arguments",
]
