# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered catalog of analyzer adapters."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from ..errors import UnknownToolError
from .base import ToolAdapter


class ToolRegistry(Mapping[str, ToolAdapter]):
    """Read-only mapping of adapter names to adapters in registration order.

    Registration order is the declared execution order.
    """

    def __init__(self, adapters: Iterable[ToolAdapter] = ()) -> None:
        """Initialise the registry, registering ``adapters`` in order."""

        self._tools: dict[str, ToolAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: ToolAdapter) -> None:
        """Register ``adapter`` enforcing uniqueness by name.

        Args:
            adapter: Adapter to append to the catalog.

        Raises:
            ValueError: If an adapter with the same name is already registered.
        """

        if adapter.name in self._tools:
            raise ValueError(f"Tool '{adapter.name}' already registered")
        self._tools[adapter.name] = adapter

    def try_get(self, name: str) -> ToolAdapter | None:
        """Return the adapter named ``name`` when registered, otherwise ``None``."""

        return self._tools.get(name)

    def tools(self) -> tuple[ToolAdapter, ...]:
        """Return all adapters in execution order."""

        return tuple(self._tools.values())

    def select(self, extensions: Iterable[str], requested: Sequence[str] = ()) -> list[ToolAdapter]:
        """Return the adapters applicable to a scan, in catalog order.

        An adapter is applicable when it handles one of ``extensions``. Opt-in
        adapters are only selected when named in ``requested``; a non-empty
        ``requested`` list restricts the selection to those names.

        Args:
            extensions: File extensions observed by the scanner.
            requested: Explicit analyzer names, lower-case.

        Returns:
            list[ToolAdapter]: Selected adapters.

        Raises:
            UnknownToolError: If ``requested`` names an adapter that is not registered.
        """

        observed = frozenset(extensions)
        wanted = {name.lower() for name in requested}
        unknown = sorted(wanted.difference(self._tools))
        if unknown:
            raise UnknownToolError(unknown, list(self._tools))
        selected: list[ToolAdapter] = []
        for adapter in self._tools.values():
            if not adapter.is_relevant(observed):
                continue
            if wanted and adapter.name not in wanted:
                continue
            if adapter.opt_in and adapter.name not in wanted:
                continue
            selected.append(adapter)
        return selected

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __getitem__(self, name: str) -> ToolAdapter:
        return self._tools[name]


__all__ = ["ToolRegistry"]
