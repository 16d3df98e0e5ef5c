"""Registry of build tool probes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .build_tools.base import BuildTool, BuildToolProbe

logger = logging.getLogger(__name__)


class BuildToolManager:
    """Ordered, append-only collection of build tool probes.

    Several probes may recognize the same directory (a project can mix build
    systems); all of them are reported, in registration order.
    """

    def __init__(self) -> None:
        self._probes: list[BuildToolProbe] = []

    def register(self, probe: BuildToolProbe) -> None:
        """Append a probe. Duplicates are kept."""
        self._probes.append(probe)
        logger.debug("Registered probe: %s", probe.name)

    @property
    def probes(self) -> tuple[BuildToolProbe, ...]:
        """Registered probes in registration order."""
        return tuple(self._probes)

    def probe(self, path: Path) -> list[BuildTool]:
        """Detect every build tool that recognizes a directory.

        Args:
            path: Candidate project directory.

        Returns:
            One build tool per matching probe, in registration order.

        """
        tools: list[BuildTool] = []
        for probe in self._probes:
            if (tool := probe.probe(path)) is not None:
                tools.append(tool)
        return tools

    def select(self, names: Iterable[str]) -> BuildToolManager:
        """Create a registry limited to probes matching any of the given tool names.

        Args:
            names: Tool names or aliases, compared case-insensitively.

        Returns:
            A new manager holding the matching probes in their original order.

        """
        names = list(names)
        selected = BuildToolManager()
        for probe in self._probes:
            if any(probe.applies_to(name) for name in names):
                selected.register(probe)
        return selected

    def __iter__(self) -> Iterator[BuildToolProbe]:
        return iter(self.probes)

    def __len__(self) -> int:
        return len(self._probes)
