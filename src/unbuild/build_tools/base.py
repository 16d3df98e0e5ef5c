"""Base protocols, status types and shared helpers for build tools."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..fs import dir_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Clean:
    """Nothing to free: no ephemeral directory holds any data."""

    def __str__(self) -> str:
        return "clean"


@dataclass(frozen=True)
class Built:
    """Ephemeral directories exist and hold freeable_bytes of data."""

    freeable_bytes: int

    def __post_init__(self) -> None:
        if self.freeable_bytes < 0:
            raise ValueError(f"freeable_bytes must not be negative: {self.freeable_bytes}")


BuildStatus = Clean | Built


def status_from_size(size: int) -> BuildStatus:
    """Classify a total ephemeral size as Clean (zero) or Built."""
    if size == 0:
        return Clean()
    return Built(freeable_bytes=size)


@runtime_checkable
class BuildTool(Protocol):
    """A detected project of one build ecosystem.

    Owns one project directory for its lifetime. ``str(tool)`` gives the
    human-readable ecosystem name.
    """

    path: Path

    def status(self) -> BuildStatus:
        """Measure how much space the project's ephemeral directories use.

        Always recomputed from the filesystem. Never mutates anything and
        never starts external processes.

        """
        ...

    def clean_project(self, dry_run: bool) -> None:
        """Remove the project's ephemeral directories.

        Args:
            dry_run: If True, only print what would be done.

        Raises:
            CommandError: An external clean command failed.
            OSError: Removing a directory failed.

        """
        ...

    def project_name(self) -> str | None:
        """Extract the project name from its metadata.

        Returns:
            The name, or None if this ecosystem does not try to determine it.

        Raises:
            ProjectNameError: The metadata could not be read or parsed.

        """
        ...


@runtime_checkable
class BuildToolProbe(Protocol):
    """Stateless detector for one build ecosystem."""

    name: str

    def probe(self, path: Path) -> BuildTool | None:
        """Return a build tool for path if its marker file exists, else None."""
        ...

    def applies_to(self, name: str) -> bool:
        """Check if a user-supplied tool name is one of this ecosystem's aliases."""
        ...


def ephemeral_dir(path: Path, name: str) -> Path | None:
    """Return path/name if it is a directory and not a symlink, else None."""
    directory = path / name
    if directory.is_symlink():
        logger.debug("Skipping symlinked directory: %s", directory)
        return None
    if not directory.is_dir():
        return None
    return directory


def status_from_dirs(path: Path, dirs: Iterable[str]) -> BuildStatus:
    """Compute the status of a project from a fixed set of ephemeral directories.

    Args:
        path: Project root.
        dirs: Directory names relative to the project root.

    Returns:
        Clean if all directories are absent or empty, otherwise Built with
        their summed size.

    """
    size = 0
    for name in dirs:
        if (directory := ephemeral_dir(path, name)) is not None:
            size += dir_size(directory)
    return status_from_size(size)


def remove_dirs(path: Path, dirs: Iterable[str], dry_run: bool) -> None:
    """Remove a fixed set of ephemeral directories from a project.

    Directories that do not exist and symlinks are skipped. On a dry run
    the removal is printed as ``<project>: rm -r <dir>`` instead of performed.

    Args:
        path: Project root.
        dirs: Directory names relative to the project root.
        dry_run: If True, print instead of removing.

    Raises:
        OSError: A directory could not be removed.

    """
    for name in dirs:
        directory = ephemeral_dir(path, name)
        if directory is None:
            continue

        if dry_run:
            print(f"{path}: rm -r {directory}")
        else:
            shutil.rmtree(directory)
            logger.info("Removed %s", directory)
