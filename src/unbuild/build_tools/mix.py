"""Mix (Elixir) build tool.

Cleanup delegates to ``mix clean --deps``. The ElixirLS cache is not touched
by mix, so it is removed separately, but only when the project's .gitignore
covers it; otherwise it may hold data the user wants to keep.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import CommandError, CommandFailedError, ToolUnavailableError
from ..fs import dir_size, is_gitignored
from .base import BuildStatus, ephemeral_dir, status_from_size

if TYPE_CHECKING:
    from ..manager import BuildToolManager

logger = logging.getLogger(__name__)

MANIFEST = "mix.exs"
BUILD_DIR = "_build"
DEPS_DIR = "deps"
ELIXIR_LS_CACHE = ".elixir_ls"
ALIASES: frozenset[str] = frozenset({"mix", "elixir", "ex", "exs"})

VERSION_COMMAND = ["mix", "--version"]
CLEAN_COMMAND = ["mix", "clean", "--deps"]


def mix_is_installed() -> bool:
    """Check whether ``mix --version`` runs successfully."""
    try:
        result = subprocess.run(
            VERSION_COMMAND,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except (subprocess.SubprocessError, OSError):
        return False
    return result.returncode == 0


def register(manager: BuildToolManager, *, probe_only: bool = False) -> None:
    """Register the Mix probe.

    Args:
        manager: Registry to add the probe to.
        probe_only: Skip the check that mix is installed.

    Raises:
        ToolUnavailableError: mix cannot be run and probe_only is False.

    """
    if not probe_only and not mix_is_installed():
        raise ToolUnavailableError("mix is not available")

    manager.register(MixProbe())


class MixProbe:
    """Detects Mix projects by their mix.exs file."""

    name: str = "mix"

    def probe(self, path: Path) -> Mix | None:
        if (path / MANIFEST).is_file():
            return Mix(path)
        return None

    def applies_to(self, name: str) -> bool:
        return name.lower() in ALIASES

    def __repr__(self) -> str:
        return "MixProbe()"


class Mix:
    """A Mix project rooted at a directory holding mix.exs."""

    def __init__(self, path: Path) -> None:
        self.path = path.absolute()

    def _elixir_ls_cache(self) -> Path | None:
        """Return the ElixirLS cache directory if it exists and is gitignored."""
        cache = ephemeral_dir(self.path, ELIXIR_LS_CACHE)
        if cache is None:
            return None
        if not is_gitignored(self.path, cache):
            logger.debug("Skipping directory as not ignored by Git: %s", cache)
            return None
        return cache

    def status(self) -> BuildStatus:
        candidates = [
            ephemeral_dir(self.path, BUILD_DIR),
            ephemeral_dir(self.path, DEPS_DIR),
            self._elixir_ls_cache(),
        ]
        size = sum(dir_size(d) for d in candidates if d is not None)
        return status_from_size(size)

    def clean_project(self, dry_run: bool) -> None:
        if dry_run:
            print(f"{self.path}: {shlex.join(CLEAN_COMMAND)}")
        else:
            self._run(CLEAN_COMMAND)

        cache = self._elixir_ls_cache()
        if cache is None:
            return
        if dry_run:
            print(f"{self.path}: rm -r {cache}")
        else:
            shutil.rmtree(cache)
            logger.info("Removed %s", cache)

    def _run(self, command: list[str]) -> None:
        """Run a command in the project directory with its output discarded."""
        logger.debug("Running %s in %s", shlex.join(command), self.path)
        try:
            result = subprocess.run(
                command,
                cwd=self.path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise CommandError(command, self.path) from e

        if result.returncode != 0:
            raise CommandFailedError(command, self.path, result.returncode)

    def project_name(self) -> str | None:
        # The name lives in mix.exs, which is Elixir code. Asking mix for it
        # would compile the project, so don't try.
        return None

    def __str__(self) -> str:
        return "Mix"

    def __repr__(self) -> str:
        return f"Mix({str(self.path)!r})"
