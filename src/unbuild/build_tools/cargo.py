"""Cargo (Rust) build tool.

Cargo projects keep all build output in ``target/``. ``cargo clean`` with no
options deletes exactly that directory, so removing it directly has the same
effect and also works when Cargo is not installed.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import ProjectNameError
from .base import BuildStatus, remove_dirs, status_from_dirs

if TYPE_CHECKING:
    from ..manager import BuildToolManager

logger = logging.getLogger(__name__)

MANIFEST = "Cargo.toml"
EPHEMERAL_DIRS: tuple[str, ...] = ("target",)
ALIASES: frozenset[str] = frozenset({"cargo", "rust", "rs"})


def register(manager: BuildToolManager, *, probe_only: bool = False) -> None:
    """Register the Cargo probe.

    No external binary is needed, so this never fails.
    """
    manager.register(CargoProbe())


class CargoProbe:
    """Detects Cargo projects by their Cargo.toml manifest."""

    name: str = "cargo"

    def probe(self, path: Path) -> Cargo | None:
        if (path / MANIFEST).is_file():
            return Cargo(path)
        return None

    def applies_to(self, name: str) -> bool:
        return name.lower() in ALIASES

    def __repr__(self) -> str:
        return "CargoProbe()"


class Cargo:
    """A Cargo project rooted at a directory holding Cargo.toml."""

    def __init__(self, path: Path) -> None:
        self.path = path.absolute()

    def status(self) -> BuildStatus:
        return status_from_dirs(self.path, EPHEMERAL_DIRS)

    def clean_project(self, dry_run: bool) -> None:
        remove_dirs(self.path, EPHEMERAL_DIRS, dry_run)

    def project_name(self) -> str | None:
        return read_package_name(self.path / MANIFEST)

    def __str__(self) -> str:
        return "Cargo"

    def __repr__(self) -> str:
        return f"Cargo({str(self.path)!r})"


def read_package_name(manifest: Path) -> str:
    """Read ``package.name`` from a Cargo manifest.

    Args:
        manifest: Path to Cargo.toml.

    Returns:
        The package name.

    Raises:
        ProjectNameError: The file is missing, unreadable, not valid TOML,
            or has no string ``package.name``.

    """
    try:
        with manifest.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ProjectNameError(f"Cannot read {manifest}: {e}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ProjectNameError(f"Invalid TOML in {manifest}: {e}") from e

    package = data.get("package")
    if not isinstance(package, dict):
        raise ProjectNameError(f"No [package] table in {manifest}")

    name = package.get("name")
    if not isinstance(name, str):
        raise ProjectNameError(f"No package name in {manifest}")

    return name
