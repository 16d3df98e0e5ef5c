"""Filesystem queries shared by all build tools."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

GITIGNORE = ".gitignore"


def dir_size(path: Path) -> int:
    """Compute the total size of all regular files below a directory.

    Symlinks are not followed. Entries that vanish or cannot be read while
    walking are skipped.

    Args:
        path: Directory to measure.

    Returns:
        Size in bytes, 0 if the directory does not exist or is empty.

    """
    if not path.is_dir():
        return 0

    total = 0
    try:
        for item in path.rglob("*"):
            try:
                info = item.lstat()
            except OSError:
                logger.debug("Cannot stat, skipping: %s", item)
                continue
            if stat.S_ISREG(info.st_mode):
                total += info.st_size
    except PermissionError:
        logger.debug("Permission denied walking: %s", path)

    return total


def _find_worktree_root(path: Path) -> Path | None:
    """Return the closest ancestor of path (inclusive) that holds a .git entry."""
    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _ignore_files(project_path: Path) -> list[Path]:
    """List the .gitignore files that apply to a project, outermost first."""
    root = _find_worktree_root(project_path)
    if root is None:
        directories = [project_path]
    else:
        relative = project_path.relative_to(root)
        directories = [root]
        current = root
        for part in relative.parts:
            current = current / part
            directories.append(current)

    return [d / GITIGNORE for d in directories if (d / GITIGNORE).is_file()]


def _load_spec(ignore_file: Path) -> pathspec.GitIgnoreSpec | None:
    try:
        lines = ignore_file.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        logger.debug("Cannot read ignore file, skipping: %s", ignore_file)
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def is_gitignored(project_path: Path, path: Path) -> bool:
    """Check whether a path is matched by the project's .gitignore rules.

    Rules come from ``project_path/.gitignore`` and, inside a git work tree,
    from every .gitignore between the work-tree root and the project. Each
    file's patterns are relative to the directory holding it.

    Args:
        project_path: Root directory of the project.
        path: Path to test, expected to be below project_path.

    Returns:
        True if the path is ignored. Files closer to the project override
        outer ones, so a deeper negation such as ``!.elixir_ls/`` wins.

    """
    project_path = project_path.absolute()
    path = path.absolute()

    ignored = False
    for ignore_file in _ignore_files(project_path):
        base = ignore_file.parent
        try:
            relative = path.relative_to(base).as_posix()
        except ValueError:
            continue
        if path.is_dir():
            relative += "/"

        spec = _load_spec(ignore_file)
        if spec is None:
            continue

        verdict = spec.check_file(relative).include
        if verdict is not None:
            ignored = verdict

    return ignored
