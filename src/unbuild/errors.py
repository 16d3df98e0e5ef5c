"""Exception types raised by build tools and their registration."""

from __future__ import annotations

import shlex
from pathlib import Path


class UnbuildError(Exception):
    """Base class for all errors raised by unbuild."""


class ToolUnavailableError(UnbuildError):
    """A build tool's external toolchain binary cannot be invoked."""


class ProjectNameError(UnbuildError):
    """Project metadata exists but could not be read or parsed."""


class CommandError(UnbuildError):
    """An external command could not be executed."""

    def __init__(self, command: list[str], cwd: Path, message: str | None = None) -> None:
        self.command = command
        self.cwd = cwd
        if message is None:
            message = f"Failed to execute '{self.command_line}' for project at {cwd}"
        super().__init__(message)

    @property
    def command_line(self) -> str:
        """The command as a single shell-quoted string."""
        return shlex.join(self.command)


class CommandFailedError(CommandError):
    """An external command ran but exited with a non-zero status."""

    def __init__(self, command: list[str], cwd: Path, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(
            command,
            cwd,
            f"Unexpected exit code {returncode} for '{shlex.join(command)}' for project at {cwd}",
        )
