"""Command line entry point for unbuild."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.filesize import decimal
from rich.logging import RichHandler
from rich.table import Table

from .build_tools import Built, BuildTool, register_build_tools
from .config import UnbuildConfig
from .errors import ProjectNameError, UnbuildError
from .manager import BuildToolManager

logger = logging.getLogger("unbuild")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses sys.argv if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="unbuild",
        description="Report on and remove regenerable build artifacts",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--tool",
        "-t",
        action="append",
        dest="tools",
        default=None,
        help="Only consider this build tool (name or alias, repeatable)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    status_parser = subparsers.add_parser("status", help="Show how much space can be freed")
    status_parser.add_argument("paths", nargs="+", type=Path, help="Project directories")

    clean_parser = subparsers.add_parser("clean", help="Remove build artifacts")
    clean_parser.add_argument("paths", nargs="+", type=Path, help="Project directories")
    clean_parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Print what would be done without changing anything",
    )

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def setup_logging(config: UnbuildConfig, *, verbose: bool = False) -> logging.Logger:
    """Set up the unbuild logger.

    Console output goes to stderr through Rich so that stdout only carries
    command output. A file handler is added when a log file is configured.

    Returns:
        Configured logger instance.

    """
    level = logging.DEBUG if verbose else config.log_level_value
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates when main() runs repeatedly
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def build_manager(
    config: UnbuildConfig,
    *,
    probe_only: bool,
    tools: Sequence[str] | None = None,
) -> BuildToolManager:
    """Create the registry of build tools for one command run.

    Args:
        config: Loaded configuration.
        probe_only: Skip checks for external toolchain binaries.
        tools: Restrict the registry to these tool names or aliases.

    Returns:
        Populated manager.

    """
    manager = register_build_tools(
        BuildToolManager(),
        config,
        probe_only=probe_only or config.probe_only,
    )
    if tools:
        manager = manager.select(tools)
    return manager


def _project_dirs(paths: Sequence[Path], console: Console) -> tuple[list[Path], bool]:
    """Split paths into existing directories and report the rest.

    Returns:
        The directories and whether any path was rejected.

    """
    dirs: list[Path] = []
    rejected = False
    for path in paths:
        if path.is_dir():
            dirs.append(path.absolute())
        else:
            console.print(f"[red]Not a directory: {path}[/red]")
            rejected = True
    return dirs, rejected


def _describe_name(tool: BuildTool) -> str:
    """Render a tool's project name for display."""
    try:
        name = tool.project_name()
    except ProjectNameError as e:
        logger.warning("Cannot determine project name for %s: %s", tool.path, e)
        return "?"
    return name if name is not None else "-"


def cmd_status(config: UnbuildConfig, args: argparse.Namespace) -> int:
    """Execute status command.

    Args:
        config: Unbuild configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()
    manager = build_manager(config, probe_only=True, tools=args.tools)
    dirs, rejected = _project_dirs(args.paths, console)

    table = Table(title="Build status")
    table.add_column("Directory", style="dim")
    table.add_column("Tool", style="cyan")
    table.add_column("Project")
    table.add_column("Freeable", justify="right")

    total = 0
    failed = False
    for directory in dirs:
        tools = manager.probe(directory)
        if not tools:
            logger.info("No build tool detected in %s", directory)
            continue

        for tool in tools:
            try:
                status = tool.status()
            except OSError as e:
                logger.error("Cannot compute status of %s: %s", directory, e)
                failed = True
                continue

            if isinstance(status, Built):
                total += status.freeable_bytes
                freeable = f"[yellow]{decimal(status.freeable_bytes)}[/yellow]"
            else:
                freeable = "[green]clean[/green]"

            table.add_row(str(directory), str(tool), _describe_name(tool), freeable)

    if table.row_count:
        table.caption = f"Total freeable: {decimal(total)}"
        console.print(table)
    else:
        console.print("[green]No build tools detected[/green]")

    return 1 if rejected or failed else 0


def cmd_clean(config: UnbuildConfig, args: argparse.Namespace) -> int:
    """Execute clean command.

    A failure in one project does not stop the others.

    Args:
        config: Unbuild configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()
    manager = build_manager(config, probe_only=args.dry_run, tools=args.tools)
    dirs, rejected = _project_dirs(args.paths, console)

    failed = False
    for directory in dirs:
        for tool in manager.probe(directory):
            try:
                tool.clean_project(args.dry_run)
            except (UnbuildError, OSError) as e:
                logger.error("%s cleanup failed for %s: %s", tool, directory, e)
                failed = True
                continue
            if not args.dry_run:
                logger.info("Cleaned %s project at %s", tool, directory)

    return 1 if rejected or failed else 0


def cmd_config(config: UnbuildConfig, args: argparse.Namespace) -> int:
    """Execute config command.

    Args:
        config: Unbuild configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if args.init:
        config_path = args.config or UnbuildConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            return 1
        config.save(config_path)
        console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    if args.show:
        manager = build_manager(config, probe_only=True)

        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Probe only", str(config.probe_only))
        table.add_row("Disabled tools", ", ".join(config.tools_disabled) or "-")
        table.add_row("Available tools", ", ".join(p.name for p in manager) or "-")
        table.add_row("Log file", str(config.log_file) if config.log_file else "-")
        table.add_row("Log level", config.log_level)

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    try:
        config = UnbuildConfig.load(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config, verbose=args.verbose)

    if args.command == "status":
        return cmd_status(config, args)
    elif args.command == "clean":
        return cmd_clean(config, args)
    elif args.command == "config":
        return cmd_config(config, args)
    else:
        print("Use one of: status, clean, config", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
