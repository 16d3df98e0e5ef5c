"""Build tool implementations with auto-discovery."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING

from ..errors import ToolUnavailableError
from .base import Built, BuildStatus, BuildTool, BuildToolProbe, Clean

if TYPE_CHECKING:
    from ..config import UnbuildConfig
    from ..manager import BuildToolManager

__all__ = [
    "BuildStatus",
    "BuildTool",
    "BuildToolProbe",
    "Built",
    "Clean",
    "register_build_tools",
]

logger = logging.getLogger(__name__)


def register_build_tools(
    manager: BuildToolManager,
    config: UnbuildConfig,
    *,
    probe_only: bool | None = None,
) -> BuildToolManager:
    """Register the probes of all enabled build tools.

    Scans this package for modules that define a ``register`` function and
    calls each in alphabetical order. A tool whose external binary is missing
    is left out with a warning; the others still register.

    Args:
        manager: Registry to populate.
        config: Configuration with disabled tools and the probe-only default.
        probe_only: Overrides ``config.probe_only`` when given.

    Returns:
        The populated manager.

    """
    if probe_only is None:
        probe_only = config.probe_only

    package = importlib.import_module(__package__ or "unbuild.build_tools")

    for _finder, module_name, _is_pkg in pkgutil.iter_modules(package.__path__):
        if module_name == "base":
            continue

        if module_name in config.tools_disabled:
            logger.info("Build tool disabled by config: %s", module_name)
            continue

        mod = importlib.import_module(f"{package.__name__}.{module_name}")
        register = getattr(mod, "register", None)
        if not callable(register):
            continue

        try:
            register(manager, probe_only=probe_only)
        except ToolUnavailableError as e:
            logger.warning("Skipping %s: %s", module_name, e)
            continue

        logger.debug("Loaded build tool: %s", module_name)

    return manager
