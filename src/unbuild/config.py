"""Configuration management for unbuild."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML scalar as a boolean.

    Args:
        value: Raw value (bool, int, str or None).
        default: Returned when value is None.

    Returns:
        Parsed boolean. Unrecognized strings are False.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a nested mapping from the config, empty if absent."""
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Expected a mapping for '{key}', got: {section!r}")
    return section


@dataclass
class UnbuildConfig:
    """Configuration for unbuild."""

    # Register probes without checking that external toolchains are installed
    probe_only: bool = False

    # Build tool module names to leave unregistered, e.g. ["mix"]
    tools_disabled: list[str] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / ".config/unbuild/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> UnbuildConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration, or defaults if the file does not exist.

        Raises:
            ValueError: The file is not valid YAML or holds invalid settings.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top of {config_path}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> UnbuildConfig:
        """Create config from dictionary."""
        config = cls()

        config.probe_only = parse_bool(data.get("probe_only"), config.probe_only)

        tools = _section(data, "tools")
        if "disabled" in tools:
            disabled = tools["disabled"] or []
            if isinstance(disabled, str):
                disabled = [disabled]
            if not isinstance(disabled, list):
                raise ValueError(f"tools.disabled must be a list of names, got: {disabled!r}")
            config.tools_disabled = [str(name).lower() for name in disabled]

        # Logging
        logging_cfg = _section(data, "logging")
        if "level" in logging_cfg:
            level = str(logging_cfg["level"]).upper()
            if level not in LOG_LEVELS:
                raise ValueError(f"Unknown log level: {logging_cfg['level']}")
            config.log_level = level
        if logging_cfg.get("file"):
            config.log_file = Path(os.path.expanduser(str(logging_cfg["file"])))

        return config

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for log_level."""
        return getattr(logging, self.log_level)

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        logging_data: dict[str, str] = {"level": self.log_level}
        if self.log_file is not None:
            logging_data["file"] = str(self.log_file)

        data = {
            "probe_only": self.probe_only,
            "tools": {"disabled": list(self.tools_disabled)},
            "logging": logging_data,
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
