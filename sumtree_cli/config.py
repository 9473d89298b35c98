"""
Module 06 - CLI Configuration

Locates and loads the runtime configuration for the CLI.
An explicit --config path wins, then the default locations, then
environment variables alone; environment variables always override
file settings.
"""

from __future__ import annotations

from pathlib import Path

from core.config.runtime import RuntimeConfig


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "sumtree.yaml",
        Path.cwd() / ".sumtree.yaml",
        Path.home() / ".config" / "sumtree" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given and does not exist
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for default_path in default_config_paths():
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()
