"""
Runtime Configuration Module

Provides configuration loading and management for Merkle sum trees.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    SourceConfig,
    LoggingConfig,
    get_default_config,
    set_default_config,
    get_default_config_template,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "SourceConfig",
    "LoggingConfig",
    "get_default_config",
    "set_default_config",
    "get_default_config_template",
]
