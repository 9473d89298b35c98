"""
Module 05 - Sum Tree Settings

Central configuration for tree construction, entry ingestion and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFunction, get_hash_function
from core.merkle.build import check_depth

load_dotenv()


ENV_PREFIX = "SUMTREE_"


@dataclass
class TreeConfig:
    """Configuration for tree construction."""
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    # Depth used for incremental trees when the caller gives none
    default_depth: int = 20

    def __post_init__(self):
        self.hash_algorithm = self.hash_algorithm.lower()
        # Fail on unknown algorithms at load time, not at first use
        get_hash_function(self.hash_algorithm)
        check_depth(self.default_depth)


@dataclass
class SourceConfig:
    """Configuration for CSV entry ingestion."""
    delimiter: str = ","
    username_column: str = "username"
    balance_column: str = "balance"


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Settings for building trees from entry files.

    Sources, lowest precedence first: dataclass defaults, a YAML file,
    SUMTREE_* environment variables (a .env file is read at import).
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Collect SUMTREE_* variables into a nested override dict.

        No other code path reads the environment.

        Supported variables:
        - SUMTREE_HASH_ALGORITHM: Hash function name (sha256, blake2b)
        - SUMTREE_DEFAULT_DEPTH: Depth for incremental trees
        - SUMTREE_CSV_DELIMITER: CSV field delimiter
        - SUMTREE_LOG_LEVEL: Log level
        - SUMTREE_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}DEFAULT_DEPTH"):
            overrides.setdefault("tree", {})["default_depth"] = int(os.getenv(f"{ENV_PREFIX}DEFAULT_DEPTH", "20"))

        if os.getenv(f"{ENV_PREFIX}CSV_DELIMITER"):
            overrides.setdefault("source", {})["delimiter"] = os.getenv(f"{ENV_PREFIX}CSV_DELIMITER")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Defaults overlaid with SUMTREE_* variables; no file involved."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Read settings from YAML; an empty file gives the defaults."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Build from a {tree, source, logging, extra} mapping."""
        tree_data = data.get("tree", {})
        source_data = data.get("source", {})
        logging_data = data.get("logging", {})

        return cls(
            tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
            source=SourceConfig(**source_data) if source_data else SourceConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Copy of this config with SUMTREE_* variables applied on top.

        Returns self unchanged when no variable is set.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for section in ("tree", "source", "logging"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        # Re-run validation on the overridden tree settings
        new_config.tree = TreeConfig(**vars(new_config.tree))
        return new_config

    def hash_function(self) -> HashFunction:
        """Resolve the configured hash function."""
        return get_hash_function(self.tree.hash_algorithm)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, the inverse of from_dict."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
                "default_depth": self.tree.default_depth,
            },
            "source": {
                "delimiter": self.source.delimiter,
                "username_column": self.source.username_column,
                "balance_column": self.source.balance_column,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


def get_default_config_template() -> str:
    """YAML written by `sumtree config --init`."""
    return """tree:
  hash_algorithm: sha256
  default_depth: 20
source:
  delimiter: ","
  username_column: username
  balance_column: balance
logging:
  level: INFO
  file: null
"""


# Process-wide settings, created lazily from the environment
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Return the process-wide config, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Replace the process-wide config."""
    global _default_config
    _default_config = config
