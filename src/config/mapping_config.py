"""
Mapping Configuration

Loads configuration from config/allfiled.yaml, with environment variable
overrides. Provides a typed model for the mapping graph location, the
Allfiled context and logging.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from infrastructure.graph_reader import BUNDLED_MAPPING_PATH

DEFAULT_ALLFILED_CONTEXT = "+(https://allfiled.com/)"


@dataclass
class MappingConfig:
    """Complete mapping configuration."""
    mapping_path: str = str(BUNDLED_MAPPING_PATH)
    allfiled_context: str = DEFAULT_ALLFILED_CONTEXT
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        """Numeric logging level; unknown names fall back to WARNING."""
        value = logging.getLevelName(self.log_level.upper())
        return value if isinstance(value, int) else logging.WARNING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingConfig":
        """Create config from dictionary (parsed YAML)."""
        mapping_data = data.get("mapping", {}) or {}
        logging_data = data.get("logging", {}) or {}

        return cls(
            mapping_path=str(mapping_data.get("path") or BUNDLED_MAPPING_PATH),
            allfiled_context=mapping_data.get("allfiled_context", DEFAULT_ALLFILED_CONTEXT),
            log_level=logging_data.get("level", "WARNING"),
        )

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "MappingConfig":
        """Load config from YAML file."""
        if path is None:
            path = os.getenv("ALLFILED_CONFIG_PATH", "config/allfiled.yaml")

        config_path = Path(path)
        if not config_path.is_absolute():
            config_path = Path.cwd() / path

        if not config_path.exists():
            # Return default config if file doesn't exist
            return cls()

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "MappingConfig":
        """
        Create config from environment variables.

        Environment variables override YAML config.
        """
        config = cls.from_yaml()

        if os.getenv("ALLFILED_MAPPING_PATH"):
            config.mapping_path = os.getenv("ALLFILED_MAPPING_PATH")

        if os.getenv("ALLFILED_CONTEXT"):
            config.allfiled_context = os.getenv("ALLFILED_CONTEXT")

        if os.getenv("ALLFILED_LOG_LEVEL"):
            config.log_level = os.getenv("ALLFILED_LOG_LEVEL")

        return config


# Global config instance (lazy loaded)
_config: Optional[MappingConfig] = None


def get_mapping_config() -> MappingConfig:
    """Get the global mapping configuration (lazy loaded)."""
    global _config
    if _config is None:
        _config = MappingConfig.from_env()
    return _config


def reload_config(path: Optional[str] = None) -> MappingConfig:
    """Reload configuration from file."""
    global _config
    _config = MappingConfig.from_yaml(path)
    return _config
