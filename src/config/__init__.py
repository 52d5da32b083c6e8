"""Configuration package for the Allfiled mapping."""

from .mapping_config import MappingConfig, get_mapping_config, reload_config

__all__ = ["MappingConfig", "get_mapping_config", "reload_config"]
