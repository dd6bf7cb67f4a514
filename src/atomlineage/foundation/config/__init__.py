"""Configuration management for lineage tracking."""

from atomlineage.foundation.config.loader import (
    get_config,
    load_config,
    reset_config,
    save_default_config,
)
from atomlineage.foundation.types.config import LineageConfig

__all__ = [
    "LineageConfig",
    "get_config",
    "load_config",
    "reset_config",
    "save_default_config",
]
