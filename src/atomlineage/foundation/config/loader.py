"""Lineage configuration management.

Loads configuration from .atomlineage/config.yaml with sensible defaults.
All settings can be overridden via environment variables (ATOMLINEAGE_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .atomlineage/config.yaml (project-local)
3. ~/.atomlineage/config.yaml (user-global)
4. Built-in defaults

Thread Safety:
    Uses threading.Lock for thread-safe lazy initialization.
"""


import logging
import os
import threading
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import yaml

from atomlineage.foundation.types.config import (
    AncestryConfig,
    LineageConfig,
    MatchConfig,
    SearchConfig,
    SimilarityWeights,
    StoreConfig,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "ATOMLINEAGE_"

# Section name → config class, used for env parsing and dict conversion
_SECTIONS: dict[str, type] = {
    "weights": SimilarityWeights,
    "matching": MatchConfig,
    "search": SearchConfig,
    "ancestry": AncestryConfig,
    "store": StoreConfig,
}

# Global config instance (lazy-loaded, thread-safe)
_config: LineageConfig | None = None
_config_lock = threading.Lock()


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _coerce(value: str) -> bool | int | float | str:
    """Coerce an environment string to the most specific scalar type."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env_overrides(config_dict: dict, environ: dict[str, str] | None = None) -> dict:
    """Apply environment variable overrides.

    Environment variables follow pattern: ATOMLINEAGE_SECTION_KEY, where KEY
    may itself contain underscores.

    Examples:
        ATOMLINEAGE_SEARCH_LIMIT=10
        ATOMLINEAGE_MATCHING_GUARD_THRESHOLD=0.9
        ATOMLINEAGE_STORE_CACHE_SIZE=500
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        path_str = key[len(ENV_PREFIX):].lower()
        for section, section_cls in _SECTIONS.items():
            if not path_str.startswith(section + "_"):
                continue
            field_name = path_str[len(section) + 1:]
            known = {f.name for f in fields(section_cls)}
            if field_name in known:
                config_dict.setdefault(section, {})[field_name] = _coerce(value)
            else:
                logger.debug("Ignoring unknown config override %s", key)
            break

    return config_dict


def _dict_to_config(data: dict) -> LineageConfig:
    """Convert a dict to LineageConfig."""
    sections: dict[str, Any] = {}
    for section, section_cls in _SECTIONS.items():
        known = {f.name for f in fields(section_cls)}
        values = {k: v for k, v in data.get(section, {}).items() if k in known}
        sections[section] = section_cls(**values)
    return LineageConfig(**sections)


def load_config(path: str | Path | None = None) -> LineageConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (ATOMLINEAGE_*)
    2. Explicit path if provided
    3. .atomlineage/config.yaml (project-local)
    4. ~/.atomlineage/config.yaml (user-global)
    5. Built-in defaults

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged LineageConfig instance.
    """
    global _config

    # Defaults come from the dataclass definitions
    config_dict: dict[str, Any] = asdict(LineageConfig())

    config_paths = []
    if path:
        config_paths.append(Path(path))
    config_paths.extend([
        Path(".atomlineage/config.yaml"),
        Path.home() / ".atomlineage" / "config.yaml",
    ])

    for config_path in config_paths:
        if config_path.exists():
            try:
                with open(config_path, encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Skipping unreadable config %s: %s", config_path, e)
                continue
            _deep_update(config_dict, file_config)
            break  # Use first found config

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> LineageConfig:
    """Get the current configuration, loading if needed.

    Thread-safe with double-check locking.
    """
    global _config

    # Fast path: already initialized
    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    with _config_lock:
        _config = None


def save_default_config(path: str | Path) -> Path:
    """Write the built-in defaults to a YAML file.

    Args:
        path: Destination file (parent directories are created).

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(LineageConfig()), f, default_flow_style=False, sort_keys=False)
    return path
