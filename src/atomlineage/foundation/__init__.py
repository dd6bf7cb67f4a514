"""Foundation domain - base types, config, errors and logging.

Nothing here depends on the lineage domain. Everything else imports from here.
"""

from atomlineage.foundation.config import (
    LineageConfig,
    get_config,
    load_config,
    reset_config,
    save_default_config,
)
from atomlineage.foundation.errors import (
    InvalidAtomError,
    LineageConsistencyError,
    LineageCycleError,
    LineageDepthError,
    LineageError,
    ShadowStorageError,
)
from atomlineage.foundation.logging import configure_logging

__all__ = [
    # Config
    "LineageConfig",
    "get_config",
    "load_config",
    "reset_config",
    "save_default_config",
    # Errors
    "InvalidAtomError",
    "LineageConsistencyError",
    "LineageCycleError",
    "LineageDepthError",
    "LineageError",
    "ShadowStorageError",
    # Logging
    "configure_logging",
]
