"""atomlineage - semantic blame for code atoms.

Tracks the identity of functions across deletions, renames and rewrites
using DNA fingerprints instead of version-control history.
"""

from atomlineage.foundation import (
    LineageConfig,
    LineageError,
    configure_logging,
    load_config,
)
from atomlineage.lineage import (
    Ancestry,
    Atom,
    Shadow,
    ShadowRegistry,
    compare_dna,
    compute_dna,
)

__version__ = "0.1.0"

__all__ = [
    "Ancestry",
    "Atom",
    "LineageConfig",
    "LineageError",
    "Shadow",
    "ShadowRegistry",
    "compare_dna",
    "compute_dna",
    "configure_logging",
    "load_config",
]
