"""Foundation utilities - generic helpers with no lineage knowledge.

Provides:
- Hashing (compute_string_hash, compute_short_hash)
- Serialization (atomic_write_json, read_json)
"""

from atomlineage.foundation.utils.hashing import compute_short_hash, compute_string_hash
from atomlineage.foundation.utils.serialization import atomic_write_json, read_json

__all__ = [
    "atomic_write_json",
    "compute_short_hash",
    "compute_string_hash",
    "read_json",
]
