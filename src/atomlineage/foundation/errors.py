"""Exception hierarchy for lineage tracking.

Only contract violations and corrupted lineage are raised. Metadata
quality problems are reported as values by the validator, and a rejected
match is a negative result rather than an error.
"""

from pathlib import Path


class LineageError(Exception):
    """Base exception for lineage tracking errors."""


class InvalidAtomError(LineageError):
    """Raised when an operation is handed something that is not a trackable atom."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid atom: {reason}")


class LineageConsistencyError(LineageError):
    """Raised when parent/child links between shadows are corrupted.

    Unrecoverable: the shadow store needs repair before lineage queries
    can be trusted again.
    """


class LineageCycleError(LineageConsistencyError):
    """Raised when walking parent links revisits a shadow."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        cycle_str = " → ".join(cycle)
        super().__init__(f"Lineage cycle detected: {cycle_str}")


class LineageDepthError(LineageConsistencyError):
    """Raised when an ancestor chain exceeds the configured depth cap."""

    def __init__(self, shadow_id: str, max_depth: int) -> None:
        self.shadow_id = shadow_id
        self.max_depth = max_depth
        super().__init__(
            f"Lineage too deep for '{shadow_id}': exceeded {max_depth} generations"
        )


class ShadowStorageError(LineageError):
    """Raised when a persisted shadow or index document cannot be decoded."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Corrupt lineage document {path}: {detail}")
