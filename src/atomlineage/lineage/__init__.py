"""Atom lineage tracking.

Recognize a deleted atom's successor from structural and behavioral
fingerprints alone, and carry its accumulated knowledge forward.

Example:
    >>> from atomlineage.lineage import Atom, ShadowRegistry
    >>> registry = ShadowRegistry(Path("/project/.atomlineage"))
    >>>
    >>> # An atom is deleted
    >>> shadow = await registry.create_shadow(old_atom, reason="refactor")
    >>>
    >>> # A new atom appears
    >>> ancestry = await registry.enrich_with_ancestry(new_atom)
    >>> print(ancestry.generation, ancestry.replaced)
"""

from atomlineage.lineage.ancestry import (
    detect_degradation,
    detect_ruptures,
    propagate_inheritance,
)
from atomlineage.lineage.cache import ShadowCache
from atomlineage.lineage.dna import (
    SENTINEL_HASH,
    DNAValidation,
    classify_flow_type,
    compare_dna,
    compute_dna,
    validate_dna,
)
from atomlineage.lineage.index import ShadowIndex
from atomlineage.lineage.models import (
    DNA,
    Ancestry,
    AncestryWarning,
    Atom,
    Connection,
    DataFlow,
    DataFlowInput,
    DataFlowOutput,
    DNAFingerprint,
    EvolutionType,
    FlowType,
    IndexEntry,
    SemanticInfo,
    Shadow,
    ShadowStatus,
    Transformation,
    WarningType,
)
from atomlineage.lineage.registry import ShadowRegistry
from atomlineage.lineage.search import SimilarShadow, find_best_match, find_similar_shadows
from atomlineage.lineage.storage import ShadowStorage
from atomlineage.lineage.tracker import (
    calculate_vibration_score,
    compare_lineage,
    detect_evolution_type,
    reconstruct_lineage,
    register_death,
)
from atomlineage.lineage.validation import (
    LineageValidation,
    MatchResult,
    validate_for_lineage,
    validate_match,
)

__all__ = [
    # Models
    "Ancestry",
    "AncestryWarning",
    "Atom",
    "Connection",
    "DataFlow",
    "DataFlowInput",
    "DataFlowOutput",
    "DNA",
    "DNAFingerprint",
    "EvolutionType",
    "FlowType",
    "IndexEntry",
    "SemanticInfo",
    "Shadow",
    "ShadowStatus",
    "Transformation",
    "WarningType",
    # Fingerprinting
    "SENTINEL_HASH",
    "DNAValidation",
    "classify_flow_type",
    "compare_dna",
    "compute_dna",
    "validate_dna",
    # Validation
    "LineageValidation",
    "MatchResult",
    "validate_for_lineage",
    "validate_match",
    # Store
    "ShadowCache",
    "ShadowIndex",
    "ShadowRegistry",
    "ShadowStorage",
    # Search
    "SimilarShadow",
    "find_best_match",
    "find_similar_shadows",
    # Lineage
    "calculate_vibration_score",
    "compare_lineage",
    "detect_evolution_type",
    "reconstruct_lineage",
    "register_death",
    # Ancestry
    "detect_degradation",
    "detect_ruptures",
    "propagate_inheritance",
]
