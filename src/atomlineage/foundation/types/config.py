"""Configuration type definitions - single source of truth for all config classes."""


from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SimilarityWeights:
    """Weights applied by DNA comparison.

    The score is normalized by the sum of weights actually applied, so the
    weights need not sum to 1.0.
    """

    structural: float = 0.4
    """Awarded when structural hashes are equal."""

    pattern: float = 0.3
    """Awarded when pattern hashes are equal."""

    flow_type_partial: float = 0.15
    """Partial credit when pattern hashes differ but flow types match."""

    sequence: float = 0.2
    """Awarded when operation sequences are exactly equal."""

    sequence_length_partial: float = 0.1
    """Partial credit when operation sequences have the same length."""

    semantic: float = 0.1
    """Awarded when semantic fingerprints are equal."""


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """Gating rules for candidate ancestor/descendant pairs."""

    min_similarity: float = 0.6
    """Pairs scoring below this are never linked."""

    guard_threshold: float = 0.8
    """Above this score, pairs differing in both semantic verb and domain are rejected."""


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Defaults for similarity search over the shadow index."""

    min_similarity: float = 0.75
    """Default minimum similarity for find_similar."""

    limit: int = 5
    """Default maximum number of results."""

    best_match_threshold: float = 0.85
    """Threshold used by find_best_match and ancestry enrichment."""


@dataclass(frozen=True, slots=True)
class AncestryConfig:
    """Ancestry propagation and lineage walking."""

    complexity_drop_threshold: int = 3
    """Complexity loss beyond this many points raises a complexity_drop warning."""

    default_complexity_factor: int = 5
    """Complexity factor for vibration scoring when an atom has no DNA."""

    max_lineage_depth: int = 100
    """Ancestor chains longer than this are treated as corrupted."""


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Shadow store layout and caching."""

    base_path: str = ".atomlineage"
    """Directory holding the shadow store (relative to the project root)."""

    cache_size: int = 100
    """Maximum shadows held by the point-lookup cache."""


@dataclass(frozen=True, slots=True)
class LineageConfig:
    """Root configuration for lineage tracking."""

    weights: SimilarityWeights = field(default_factory=SimilarityWeights)
    """DNA comparison weights."""

    matching: MatchConfig = field(default_factory=MatchConfig)
    """Match validation rules."""

    search: SearchConfig = field(default_factory=SearchConfig)
    """Similarity search defaults."""

    ancestry: AncestryConfig = field(default_factory=AncestryConfig)
    """Ancestry propagation settings."""

    store: StoreConfig = field(default_factory=StoreConfig)
    """Shadow store settings."""
