"""Shared type definitions."""

from atomlineage.foundation.types.config import (
    AncestryConfig,
    LineageConfig,
    MatchConfig,
    SearchConfig,
    SimilarityWeights,
    StoreConfig,
)

__all__ = [
    "AncestryConfig",
    "LineageConfig",
    "MatchConfig",
    "SearchConfig",
    "SimilarityWeights",
    "StoreConfig",
]
