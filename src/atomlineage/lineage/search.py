"""Similarity search over the shadow store.

Two phases: a cheap prune over index entries (status and flow type only,
no shadow bodies loaded), then a full DNA comparison plus match
validation for every surviving candidate.

Flow type is determined by the operation set and the side-effect and
return outputs, all of which feed both the structural hash and the
operation sequence. A flow-type mismatch therefore loses both terms and
scores at most 0.5 (pattern, sequence length, semantic) with default
weights, below the 0.6 floor of ``validate_match``. The prune only drops
shadows that could never be accepted, whatever the search threshold.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from atomlineage.foundation.types.config import LineageConfig
from atomlineage.lineage.dna import compare_dna
from atomlineage.lineage.index import ShadowIndex
from atomlineage.lineage.models import Atom, FlowType, Shadow, ShadowStatus
from atomlineage.lineage.validation import validate_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimilarShadow:
    """A candidate ancestor and its DNA similarity to the query atom."""

    shadow: Shadow
    similarity: float

    def to_dict(self) -> dict:
        return {"shadow": self.shadow.to_dict(), "similarity": self.similarity}


async def find_similar_shadows(
    atom: Atom,
    index: ShadowIndex,
    get_shadow: Callable[[str], Awaitable[Shadow | None]],
    *,
    min_similarity: float | None = None,
    limit: int | None = None,
    include_replaced: bool = False,
    config: LineageConfig | None = None,
) -> list[SimilarShadow]:
    """Rank shadows by similarity to ``atom``.

    Args:
        atom: Live atom (must carry DNA with a known flow type)
        index: Index to generate candidates from
        get_shadow: Loader for full shadow bodies
        min_similarity: Keep candidates at or above this score
        limit: Maximum number of results
        include_replaced: Also consider shadows already replaced
        config: Weights and thresholds

    Returns:
        Matches sorted by descending similarity
    """
    config = config or LineageConfig()
    min_similarity = config.search.min_similarity if min_similarity is None else min_similarity
    limit = config.search.limit if limit is None else limit

    dna = atom.dna
    if dna is None or dna.flow_type == FlowType.UNKNOWN.value:
        return []

    candidates = [
        entry
        for entry in await index.get_entries()
        if (include_replaced or entry.status is not ShadowStatus.REPLACED)
        and entry.flow_type == dna.flow_type
    ]

    matches: list[SimilarShadow] = []
    for entry in candidates:
        shadow = await get_shadow(entry.shadow_id)
        if shadow is None or shadow.dna is None:
            continue

        similarity = compare_dna(dna, shadow.dna, config.weights)
        if similarity < min_similarity:
            continue

        result = validate_match(atom, shadow, config.matching, config.weights)
        if not result.valid:
            logger.debug("Candidate %s rejected for %s: %s", shadow.shadow_id, atom.id, result.reason)
            continue

        matches.append(SimilarShadow(shadow=shadow, similarity=similarity))

    matches.sort(key=lambda m: m.similarity, reverse=True)
    return matches[:limit]


async def find_best_match(
    atom: Atom,
    index: ShadowIndex,
    get_shadow: Callable[[str], Awaitable[Shadow | None]],
    *,
    min_similarity: float | None = None,
    config: LineageConfig | None = None,
) -> SimilarShadow | None:
    """Single best unreplaced match at the best-match threshold, or None."""
    config = config or LineageConfig()
    if min_similarity is None:
        min_similarity = config.search.best_match_threshold
    matches = await find_similar_shadows(
        atom,
        index,
        get_shadow,
        min_similarity=min_similarity,
        limit=1,
        config=config,
    )
    return matches[0] if matches else None
