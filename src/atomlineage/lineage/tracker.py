"""Death registration and lineage bookkeeping.

Pure functions that turn a dying atom into a shadow, score how much an
atom mattered (vibration), classify how a descendant evolved from its
ancestor, and walk parent links back to the root of a family tree.
"""

import logging
import math
from collections.abc import Awaitable, Callable, Iterable

from atomlineage.foundation.errors import (
    InvalidAtomError,
    LineageCycleError,
    LineageDepthError,
)
from atomlineage.foundation.types.config import AncestryConfig
from atomlineage.lineage.models import (
    DNA,
    Atom,
    DataFlowSummary,
    DNAFingerprint,
    EvolutionType,
    Shadow,
    ShadowDeath,
    ShadowInheritance,
    ShadowLineage,
    ShadowMetadata,
    ShadowStatus,
    as_utc,
    generate_shadow_id,
    utc_now,
)

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000


def calculate_vibration_score(atom: Atom, default_complexity_factor: int = 5) -> float:
    """Historical significance of an atom in [0, 1].

    ``avg(weight) * connection_count * complexity / 100``, clamped. The
    complexity factor falls back to ``default_complexity_factor`` when the
    atom has not been fingerprinted yet.
    """
    connections = atom.connections
    if not connections:
        return 0.0
    avg_weight = sum(c.weight for c in connections) / len(connections)
    factor = atom.dna.complexity_score if atom.dna else default_complexity_factor
    return min(max(avg_weight * len(connections) * factor / 100, 0.0), 1.0)


def register_death(
    atom: Atom,
    *,
    reason: str = "unknown",
    replacement_id: str | None = None,
    commits: Iterable[str] = (),
    risk: float = 0.0,
    dna: DNA | None = None,
    config: AncestryConfig | None = None,
) -> Shadow:
    """Build the shadow of a dying atom.

    Args:
        atom: The atom being deleted
        reason: Why it died
        replacement_id: ID of the atom replacing it, if known
        commits: Commits involved in the deletion
        risk: Risk the deletion introduced
        dna: Fingerprint to record (defaults to ``atom.dna``)
        config: Ancestry settings (vibration fallback factor)

    Returns:
        A new shadow; ``status`` is replaced iff ``replacement_id`` is given

    Raises:
        InvalidAtomError: If atom is None or has no id
    """
    if atom is None:
        raise InvalidAtomError("atom is required")
    if not atom.id:
        raise InvalidAtomError("atom has no id")

    config = config or AncestryConfig()
    dna = dna if dna is not None else atom.dna

    now = utc_now()
    born_at = as_utc(atom.created_at) if atom.created_at else now
    elapsed_ms = (now - born_at).total_seconds() * 1000
    lifespan_days = max(math.floor(elapsed_ms / MS_PER_DAY), 0)

    ancestry = atom.ancestry
    return Shadow(
        shadow_id=generate_shadow_id(),
        original_id=atom.id,
        status=ShadowStatus.REPLACED if replacement_id else ShadowStatus.DELETED,
        replaced_by=replacement_id,
        born_at=born_at,
        died_at=now,
        lifespan_days=lifespan_days,
        dna=dna,
        metadata=ShadowMetadata(
            name=atom.name,
            file_path=atom.file_path,
            line_number=atom.line_number,
            is_exported=atom.is_exported,
            data_flow=DataFlowSummary.of(atom.data_flow),
            semantic=atom.semantic,
        ),
        lineage=ShadowLineage(
            parent_shadow_id=ancestry.replaced if ancestry else None,
            child_shadow_ids=(),
            evolution_type=ancestry.evolution_type if ancestry else None,
            generation=ancestry.generation if ancestry else 0,
        ),
        inheritance=ShadowInheritance(
            connections=atom.connections,
            connection_count=len(atom.connections),
            vibration_score=calculate_vibration_score(atom, config.default_complexity_factor),
            dna_fingerprint=(
                DNAFingerprint(
                    structural_hash=dna.structural_hash,
                    pattern_hash=dna.pattern_hash,
                    flow_type=dna.flow_type,
                )
                if dna
                else None
            ),
        ),
        death=ShadowDeath(
            reason=reason,
            commits_involved=tuple(commits),
            risk_introduced=risk,
            replacement_id=replacement_id,
        ),
    )


def detect_evolution_type(shadow: Shadow | DNA | None, new_atom: Atom) -> EvolutionType:
    """Classify how ``new_atom`` evolved from the shadow it replaces.

    Missing DNA on either side yields ``refactor``.
    """
    old = shadow.dna if isinstance(shadow, Shadow) else shadow
    new = new_atom.dna
    if old is None or new is None:
        return EvolutionType.REFACTOR

    if old.structural_hash == new.structural_hash:
        return EvolutionType.RENAMED
    if old.pattern_hash == new.pattern_hash:
        if new.complexity_score > old.complexity_score:
            return EvolutionType.EXPANDED
        if new.complexity_score < old.complexity_score:
            return EvolutionType.SHRINKED
        return EvolutionType.REFACTOR
    if old.semantic_fingerprint != new.semantic_fingerprint:
        return EvolutionType.DOMAIN_CHANGE
    return EvolutionType.REIMPLEMENTED


async def reconstruct_lineage(
    shadow_id: str,
    get_shadow: Callable[[str], Awaitable[Shadow | None]],
    max_depth: int = 100,
) -> list[Shadow]:
    """Walk parent links back to the root.

    Returns the chain root-first, ending with ``shadow_id`` itself. A
    missing hop ends the walk; an empty list means the start is missing.

    Raises:
        LineageCycleError: If a parent link revisits a shadow
        LineageDepthError: If the chain exceeds ``max_depth`` hops
    """
    chain: list[Shadow] = []
    visited: list[str] = []
    current_id: str | None = shadow_id

    while current_id:
        if current_id in visited:
            cycle = [*visited[visited.index(current_id):], current_id]
            logger.error("Lineage cycle at %s: %s", shadow_id, " → ".join(cycle))
            raise LineageCycleError(cycle)
        if len(visited) >= max_depth:
            logger.error("Lineage of %s exceeds %d hops", shadow_id, max_depth)
            raise LineageDepthError(shadow_id, max_depth)

        shadow = await get_shadow(current_id)
        if shadow is None:
            break
        visited.append(current_id)
        chain.append(shadow)
        current_id = shadow.lineage.parent_shadow_id

    chain.reverse()
    return chain


def compare_lineage(atom_a: Atom, atom_b: Atom) -> float:
    """Jaccard similarity of two atoms' ancestor sets."""
    lineage_a = set(atom_a.ancestry.lineage) if atom_a.ancestry else set()
    lineage_b = set(atom_b.ancestry.lineage) if atom_b.ancestry else set()
    if not lineage_a and not lineage_b:
        return 1.0
    if not lineage_a or not lineage_b:
        return 0.0
    return len(lineage_a & lineage_b) / len(lineage_a | lineage_b)
