"""Ancestry propagation.

Once a live atom has been matched to a shadow, the shadow's accumulated
knowledge flows forward: the family chain grows by one generation, the
historical vibration score is inherited as-is, connections the new atom
still has are kept as strong connections, and anything that looks like
degradation is flagged.
"""

import logging
from collections.abc import Sequence

from atomlineage.foundation.types.config import AncestryConfig
from atomlineage.lineage.models import (
    Ancestry,
    AncestryWarning,
    Atom,
    Shadow,
    WarningType,
)
from atomlineage.lineage.tracker import detect_evolution_type

logger = logging.getLogger(__name__)


def detect_ruptures(shadow: Shadow, atom: Atom) -> AncestryWarning | None:
    """Warn about inherited connections the new atom no longer has."""
    current = {c.target for c in atom.connections}
    lost = [c.target for c in shadow.inheritance.connections if c.target not in current]
    if not lost:
        return None
    return AncestryWarning(
        type=WarningType.RUPTURED_LINEAGE,
        message=f"{len(lost)} inherited connection(s) no longer present",
        details={"count": len(lost), "targets": lost},
    )


def detect_degradation(
    shadow: Shadow,
    atom: Atom,
    complexity_drop_threshold: int = 3,
) -> list[AncestryWarning]:
    """Warn about complexity loss and flow-type changes."""
    old, new = shadow.dna, atom.dna
    if old is None or new is None:
        return []

    warnings: list[AncestryWarning] = []
    if old.complexity_score > new.complexity_score + complexity_drop_threshold:
        warnings.append(
            AncestryWarning(
                type=WarningType.COMPLEXITY_DROP,
                message=(
                    f"Complexity dropped from {old.complexity_score} "
                    f"to {new.complexity_score}"
                ),
                details={"from": old.complexity_score, "to": new.complexity_score},
            )
        )
    if old.flow_type != new.flow_type:
        warnings.append(
            AncestryWarning(
                type=WarningType.FLOW_TYPE_CHANGE,
                message=f"Flow type changed from {old.flow_type} to {new.flow_type}",
                details={"from": old.flow_type, "to": new.flow_type},
            )
        )
    return warnings


def propagate_inheritance(
    shadow: Shadow,
    atom: Atom,
    similarity: float,
    ancestors: Sequence[str] = (),
    config: AncestryConfig | None = None,
) -> Ancestry:
    """Build the ancestry of ``atom`` as the successor of ``shadow``.

    Args:
        shadow: Matched predecessor
        atom: New atom (should carry DNA)
        similarity: DNA similarity of the match
        ancestors: The shadow's own ancestor IDs, nearest first
        config: Ancestry settings

    Returns:
        Ancestry with ``replaced`` set to the shadow's ID
    """
    config = config or AncestryConfig()

    current = {c.target for c in atom.connections}
    strong = tuple(c for c in shadow.inheritance.connections if c.target in current)

    warnings: list[AncestryWarning] = []
    rupture = detect_ruptures(shadow, atom)
    if rupture is not None:
        warnings.append(rupture)
    warnings.extend(detect_degradation(shadow, atom, config.complexity_drop_threshold))

    lineage = (shadow.shadow_id, *(a for a in ancestors if a != shadow.shadow_id))
    evolution = detect_evolution_type(shadow, atom)

    if warnings:
        logger.debug(
            "Ancestry of %s from %s has warnings: %s",
            atom.id,
            shadow.shadow_id,
            ", ".join(w.type.value for w in warnings),
        )

    return Ancestry(
        replaced=shadow.shadow_id,
        lineage=lineage,
        generation=shadow.lineage.generation + 1,
        vibration_score=shadow.inheritance.vibration_score,
        strong_connections=strong,
        warnings=tuple(warnings),
        genesis=False,
        evolution_type=evolution.value,
        similarity=similarity,
    )
