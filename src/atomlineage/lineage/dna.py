"""DNA fingerprinting for atoms.

A DNA is derived purely from an atom's data-flow and semantic analysis.
Names are erased before hashing so that renaming a parameter never
changes structural identity, while the ordered transformation tags
distinguish "read → transform → write" from "write → transform → read".
"""

import json
import logging
import math
from dataclasses import dataclass, field

from atomlineage.foundation.types.config import SimilarityWeights
from atomlineage.foundation.utils.hashing import compute_short_hash
from atomlineage.lineage.models import DNA, Atom, DataFlow, FlowType, SemanticInfo

logger = logging.getLogger(__name__)

STRUCTURAL_HASH_LENGTH = 16
PATTERN_HASH_LENGTH = 12
DNA_ID_LENGTH = 16

# Hash value used for every hash of a DNA derived without data flow
SENTINEL_HASH = "no-dataflow"

PATTERN_SEPARATOR = "→"

READ_OPERATIONS = frozenset({"read", "fetch"})
WRITE_OPERATIONS = frozenset({"write", "persist", "save", "store"})


def compute_dna(atom: Atom) -> DNA:
    """Compute the DNA fingerprint of an atom.

    Atoms without data flow (config files, trivial re-exports) get a
    sentinel DNA: still trackable, just with minimal fidelity.

    Args:
        atom: Atom to fingerprint

    Returns:
        The atom's DNA
    """
    data_flow = atom.data_flow
    if data_flow is None:
        logger.debug("Atom %s has no data flow, using sentinel DNA", atom.id)
        return sentinel_dna(atom.semantic)

    structural_hash = compute_structural_hash(data_flow)
    pattern_hash = compute_pattern_hash(data_flow)
    semantic_fingerprint = compute_semantic_fingerprint(atom.semantic)

    return DNA(
        id=compute_dna_id(structural_hash, pattern_hash, semantic_fingerprint),
        structural_hash=structural_hash,
        pattern_hash=pattern_hash,
        flow_type=classify_flow_type(data_flow).value,
        operation_sequence=extract_operation_sequence(data_flow),
        complexity_score=compute_complexity(data_flow),
        input_count=len(data_flow.inputs),
        output_count=len(data_flow.outputs),
        transformation_count=len(data_flow.transformations),
        semantic_fingerprint=semantic_fingerprint,
    )


def sentinel_dna(semantic: SemanticInfo | None = None) -> DNA:
    """Minimal-fidelity DNA for atoms that have no data flow."""
    return DNA(
        id=SENTINEL_HASH,
        structural_hash=SENTINEL_HASH,
        pattern_hash=SENTINEL_HASH,
        flow_type=FlowType.UNKNOWN.value,
        operation_sequence=(),
        complexity_score=1,
        semantic_fingerprint=compute_semantic_fingerprint(semantic),
    )


def compute_dna_id(structural_hash: str, pattern_hash: str, semantic_fingerprint: str) -> str:
    """DNA ID: a pure function of the two hashes and the semantic fingerprint."""
    return compute_short_hash(
        f"{structural_hash}:{pattern_hash}:{semantic_fingerprint}", DNA_ID_LENGTH
    )


def compute_structural_hash(data_flow: DataFlow) -> str:
    """Hash the name-erased shape of a data flow."""
    shape = {
        "inputs": [
            {"type": i.type, "usages": sorted(set(i.usages))} for i in data_flow.inputs
        ],
        "transformations": [
            {"operation": t.operation, "arity": t.arity} for t in data_flow.transformations
        ],
        "outputs": [
            {"type": o.type, "side_effect": o.side_effect} for o in data_flow.outputs
        ],
    }
    return compute_short_hash(json.dumps(shape, sort_keys=True), STRUCTURAL_HASH_LENGTH)


def compute_pattern_hash(data_flow: DataFlow) -> str:
    """Hash the ordered transformation operations."""
    pattern = PATTERN_SEPARATOR.join(t.operation for t in data_flow.transformations)
    return compute_short_hash(pattern, PATTERN_HASH_LENGTH)


def classify_flow_type(data_flow: DataFlow) -> FlowType:
    """Classify the shape of work by presence tests over operations and outputs."""
    operations = {t.operation for t in data_flow.transformations}
    has_read = bool(operations & READ_OPERATIONS)
    has_transform = bool(operations - READ_OPERATIONS - WRITE_OPERATIONS)
    has_persist = any(o.side_effect for o in data_flow.outputs)
    has_return = any(o.is_return for o in data_flow.outputs)

    if has_read and has_transform and has_persist and has_return:
        return FlowType.READ_TRANSFORM_PERSIST_RETURN
    if has_read and has_transform and has_return:
        return FlowType.READ_TRANSFORM_RETURN
    if has_read and has_persist:
        return FlowType.READ_PERSIST
    if has_transform and has_return:
        return FlowType.TRANSFORM_RETURN
    if has_read and has_return:
        return FlowType.READ_RETURN
    if has_persist and not has_return:
        return FlowType.SIDE_EFFECT_ONLY
    return FlowType.UNKNOWN


def extract_operation_sequence(data_flow: DataFlow) -> tuple[str, ...]:
    """Ordered operation tags: receive, each transformation, then emit/return per output."""
    sequence: list[str] = []
    if data_flow.inputs:
        sequence.append("receive")
    sequence.extend(t.operation for t in data_flow.transformations)
    for output in data_flow.outputs:
        if output.side_effect:
            sequence.append("emit")
        elif output.is_return:
            sequence.append("return")
    return tuple(sequence)


def compute_complexity(data_flow: DataFlow) -> int:
    """Complexity score in [1, 10]."""
    score = (
        1
        + 0.5 * len(data_flow.inputs)
        + 0.8 * len(data_flow.transformations)
        + 0.5 * len(data_flow.outputs)
        + (2 if any(o.side_effect for o in data_flow.outputs) else 0)
    )
    # Half-up rounding: 2.5 scores 3
    return math.floor(min(max(score, 1), 10) + 0.5)


def compute_semantic_fingerprint(semantic: SemanticInfo | None) -> str:
    """``verb:domain:entity``, or ``unknown`` without semantic analysis."""
    if semantic is None:
        return "unknown"
    return ":".join(
        part or "unknown" for part in (semantic.verb, semantic.domain, semantic.entity)
    )


def compare_dna(
    a: DNA | None,
    b: DNA | None,
    weights: SimilarityWeights | None = None,
) -> float:
    """Weighted similarity of two DNAs in [0, 1].

    Symmetric; a fully populated DNA compared with itself scores 1.0.
    Either side missing scores 0.
    """
    if a is None or b is None:
        return 0.0
    weights = weights or SimilarityWeights()

    score = 0.0
    applied = 0.0

    applied += weights.structural
    if a.structural_hash == b.structural_hash:
        score += weights.structural

    applied += weights.pattern
    if a.pattern_hash == b.pattern_hash:
        score += weights.pattern
    elif a.flow_type == b.flow_type:
        score += weights.flow_type_partial

    applied += weights.sequence
    if a.operation_sequence == b.operation_sequence:
        score += weights.sequence
    elif len(a.operation_sequence) == len(b.operation_sequence):
        score += weights.sequence_length_partial

    applied += weights.semantic
    if a.semantic_fingerprint == b.semantic_fingerprint:
        score += weights.semantic

    if applied <= 0:
        return 0.0
    return score / applied


@dataclass(frozen=True, slots=True)
class DNAValidation:
    """Outcome of validate_dna."""

    valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)


def validate_dna(dna: DNA | None) -> DNAValidation:
    """Check a DNA is usable for lineage matching."""
    if dna is None:
        return DNAValidation(valid=False, errors=("DNA is missing",))

    errors: list[str] = []
    if not dna.id:
        errors.append("Missing DNA id")
    if not dna.structural_hash:
        errors.append("Missing structural hash")
    if not dna.pattern_hash:
        errors.append("Missing pattern hash")
    if dna.flow_type == FlowType.UNKNOWN.value:
        errors.append("Unknown flow type")
    if not 1 <= dna.complexity_score <= 10:
        errors.append(f"Complexity score out of range: {dna.complexity_score}")

    return DNAValidation(valid=not errors, errors=tuple(errors))
