"""Metadata-quality and match validation.

Two gates guard the lineage graph:

1. ``validate_for_lineage`` grades an atom's metadata before it is
   fingerprinted or buried. Problems are reported, never raised: callers
   log them and continue.
2. ``validate_match`` decides whether a live atom may be linked to a
   shadow. Rejection is a negative result, not an error.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from atomlineage.foundation.types.config import MatchConfig, SimilarityWeights
from atomlineage.lineage.dna import compare_dna, validate_dna
from atomlineage.lineage.models import (
    DNA,
    Atom,
    DataFlow,
    DataFlowSummary,
    SemanticInfo,
    Shadow,
    first_key,
)

logger = logging.getLogger(__name__)

RECOGNIZED_VERBS = frozenset(
    {"get", "set", "update", "delete", "validate", "process", "handle", "create", "fetch"}
)
VALIDATION_OPERATIONS = frozenset({"validation", "check", "verify"})
READ_OPERATIONS = frozenset({"read", "fetch"})

ConfidenceLevel = Literal["high", "medium", "low"]


@dataclass(frozen=True, slots=True)
class LineageMetadata:
    """Trimmed metadata extracted from an atom that passed validation."""

    id: str
    name: str
    file_path: str | None
    line_number: int | None
    is_exported: bool
    semantic: SemanticInfo | None
    data_flow: DataFlowSummary
    dna_id: str | None
    flow_type: str | None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "is_exported": self.is_exported,
            "semantic": self.semantic.to_dict() if self.semantic else None,
            "data_flow": self.data_flow.to_dict(),
            "dna_id": self.dna_id,
            "flow_type": self.flow_type,
        }


@dataclass(frozen=True, slots=True)
class LineageValidation:
    """Outcome of validate_for_lineage."""

    valid: bool
    confidence: ConfidenceLevel
    confidence_score: int
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    metadata: LineageMetadata | None = None

    def summary(self) -> str:
        """One-line description for logs."""
        return (
            f"valid={self.valid} confidence={self.confidence} "
            f"errors={len(self.errors)} warnings={len(self.warnings)}"
        )


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of validate_match."""

    valid: bool
    similarity: float
    reason: str


@dataclass(slots=True)
class _Findings:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _as_mapping(atom: Atom | Mapping[str, Any]) -> Mapping[str, Any]:
    return atom.to_dict() if isinstance(atom, Atom) else atom


def _operations(data_flow: Mapping[str, Any] | None) -> set[str]:
    if not data_flow:
        return set()
    transformations = data_flow.get("transformations")
    if not isinstance(transformations, list):
        return set()
    return {
        str(t.get("operation") or t.get("type"))
        for t in transformations
        if isinstance(t, Mapping)
    }


def _has_side_effect_output(data_flow: Mapping[str, Any] | None) -> bool:
    if not data_flow:
        return False
    outputs = data_flow.get("outputs")
    if not isinstance(outputs, list):
        return False
    return any(
        isinstance(o, Mapping)
        and (o.get("type") == "side_effect" or first_key(o, "is_side_effect", "isSideEffect"))
        for o in outputs
    )


def _check_structure(data: Mapping[str, Any], dna: DNA | None, findings: _Findings) -> None:
    if not data.get("id"):
        findings.errors.append("Missing atom id")
    if not data.get("name"):
        findings.errors.append("Missing atom name")

    if dna is not None:
        for error in validate_dna(dna).errors:
            findings.errors.append(f"Invalid DNA: {error}")

    data_flow = first_key(data, "data_flow", "dataFlow")
    if data_flow is None:
        return
    if not isinstance(data_flow, Mapping):
        findings.errors.append("dataFlow must be an object")
        return
    if not isinstance(data_flow.get("inputs"), list):
        findings.errors.append("dataFlow.inputs must be an array")

    outputs = data_flow.get("outputs")
    transformations = data_flow.get("transformations")
    if not outputs and not transformations:
        findings.warnings.append("dataFlow has no outputs or transformations")
    if isinstance(outputs, list):
        for position, output in enumerate(outputs):
            if isinstance(output, Mapping) and not output.get("type"):
                findings.warnings.append(f"Output {position} is missing a type")


def _check_coherence(data: Mapping[str, Any], dna: DNA | None, findings: _Findings) -> None:
    """Cross-validate semantic and DNA claims against the data flow."""
    data_flow = first_key(data, "data_flow", "dataFlow")
    if not isinstance(data_flow, Mapping):
        data_flow = None
    operations = _operations(data_flow)
    semantic = data.get("semantic")
    if not isinstance(semantic, Mapping):
        semantic = {}

    if semantic.get("verb") == "validate" and not operations & VALIDATION_OPERATIONS:
        findings.errors.append(
            "Semantic verb 'validate' but no validation/check/verify transformation"
        )

    if dna is None:
        return
    if "read" in dna.flow_type and not operations & READ_OPERATIONS:
        findings.errors.append(
            f"Flow type '{dna.flow_type}' claims a read but no read/fetch transformation"
        )
    if "persist" in dna.flow_type and not _has_side_effect_output(data_flow):
        findings.errors.append(
            f"Flow type '{dna.flow_type}' claims persistence but no side-effect output"
        )


def _check_semantic(semantic: Mapping[str, Any]) -> list[str]:
    problems: list[str] = []
    verb = semantic.get("verb")
    if not verb:
        problems.append("Semantic analysis is missing a verb")
    elif verb not in RECOGNIZED_VERBS:
        problems.append(f"Unrecognized semantic verb '{verb}'")
    if not first_key(semantic, "operation_type", "operationType"):
        problems.append("Semantic analysis is missing an operationType")
    return problems


def _confidence(score: int) -> ConfidenceLevel:
    if score >= 80:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _extract_metadata(data: Mapping[str, Any], dna: DNA | None) -> LineageMetadata:
    data_flow = first_key(data, "data_flow", "dataFlow")
    semantic = data.get("semantic")
    semantic_info = SemanticInfo.from_dict(semantic) if isinstance(semantic, Mapping) else None
    if semantic_info is not None:
        semantic_info = SemanticInfo(
            verb=_strip(semantic_info.verb),
            domain=_strip(semantic_info.domain),
            entity=_strip(semantic_info.entity),
            operation_type=_strip(semantic_info.operation_type),
        )
    return LineageMetadata(
        id=_strip(str(data.get("id"))),
        name=_strip(str(data.get("name"))),
        file_path=_strip(first_key(data, "file_path", "filePath")),
        line_number=first_key(data, "line_number", "lineNumber"),
        is_exported=bool(first_key(data, "is_exported", "isExported", default=False)),
        semantic=semantic_info,
        data_flow=DataFlowSummary.of(
            DataFlow.from_dict(data_flow) if isinstance(data_flow, Mapping) else None
        ),
        dna_id=dna.id if dna else None,
        flow_type=dna.flow_type if dna else None,
    )


def validate_for_lineage(
    atom: Atom | Mapping[str, Any],
    *,
    strict: bool = False,
) -> LineageValidation:
    """Grade an atom's metadata before it enters the lineage graph.

    Structural problems are errors; missing-but-optional information is a
    warning. Semantic-vocabulary problems are warnings unless ``strict``,
    in which case every warning is promoted to an error.

    Args:
        atom: Atom or raw extractor JSON
        strict: Promote warnings to errors

    Returns:
        Validation outcome; ``metadata`` is set only when there are no errors
    """
    data = _as_mapping(atom)
    raw_dna = data.get("dna")
    if isinstance(raw_dna, DNA):
        dna: DNA | None = raw_dna
    elif isinstance(raw_dna, Mapping):
        dna = DNA.from_dict(raw_dna)
    else:
        dna = None

    findings = _Findings()
    _check_structure(data, dna, findings)

    semantic = data.get("semantic")
    if not isinstance(semantic, Mapping):
        semantic = None
        findings.warnings.append("Missing semantic analysis")

    _check_coherence(data, dna, findings)

    if semantic is not None:
        findings.warnings.extend(_check_semantic(semantic))

    errors = list(findings.errors)
    warnings = list(findings.warnings)
    if strict:
        errors.extend(warnings)
        warnings = []

    score = (
        100
        - 30 * len(errors)
        - 10 * len(warnings)
        + (10 if dna is not None else 0)
        + (10 if semantic is not None else 0)
        + (10 if data.get("standardized") else 0)
    )

    valid = not errors
    return LineageValidation(
        valid=valid,
        confidence=_confidence(score),
        confidence_score=score,
        errors=tuple(errors),
        warnings=tuple(warnings),
        metadata=_extract_metadata(data, dna) if valid else None,
    )


def _semantic_of(atom: Atom) -> SemanticInfo:
    return atom.semantic or SemanticInfo()


def validate_match(
    atom: Atom,
    shadow: Shadow,
    config: MatchConfig | None = None,
    weights: SimilarityWeights | None = None,
) -> MatchResult:
    """Decide whether ``atom`` may be linked to ``shadow``.

    Above the guard threshold, pairs whose semantic verb and domain both
    differ are rejected: two structurally identical but unrelated
    functions (two different CRUD getters, say) must not be linked.

    Args:
        atom: Live atom (must carry DNA)
        shadow: Candidate ancestor
        config: Thresholds (defaults to MatchConfig())
        weights: DNA comparison weights

    Returns:
        Match outcome with similarity and reason
    """
    config = config or MatchConfig()

    if atom.dna is None or shadow.dna is None:
        return MatchResult(valid=False, similarity=0.0, reason="Missing DNA")

    similarity = compare_dna(atom.dna, shadow.dna, weights)
    if similarity < config.min_similarity:
        return MatchResult(
            valid=False,
            similarity=similarity,
            reason=f"Similarity {similarity:.2f} below {config.min_similarity:.2f}",
        )

    if similarity > config.guard_threshold:
        atom_semantic = _semantic_of(atom)
        shadow_semantic = shadow.metadata.semantic or SemanticInfo()
        if (
            atom_semantic.verb != shadow_semantic.verb
            and atom_semantic.domain != shadow_semantic.domain
        ):
            logger.debug(
                "Rejecting %s → %s: structurally similar (%.2f) but verb and domain differ",
                shadow.shadow_id,
                atom.id,
                similarity,
            )
            return MatchResult(
                valid=False,
                similarity=similarity,
                reason="Semantic verb and domain both differ (likely unrelated)",
            )

    return MatchResult(valid=True, similarity=similarity, reason="Match validated")
