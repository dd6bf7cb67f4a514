"""Lineage data models.

Atoms arrive from the extraction layers as JSON. Everything the lineage
system derives from them (DNA, shadows, ancestry, index entries) is an
immutable record with a lossless ``to_dict``/``from_dict`` codec.

``Atom.from_dict`` accepts both the extractors' camelCase keys
(``dataFlow``, ``createdAt``...) and snake_case; every ``to_dict`` emits
snake_case.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4


class ShadowStatus(str, Enum):
    """Lifecycle state of a shadow."""

    DELETED = "deleted"
    REPLACED = "replaced"
    MERGED = "merged"
    SPLIT = "split"


class FlowType(str, Enum):
    """Shape of the work an atom performs."""

    READ_TRANSFORM_PERSIST_RETURN = "read-transform-persist-return"
    READ_TRANSFORM_RETURN = "read-transform-return"
    READ_PERSIST = "read-persist"
    TRANSFORM_RETURN = "transform-return"
    READ_RETURN = "read-return"
    SIDE_EFFECT_ONLY = "side-effect-only"
    UNKNOWN = "unknown"


class EvolutionType(str, Enum):
    """How a descendant differs from the shadow it replaced."""

    RENAMED = "renamed"
    EXPANDED = "expanded"
    SHRINKED = "shrinked"
    REFACTOR = "refactor"
    DOMAIN_CHANGE = "domain_change"
    REIMPLEMENTED = "reimplemented"


class WarningType(str, Enum):
    """Kinds of ancestry warnings."""

    RUPTURED_LINEAGE = "ruptured_lineage"
    COMPLEXITY_DROP = "complexity_drop"
    FLOW_TYPE_CHANGE = "flow_type_change"


def first_key(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (supports camelCase and snake_case input)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware ones pass through."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    return as_utc(datetime.fromisoformat(str(value)))


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def utc_now() -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(UTC)


def generate_shadow_id() -> str:
    """Generate a globally unique shadow ID.

    Format: shadow_{uuid4 hex}
    """
    return f"shadow_{uuid4().hex}"


# ─────────────────────────────────────────────────────────────────
# Atom (consumed from upstream extraction)
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DataFlowInput:
    """A parameter or other value flowing into an atom."""

    name: str
    type: str | None = None
    usages: tuple[str, ...] = ()
    """Usage-pattern tags (read, call, property_access...)."""

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "usages": list(self.usages)}

    @classmethod
    def from_dict(cls, data: Any) -> "DataFlowInput":
        if isinstance(data, str):
            return cls(name=data)
        usages = []
        for usage in data.get("usages") or ():
            tag = usage.get("type") if isinstance(usage, Mapping) else usage
            if tag:
                usages.append(str(tag))
        return cls(name=data.get("name", ""), type=data.get("type"), usages=tuple(usages))


@dataclass(frozen=True, slots=True)
class Transformation:
    """A single operation inside an atom's data flow."""

    operation: str
    source: str | tuple[str, ...] | None = None
    target: str | None = None

    @property
    def arity(self) -> int:
        """Number of values consumed (1 unless the source is a list)."""
        if isinstance(self.source, tuple):
            return len(self.source)
        return 1

    def to_dict(self) -> dict:
        source = list(self.source) if isinstance(self.source, tuple) else self.source
        return {"operation": self.operation, "from": source, "to": self.target}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transformation":
        source = data.get("from")
        if isinstance(source, list):
            source = tuple(source)
        return cls(
            operation=str(data.get("operation") or data.get("type") or "unknown"),
            source=source,
            target=data.get("to"),
        )


@dataclass(frozen=True, slots=True)
class DataFlowOutput:
    """A value leaving an atom: returned, or emitted as a side effect."""

    name: str = ""
    type: str | None = None
    is_side_effect: bool = False

    @property
    def side_effect(self) -> bool:
        return self.is_side_effect or self.type == "side_effect"

    @property
    def is_return(self) -> bool:
        return self.type == "return"

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "is_side_effect": self.is_side_effect}

    @classmethod
    def from_dict(cls, data: Any) -> "DataFlowOutput":
        if isinstance(data, str):
            return cls(name=data)
        return cls(
            name=data.get("name", ""),
            type=data.get("type"),
            is_side_effect=bool(first_key(data, "is_side_effect", "isSideEffect", default=False)),
        )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


@dataclass(frozen=True, slots=True)
class DataFlow:
    """Data-flow description produced by the extraction layer."""

    inputs: tuple[DataFlowInput, ...] = ()
    transformations: tuple[Transformation, ...] = ()
    outputs: tuple[DataFlowOutput, ...] = ()

    def to_dict(self) -> dict:
        return {
            "inputs": [i.to_dict() for i in self.inputs],
            "transformations": [t.to_dict() for t in self.transformations],
            "outputs": [o.to_dict() for o in self.outputs],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataFlow":
        """Deserialize from dict. Malformed (non-list) sections parse as empty."""
        return cls(
            inputs=tuple(DataFlowInput.from_dict(i) for i in _as_list(data.get("inputs"))),
            transformations=tuple(
                Transformation.from_dict(t) for t in _as_list(data.get("transformations"))
            ),
            outputs=tuple(DataFlowOutput.from_dict(o) for o in _as_list(data.get("outputs"))),
        )


@dataclass(frozen=True, slots=True)
class SemanticInfo:
    """Semantic analysis of an atom (what it does, to what)."""

    verb: str | None = None
    domain: str | None = None
    entity: str | None = None
    operation_type: str | None = None

    def to_dict(self) -> dict:
        return {
            "verb": self.verb,
            "domain": self.domain,
            "entity": self.entity,
            "operation_type": self.operation_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SemanticInfo":
        return cls(
            verb=data.get("verb"),
            domain=data.get("domain"),
            entity=data.get("entity"),
            operation_type=first_key(data, "operation_type", "operationType"),
        )


@dataclass(frozen=True, slots=True)
class Connection:
    """An edge from an atom to another code entity."""

    target: str
    type: str | None = None
    weight: float = 1.0
    via: str | None = None

    def to_dict(self) -> dict:
        return {"target": self.target, "type": self.type, "weight": self.weight, "via": self.via}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Connection":
        weight = first_key(data, "weight", "strength")
        return cls(
            target=str(data.get("target", "")),
            type=data.get("type"),
            weight=float(weight) if weight is not None else 1.0,
            via=data.get("via"),
        )


@dataclass(slots=True)
class Atom:
    """A tracked code entity (typically a function or method).

    Mutable: lineage enrichment attaches ``dna`` and ``ancestry``.
    """

    id: str
    name: str = ""
    created_at: datetime | None = None
    file_path: str | None = None
    line_number: int | None = None
    is_exported: bool = False
    data_flow: DataFlow | None = None
    semantic: SemanticInfo | None = None
    connections: tuple[Connection, ...] = ()
    standardized: dict[str, Any] | None = None
    dna: "DNA | None" = None
    ancestry: "Ancestry | None" = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _format_datetime(self.created_at),
            "file_path": self.file_path,
            "line_number": self.line_number,
            "is_exported": self.is_exported,
            "data_flow": self.data_flow.to_dict() if self.data_flow else None,
            "semantic": self.semantic.to_dict() if self.semantic else None,
            "connections": [c.to_dict() for c in self.connections],
            "standardized": self.standardized,
            "dna": self.dna.to_dict() if self.dna else None,
            "ancestry": self.ancestry.to_dict() if self.ancestry else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Atom":
        """Deserialize from the extractor's JSON (camelCase or snake_case)."""
        data_flow = first_key(data, "data_flow", "dataFlow")
        semantic = data.get("semantic")
        dna = data.get("dna")
        ancestry = data.get("ancestry")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            created_at=_parse_datetime(first_key(data, "created_at", "createdAt")),
            file_path=first_key(data, "file_path", "filePath"),
            line_number=first_key(data, "line_number", "lineNumber"),
            is_exported=bool(first_key(data, "is_exported", "isExported", default=False)),
            data_flow=DataFlow.from_dict(data_flow) if isinstance(data_flow, Mapping) else None,
            semantic=SemanticInfo.from_dict(semantic) if isinstance(semantic, Mapping) else None,
            connections=tuple(
                Connection.from_dict(c) for c in _as_list(data.get("connections"))
                if isinstance(c, Mapping)
            ),
            standardized=data.get("standardized"),
            dna=DNA.from_dict(dna) if isinstance(dna, Mapping) else None,
            ancestry=Ancestry.from_dict(ancestry) if isinstance(ancestry, Mapping) else None,
        )


# ─────────────────────────────────────────────────────────────────
# DNA
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DNA:
    """Structural/behavioral fingerprint of an atom."""

    id: str
    structural_hash: str
    pattern_hash: str
    flow_type: str
    operation_sequence: tuple[str, ...]
    complexity_score: int
    input_count: int = 0
    output_count: int = 0
    transformation_count: int = 0
    semantic_fingerprint: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "structural_hash": self.structural_hash,
            "pattern_hash": self.pattern_hash,
            "flow_type": self.flow_type,
            "operation_sequence": list(self.operation_sequence),
            "complexity_score": self.complexity_score,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "transformation_count": self.transformation_count,
            "semantic_fingerprint": self.semantic_fingerprint,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DNA":
        return cls(
            id=str(data.get("id") or ""),
            structural_hash=str(first_key(data, "structural_hash", "structuralHash", default="")),
            pattern_hash=str(first_key(data, "pattern_hash", "patternHash", default="")),
            flow_type=str(first_key(data, "flow_type", "flowType", default=FlowType.UNKNOWN.value)),
            operation_sequence=tuple(
                first_key(data, "operation_sequence", "operationSequence", default=()) or ()
            ),
            complexity_score=int(first_key(data, "complexity_score", "complexityScore", default=1)),
            input_count=int(first_key(data, "input_count", "inputCount", default=0)),
            output_count=int(first_key(data, "output_count", "outputCount", default=0)),
            transformation_count=int(
                first_key(data, "transformation_count", "transformationCount", default=0)
            ),
            semantic_fingerprint=str(
                first_key(data, "semantic_fingerprint", "semanticFingerprint", default="unknown")
            ),
        )


@dataclass(frozen=True, slots=True)
class DNAFingerprint:
    """Reduced DNA snapshot kept in a shadow's inheritance."""

    structural_hash: str
    pattern_hash: str
    flow_type: str

    def to_dict(self) -> dict:
        return {
            "structural_hash": self.structural_hash,
            "pattern_hash": self.pattern_hash,
            "flow_type": self.flow_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DNAFingerprint":
        return cls(
            structural_hash=data["structural_hash"],
            pattern_hash=data["pattern_hash"],
            flow_type=data["flow_type"],
        )


# ─────────────────────────────────────────────────────────────────
# Shadow (tombstone of a deleted atom)
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DataFlowSummary:
    """Counts and operations of the dead atom's data flow."""

    input_count: int = 0
    output_count: int = 0
    transformation_count: int = 0
    operations: tuple[str, ...] = ()
    has_side_effects: bool = False

    def to_dict(self) -> dict:
        return {
            "input_count": self.input_count,
            "output_count": self.output_count,
            "transformation_count": self.transformation_count,
            "operations": list(self.operations),
            "has_side_effects": self.has_side_effects,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataFlowSummary":
        return cls(
            input_count=data.get("input_count", 0),
            output_count=data.get("output_count", 0),
            transformation_count=data.get("transformation_count", 0),
            operations=tuple(data.get("operations", ())),
            has_side_effects=data.get("has_side_effects", False),
        )

    @classmethod
    def of(cls, data_flow: DataFlow | None) -> "DataFlowSummary":
        if data_flow is None:
            return cls()
        return cls(
            input_count=len(data_flow.inputs),
            output_count=len(data_flow.outputs),
            transformation_count=len(data_flow.transformations),
            operations=tuple(t.operation for t in data_flow.transformations),
            has_side_effects=any(o.side_effect for o in data_flow.outputs),
        )


@dataclass(frozen=True, slots=True)
class ShadowMetadata:
    """What the dead atom looked like."""

    name: str
    file_path: str | None
    line_number: int | None
    is_exported: bool
    data_flow: DataFlowSummary
    semantic: SemanticInfo | None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "is_exported": self.is_exported,
            "data_flow": self.data_flow.to_dict(),
            "semantic": self.semantic.to_dict() if self.semantic else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowMetadata":
        semantic = data.get("semantic")
        return cls(
            name=data.get("name", ""),
            file_path=data.get("file_path"),
            line_number=data.get("line_number"),
            is_exported=data.get("is_exported", False),
            data_flow=DataFlowSummary.from_dict(data.get("data_flow") or {}),
            semantic=SemanticInfo.from_dict(semantic) if semantic else None,
        )


@dataclass(frozen=True, slots=True)
class ShadowLineage:
    """Position of a shadow in its family tree."""

    parent_shadow_id: str | None = None
    child_shadow_ids: tuple[str, ...] = ()
    evolution_type: str | None = None
    generation: int = 0

    def to_dict(self) -> dict:
        return {
            "parent_shadow_id": self.parent_shadow_id,
            "child_shadow_ids": list(self.child_shadow_ids),
            "evolution_type": self.evolution_type,
            "generation": self.generation,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowLineage":
        return cls(
            parent_shadow_id=data.get("parent_shadow_id"),
            child_shadow_ids=tuple(data.get("child_shadow_ids", ())),
            evolution_type=data.get("evolution_type"),
            generation=data.get("generation", 0),
        )


@dataclass(frozen=True, slots=True)
class ShadowInheritance:
    """Knowledge the dead atom leaves to its successor."""

    connections: tuple[Connection, ...] = ()
    connection_count: int = 0
    vibration_score: float = 0.0
    dna_fingerprint: DNAFingerprint | None = None

    def to_dict(self) -> dict:
        return {
            "connections": [c.to_dict() for c in self.connections],
            "connection_count": self.connection_count,
            "vibration_score": self.vibration_score,
            "dna_fingerprint": self.dna_fingerprint.to_dict() if self.dna_fingerprint else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowInheritance":
        fingerprint = data.get("dna_fingerprint")
        return cls(
            connections=tuple(Connection.from_dict(c) for c in data.get("connections", ())),
            connection_count=data.get("connection_count", 0),
            vibration_score=data.get("vibration_score", 0.0),
            dna_fingerprint=DNAFingerprint.from_dict(fingerprint) if fingerprint else None,
        )


@dataclass(frozen=True, slots=True)
class ShadowDeath:
    """Circumstances of the atom's death."""

    reason: str = "unknown"
    commits_involved: tuple[str, ...] = ()
    risk_introduced: float = 0.0
    replacement_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "commits_involved": list(self.commits_involved),
            "risk_introduced": self.risk_introduced,
            "replacement_id": self.replacement_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowDeath":
        return cls(
            reason=data.get("reason", "unknown"),
            commits_involved=tuple(data.get("commits_involved", ())),
            risk_introduced=data.get("risk_introduced", 0.0),
            replacement_id=data.get("replacement_id"),
        )


@dataclass(frozen=True, slots=True)
class Shadow:
    """Persisted tombstone of a deleted atom.

    Immutable after creation apart from replacement (``with_replaced``) and
    gaining descendants (``with_child``), both copy-on-write.
    """

    shadow_id: str
    original_id: str
    status: ShadowStatus
    replaced_by: str | None
    born_at: datetime
    died_at: datetime
    lifespan_days: int
    dna: DNA | None
    metadata: ShadowMetadata
    lineage: ShadowLineage
    inheritance: ShadowInheritance
    death: ShadowDeath

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {
            "shadow_id": self.shadow_id,
            "original_id": self.original_id,
            "status": self.status.value,
            "replaced_by": self.replaced_by,
            "born_at": self.born_at.isoformat(),
            "died_at": self.died_at.isoformat(),
            "lifespan_days": self.lifespan_days,
            "dna": self.dna.to_dict() if self.dna else None,
            "metadata": self.metadata.to_dict(),
            "lineage": self.lineage.to_dict(),
            "inheritance": self.inheritance.to_dict(),
            "death": self.death.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Shadow":
        """Deserialize from dict."""
        dna = data.get("dna")
        return cls(
            shadow_id=data["shadow_id"],
            original_id=data["original_id"],
            status=ShadowStatus(data["status"]),
            replaced_by=data.get("replaced_by"),
            born_at=as_utc(datetime.fromisoformat(data["born_at"])),
            died_at=as_utc(datetime.fromisoformat(data["died_at"])),
            lifespan_days=data.get("lifespan_days", 0),
            dna=DNA.from_dict(dna) if dna else None,
            metadata=ShadowMetadata.from_dict(data.get("metadata") or {}),
            lineage=ShadowLineage.from_dict(data.get("lineage") or {}),
            inheritance=ShadowInheritance.from_dict(data.get("inheritance") or {}),
            death=ShadowDeath.from_dict(data.get("death") or {}),
        )

    def with_replaced(self, replacement_id: str) -> "Shadow":
        """Return new shadow marked as replaced by ``replacement_id``."""
        return replace(
            self,
            status=ShadowStatus.REPLACED,
            replaced_by=replacement_id,
            death=replace(self.death, replacement_id=replacement_id),
        )

    def with_child(self, child_shadow_id: str) -> "Shadow":
        """Return new shadow with a descendant shadow appended."""
        if child_shadow_id in self.lineage.child_shadow_ids:
            return self
        return replace(
            self,
            lineage=replace(
                self.lineage,
                child_shadow_ids=(*self.lineage.child_shadow_ids, child_shadow_id),
            ),
        )


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """Secondary-index row: enough to filter shadows without loading them."""

    shadow_id: str
    original_id: str
    status: ShadowStatus
    replaced_by: str | None
    died_at: str
    flow_type: str | None
    pattern_hash: str | None
    generation: int = 0

    def to_dict(self) -> dict:
        return {
            "shadow_id": self.shadow_id,
            "original_id": self.original_id,
            "status": self.status.value,
            "replaced_by": self.replaced_by,
            "died_at": self.died_at,
            "flow_type": self.flow_type,
            "pattern_hash": self.pattern_hash,
            "generation": self.generation,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndexEntry":
        return cls(
            shadow_id=data["shadow_id"],
            original_id=data["original_id"],
            status=ShadowStatus(data["status"]),
            replaced_by=data.get("replaced_by"),
            died_at=data["died_at"],
            flow_type=data.get("flow_type"),
            pattern_hash=data.get("pattern_hash"),
            generation=data.get("generation", 0),
        )

    @classmethod
    def of(cls, shadow: Shadow) -> "IndexEntry":
        return cls(
            shadow_id=shadow.shadow_id,
            original_id=shadow.original_id,
            status=shadow.status,
            replaced_by=shadow.replaced_by,
            died_at=shadow.died_at.isoformat(),
            flow_type=shadow.dna.flow_type if shadow.dna else None,
            pattern_hash=shadow.dna.pattern_hash if shadow.dna else None,
            generation=shadow.lineage.generation,
        )


# ─────────────────────────────────────────────────────────────────
# Ancestry (attached to a live atom)
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AncestryWarning:
    """A notice raised while propagating inheritance."""

    type: WarningType
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"type": self.type.value, "message": self.message, "details": self.details}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AncestryWarning":
        return cls(
            type=WarningType(data["type"]),
            message=data.get("message", ""),
            details=dict(data.get("details") or {}),
        )


@dataclass(frozen=True, slots=True)
class Ancestry:
    """Lineage metadata describing a live atom's predecessor chain."""

    replaced: str | None = None
    """Shadow ID of the direct predecessor (None for genesis)."""

    lineage: tuple[str, ...] = ()
    """Ancestor shadow IDs, nearest first."""

    generation: int = 0
    vibration_score: float = 0.0
    strong_connections: tuple[Connection, ...] = ()
    warnings: tuple[AncestryWarning, ...] = ()
    genesis: bool = False
    evolution_type: str | None = None
    similarity: float | None = None

    @property
    def is_genesis(self) -> bool:
        return self.replaced is None

    def has_warning(self, warning_type: WarningType) -> bool:
        return any(w.type is warning_type for w in self.warnings)

    def to_dict(self) -> dict:
        return {
            "replaced": self.replaced,
            "lineage": list(self.lineage),
            "generation": self.generation,
            "vibration_score": self.vibration_score,
            "strong_connections": [c.to_dict() for c in self.strong_connections],
            "warnings": [w.to_dict() for w in self.warnings],
            "genesis": self.genesis,
            "evolution_type": self.evolution_type,
            "similarity": self.similarity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Ancestry":
        return cls(
            replaced=data.get("replaced"),
            lineage=tuple(data.get("lineage") or ()),
            generation=int(data.get("generation") or 0),
            vibration_score=float(first_key(data, "vibration_score", "vibrationScore", default=0.0)),
            strong_connections=tuple(
                Connection.from_dict(c)
                for c in first_key(data, "strong_connections", "strongConnections", default=()) or ()
            ),
            warnings=tuple(AncestryWarning.from_dict(w) for w in data.get("warnings") or ()),
            genesis=bool(data.get("genesis", False)),
            evolution_type=first_key(data, "evolution_type", "evolutionType"),
            similarity=data.get("similarity"),
        )

    @classmethod
    def genesis_record(cls) -> "Ancestry":
        """Ancestry for an atom with no detected predecessor."""
        return cls(generation=0, lineage=(), vibration_score=0.0, genesis=True)
