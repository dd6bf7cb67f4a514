"""Tests for lineage metadata validation and match gating."""

from dataclasses import replace

import pytest

from atomlineage.foundation.types.config import MatchConfig
from atomlineage.lineage.dna import compute_dna
from atomlineage.lineage.tracker import register_death
from atomlineage.lineage.validation import validate_for_lineage, validate_match


class TestValidateForLineage:
    """Metadata quality grading."""

    def test_well_formed_atom(self, make_atom) -> None:
        result = validate_for_lineage(make_atom())

        assert result.valid
        assert result.confidence == "high"
        assert result.errors == ()
        assert result.warnings == ()
        assert result.metadata is not None
        assert result.metadata.name == "getUser"
        assert result.metadata.data_flow.transformation_count == 1

    def test_metadata_is_trimmed(self, make_atom_dict) -> None:
        data = make_atom_dict(atom_id="  atom-1 ", name="  getUser  ")
        result = validate_for_lineage(data)

        assert result.metadata.id == "atom-1"
        assert result.metadata.name == "getUser"

    def test_accepts_raw_camel_case_json(self, make_atom_dict) -> None:
        result = validate_for_lineage(make_atom_dict())
        assert result.valid
        assert result.metadata.semantic.operation_type == "read"

    def test_missing_id_and_name(self, make_atom_dict) -> None:
        data = make_atom_dict()
        del data["id"]
        del data["name"]

        result = validate_for_lineage(data)

        assert not result.valid
        assert "Missing atom id" in result.errors
        assert "Missing atom name" in result.errors
        assert result.metadata is None
        # 100 - 2 * 30 + 10 (semantic)
        assert result.confidence_score == 50
        assert result.confidence == "medium"
        assert result.summary() == "valid=False confidence=medium errors=2 warnings=0"

    def test_inputs_must_be_array(self, make_atom_dict) -> None:
        data = make_atom_dict()
        data["dataFlow"]["inputs"] = "userId"

        result = validate_for_lineage(data)

        assert not result.valid
        assert "dataFlow.inputs must be an array" in result.errors

    def test_soft_problems_are_warnings(self, make_atom_dict) -> None:
        data = make_atom_dict(operations=(), outputs=())
        result = validate_for_lineage(data)

        assert result.valid
        assert "dataFlow has no outputs or transformations" in result.warnings

    def test_output_without_type(self, make_atom_dict) -> None:
        data = make_atom_dict()
        data["dataFlow"]["outputs"] = [{"name": "row"}]

        result = validate_for_lineage(data)

        assert "Output 0 is missing a type" in result.warnings

    def test_missing_semantic(self, make_atom) -> None:
        atom = make_atom(verb=None, domain=None, entity=None, operation_type=None)
        result = validate_for_lineage(atom)

        assert result.valid
        assert "Missing semantic analysis" in result.warnings

    def test_non_mapping_semantic_is_treated_as_missing(self, make_atom_dict) -> None:
        data = make_atom_dict()
        data["semantic"] = ["get", "user"]

        result = validate_for_lineage(data)

        assert result.valid
        assert "Missing semantic analysis" in result.warnings

    def test_validate_verb_requires_validation_step(self, make_atom) -> None:
        result = validate_for_lineage(make_atom(verb="validate", operations=("map",)))
        assert not result.valid
        assert any("validate" in e for e in result.errors)

        result = validate_for_lineage(make_atom(verb="validate", operations=("check",)))
        assert result.valid

    def test_read_claim_requires_read_step(self, make_atom) -> None:
        atom = make_atom()
        atom.dna = replace(compute_dna(atom), flow_type="read-return")
        atom.data_flow = make_atom(operations=("map",)).data_flow

        result = validate_for_lineage(atom)

        assert not result.valid
        assert any("claims a read" in e for e in result.errors)

    def test_persist_claim_requires_side_effect(self, make_atom) -> None:
        atom = make_atom(operations=("read",), outputs=("return",))
        atom.dna = replace(compute_dna(atom), flow_type="read-persist")

        result = validate_for_lineage(atom)

        assert not result.valid
        assert any("claims persistence" in e for e in result.errors)

    def test_unrecognized_verb_is_warning(self, make_atom) -> None:
        result = validate_for_lineage(make_atom(verb="frobnicate"))

        assert result.valid
        assert "Unrecognized semantic verb 'frobnicate'" in result.warnings

    def test_strict_promotes_warnings(self, make_atom) -> None:
        result = validate_for_lineage(make_atom(verb="frobnicate"), strict=True)

        assert not result.valid
        assert "Unrecognized semantic verb 'frobnicate'" in result.errors
        assert result.warnings == ()
        assert result.metadata is None

    def test_missing_operation_type(self, make_atom) -> None:
        result = validate_for_lineage(make_atom(operation_type=None))
        assert "Semantic analysis is missing an operationType" in result.warnings

    def test_dna_and_standardized_raise_confidence(self, make_atom) -> None:
        atom = make_atom()
        base = validate_for_lineage(atom).confidence_score

        atom.dna = compute_dna(atom)
        atom.standardized = {"purpose": "lookup"}

        assert validate_for_lineage(atom).confidence_score == base + 20

    def test_invalid_dna_is_error(self, make_atom) -> None:
        atom = make_atom()
        atom.dna = replace(compute_dna(atom), complexity_score=0)

        result = validate_for_lineage(atom)

        assert not result.valid
        assert any(e.startswith("Invalid DNA") for e in result.errors)


class TestValidateMatch:
    """Candidate pair gating."""

    def _shadow_of(self, atom):
        atom.dna = compute_dna(atom)
        return register_death(atom)

    def test_identical_pair(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="old"))
        atom = make_atom(atom_id="new")
        atom.dna = compute_dna(atom)

        result = validate_match(atom, shadow)

        assert result.valid
        assert result.similarity == pytest.approx(1.0)

    def test_missing_dna(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="old"))
        result = validate_match(make_atom(atom_id="new"), shadow)

        assert not result.valid
        assert result.reason == "Missing DNA"

    def test_below_minimum(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="old"))
        atom = make_atom(atom_id="new", operations=("save",), outputs=("side_effect",), verb="set")
        atom.dna = compute_dna(atom)

        result = validate_match(atom, shadow)

        assert not result.valid
        assert result.similarity < 0.6

    def test_guard_rejects_unrelated_lookalikes(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="getUser"))
        atom = make_atom(atom_id="getOrder", verb="fetch", domain="order", entity="order")
        atom.dna = compute_dna(atom)

        result = validate_match(atom, shadow)

        # Same shape, different semantics: 0.4 + 0.3 + 0.2
        assert 0.8 < result.similarity < 1.0
        assert not result.valid
        assert "differ" in result.reason

    def test_guard_allows_shared_domain(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="getUser"))
        atom = make_atom(atom_id="loadUser", verb="fetch", domain="user")
        atom.dna = compute_dna(atom)

        assert validate_match(atom, shadow).valid

    def test_guard_threshold_is_configurable(self, make_atom) -> None:
        shadow = self._shadow_of(make_atom(atom_id="getUser"))
        atom = make_atom(atom_id="getOrder", verb="fetch", domain="order", entity="order")
        atom.dna = compute_dna(atom)

        result = validate_match(atom, shadow, MatchConfig(guard_threshold=0.95))

        assert result.valid
