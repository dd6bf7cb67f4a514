"""Tests for lineage data models."""

from datetime import UTC, datetime

from atomlineage.lineage.models import (
    Ancestry,
    AncestryWarning,
    Atom,
    Connection,
    DataFlow,
    DataFlowOutput,
    ShadowStatus,
    Transformation,
    WarningType,
    generate_shadow_id,
)
from atomlineage.lineage.tracker import register_death


class TestAtom:
    def test_from_camel_case(self, make_atom_dict) -> None:
        data = make_atom_dict(created_at="2024-03-01T10:00:00+00:00")

        atom = Atom.from_dict(data)

        assert atom.id == "atom-get-user"
        assert atom.file_path == "src/users.js"
        assert atom.line_number == 12
        assert atom.is_exported is True
        assert atom.created_at == datetime(2024, 3, 1, 10, tzinfo=UTC)
        assert atom.data_flow.inputs[0].usages == ("read",)
        assert atom.semantic.operation_type == "read"

    def test_to_dict_is_snake_case_and_reloadable(self, make_atom) -> None:
        atom = make_atom(connections=(("db", 0.5),))

        data = atom.to_dict()

        assert "data_flow" in data
        assert "dataFlow" not in data
        assert Atom.from_dict(data) == atom

    def test_usage_objects(self) -> None:
        atom = Atom.from_dict({
            "id": "a",
            "dataFlow": {"inputs": [{"name": "x", "usages": [{"type": "call"}, "read"]}]},
        })
        assert atom.data_flow.inputs[0].usages == ("call", "read")

    def test_malformed_sections_parse_empty(self) -> None:
        flow = DataFlow.from_dict({"inputs": "x", "transformations": None, "outputs": {}})
        assert flow == DataFlow()

    def test_missing_optional_parts(self) -> None:
        atom = Atom.from_dict({"id": "bare"})

        assert atom.data_flow is None
        assert atom.semantic is None
        assert atom.connections == ()
        assert atom.dna is None
        assert atom.ancestry is None


class TestDataFlowParts:
    def test_arity(self) -> None:
        assert Transformation("merge", source=("a", "b", "c")).arity == 3
        assert Transformation("map", source="a").arity == 1
        assert Transformation("map").arity == 1

    def test_transformation_list_source(self) -> None:
        t = Transformation.from_dict({"operation": "merge", "from": ["a", "b"], "to": "c"})
        assert t.source == ("a", "b")
        assert t.to_dict() == {"operation": "merge", "from": ["a", "b"], "to": "c"}

    def test_side_effect_detection(self) -> None:
        assert DataFlowOutput(type="side_effect").side_effect
        assert DataFlowOutput.from_dict({"type": "write", "isSideEffect": True}).side_effect
        assert not DataFlowOutput(type="return").side_effect
        assert DataFlowOutput(type="return").is_return

    def test_connection_defaults(self) -> None:
        assert Connection.from_dict({"target": "x"}).weight == 1.0
        assert Connection.from_dict({"target": "x", "strength": 0.3}).weight == 0.3


class TestShadow:
    def test_generated_ids(self) -> None:
        shadow_id = generate_shadow_id()
        assert shadow_id.startswith("shadow_")
        assert shadow_id != generate_shadow_id()

    def test_with_replaced(self) -> None:
        shadow = register_death(Atom(id="a"))

        replaced = shadow.with_replaced("b")

        assert replaced.status is ShadowStatus.REPLACED
        assert replaced.replaced_by == "b"
        assert replaced.death.replacement_id == "b"
        assert shadow.status is ShadowStatus.DELETED

    def test_with_child_is_idempotent(self) -> None:
        shadow = register_death(Atom(id="a"))

        once = shadow.with_child("shadow_child")
        twice = once.with_child("shadow_child")

        assert once.lineage.child_shadow_ids == ("shadow_child",)
        assert twice is once

    def test_status_serializes_as_string(self) -> None:
        assert register_death(Atom(id="a")).to_dict()["status"] == "deleted"


class TestAncestry:
    def test_genesis_record(self) -> None:
        ancestry = Ancestry.genesis_record()

        assert ancestry.is_genesis
        assert ancestry.genesis
        assert ancestry.generation == 0
        assert ancestry.lineage == ()

    def test_round_trip(self) -> None:
        ancestry = Ancestry(
            replaced="shadow_1",
            lineage=("shadow_1", "shadow_0"),
            generation=2,
            vibration_score=0.3,
            strong_connections=(Connection(target="db", weight=0.5),),
            warnings=(
                AncestryWarning(
                    type=WarningType.RUPTURED_LINEAGE,
                    message="1 lost",
                    details={"count": 1, "targets": ["cache"]},
                ),
            ),
            evolution_type="renamed",
            similarity=0.97,
        )

        assert Ancestry.from_dict(ancestry.to_dict()) == ancestry

    def test_from_camel_case(self) -> None:
        ancestry = Ancestry.from_dict({
            "replaced": "shadow_1",
            "lineage": ["shadow_1"],
            "generation": 1,
            "vibrationScore": 0.4,
            "strongConnections": [{"target": "db", "strength": 0.9}],
            "evolutionType": "expanded",
        })

        assert ancestry.vibration_score == 0.4
        assert ancestry.strong_connections[0].weight == 0.9
        assert ancestry.evolution_type == "expanded"
