"""Tests for the shadow secondary index."""

import asyncio
import json
from dataclasses import replace
from pathlib import Path

import pytest

from atomlineage.foundation.errors import ShadowStorageError
from atomlineage.lineage.dna import compute_dna
from atomlineage.lineage.index import ShadowIndex
from atomlineage.lineage.models import ShadowLineage, ShadowStatus
from atomlineage.lineage.tracker import register_death


@pytest.fixture
def index(tmp_path: Path) -> ShadowIndex:
    return ShadowIndex(tmp_path / "index.json")


@pytest.fixture
def make_shadow(make_atom):
    def _make(atom_id: str = "atom-1", **atom_kwargs):
        atom = make_atom(atom_id=atom_id, **atom_kwargs)
        atom.dna = compute_dna(atom)
        return register_death(atom)

    return _make


class TestShadowIndex:
    @pytest.mark.asyncio
    async def test_empty_when_missing(self, index: ShadowIndex) -> None:
        assert await index.get_entries() == []
        assert await index.children_of("shadow_x") == []

    @pytest.mark.asyncio
    async def test_update_shadow(self, index: ShadowIndex, make_shadow) -> None:
        shadow = make_shadow()

        entry = await index.update_shadow(shadow)

        assert entry.shadow_id == shadow.shadow_id
        assert entry.original_id == "atom-1"
        assert entry.status is ShadowStatus.DELETED
        assert entry.flow_type == shadow.dna.flow_type
        assert entry.pattern_hash == shadow.dna.pattern_hash
        assert await index.get_entry(shadow.shadow_id) == entry

    @pytest.mark.asyncio
    async def test_document_shape(self, index: ShadowIndex, make_shadow) -> None:
        shadow = make_shadow()
        await index.update_shadow(shadow)

        data = json.loads(index.index_path.read_text())

        assert data["version"] == ShadowIndex.INDEX_VERSION
        assert "updated_at" in data
        assert set(data["shadows"]) == {shadow.shadow_id}
        assert data["lineages"] == {}

    @pytest.mark.asyncio
    async def test_refresh_replaces_entry(self, index: ShadowIndex, make_shadow) -> None:
        shadow = make_shadow()
        await index.update_shadow(shadow)
        await index.update_shadow(shadow.with_replaced("atom-2"))

        entries = await index.get_entries()

        assert len(entries) == 1
        assert entries[0].status is ShadowStatus.REPLACED
        assert entries[0].replaced_by == "atom-2"

    @pytest.mark.asyncio
    async def test_parent_links(self, index: ShadowIndex, make_shadow) -> None:
        parent = make_shadow("atom-1")
        child = replace(
            make_shadow("atom-2"),
            lineage=ShadowLineage(parent_shadow_id=parent.shadow_id, generation=1),
        )

        await index.update_shadow(parent)
        await index.update_shadow(child)
        await index.update_shadow(child)

        assert await index.children_of(parent.shadow_id) == [child.shadow_id]
        assert (await index.get_entry(child.shadow_id)).generation == 1

    @pytest.mark.asyncio
    async def test_filter(self, index: ShadowIndex, make_shadow) -> None:
        getter = make_shadow("getter")
        writer = make_shadow("writer", operations=("save",), outputs=("side_effect",), verb="set")
        await index.update_shadow(getter)
        await index.update_shadow(writer.with_replaced("writer-2"))

        assert [e.shadow_id for e in await index.filter(status="deleted")] == [getter.shadow_id]
        assert [e.shadow_id for e in await index.filter(status=ShadowStatus.REPLACED)] == [
            writer.shadow_id
        ]
        assert [e.shadow_id for e in await index.filter(flow_type="side-effect-only")] == [
            writer.shadow_id
        ]
        assert [
            e.shadow_id for e in await index.filter(pattern_hash=getter.dna.pattern_hash)
        ] == [getter.shadow_id]
        assert len(await index.filter()) == 2

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self, index: ShadowIndex, make_shadow) -> None:
        shadows = [make_shadow(f"atom-{i}") for i in range(25)]

        await asyncio.gather(*(index.update_shadow(s) for s in shadows))

        entries = await index.get_entries()
        assert {e.shadow_id for e in entries} == {s.shadow_id for s in shadows}

    @pytest.mark.asyncio
    async def test_skips_corrupt_entries(self, index: ShadowIndex, make_shadow) -> None:
        shadow = make_shadow()
        await index.update_shadow(shadow)

        data = json.loads(index.index_path.read_text())
        data["shadows"]["shadow_bad"] = {"shadow_id": "shadow_bad", "status": "exploded"}
        index.index_path.write_text(json.dumps(data))

        entries = await index.get_entries()

        assert [e.shadow_id for e in entries] == [shadow.shadow_id]

    @pytest.mark.asyncio
    async def test_undecodable_index(self, index: ShadowIndex) -> None:
        index.index_path.write_text("][")

        with pytest.raises(ShadowStorageError):
            await index.get_entries()

    @pytest.mark.asyncio
    async def test_remove_shadow(self, index: ShadowIndex, make_shadow) -> None:
        parent = make_shadow("atom-1")
        child = replace(
            make_shadow("atom-2"),
            lineage=ShadowLineage(parent_shadow_id=parent.shadow_id, generation=1),
        )
        await index.update_shadow(parent)
        await index.update_shadow(child)

        assert await index.remove_shadow(child.shadow_id) is True
        assert await index.remove_shadow(child.shadow_id) is False
        assert await index.children_of(parent.shadow_id) == []
        assert await index.get_entry(child.shadow_id) is None
