"""Tests for similarity search over the shadow store."""

from dataclasses import replace

import pytest

from atomlineage.foundation.types.config import LineageConfig, SearchConfig
from atomlineage.lineage.dna import compute_dna
from atomlineage.lineage.models import Atom
from atomlineage.lineage.registry import ShadowRegistry
from atomlineage.lineage.search import find_best_match, find_similar_shadows


def _fingerprinted(atom: Atom) -> Atom:
    atom.dna = compute_dna(atom)
    return atom


class TestFindSimilar:
    @pytest.mark.asyncio
    async def test_atom_without_dna(self, registry: ShadowRegistry, make_atom) -> None:
        await registry.create_shadow(make_atom(atom_id="old"))

        assert await registry.find_similar(make_atom(atom_id="new")) == []

    @pytest.mark.asyncio
    async def test_unknown_flow_type(self, registry: ShadowRegistry) -> None:
        await registry.create_shadow(Atom(id="old-config"))

        assert await registry.find_similar(_fingerprinted(Atom(id="new-config"))) == []

    @pytest.mark.asyncio
    async def test_finds_identical_shape(self, registry: ShadowRegistry, make_atom) -> None:
        shadow = await registry.create_shadow(make_atom(atom_id="old"))

        matches = await registry.find_similar(_fingerprinted(make_atom(atom_id="new")))

        assert [m.shadow.shadow_id for m in matches] == [shadow.shadow_id]
        assert matches[0].similarity == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_excludes_replaced_unless_asked(self, registry: ShadowRegistry, make_atom) -> None:
        shadow = await registry.create_shadow(make_atom(atom_id="old"), replacement_id="other")
        atom = _fingerprinted(make_atom(atom_id="new"))

        assert await registry.find_similar(atom) == []
        matches = await registry.find_similar(atom, include_replaced=True)
        assert [m.shadow.shadow_id for m in matches] == [shadow.shadow_id]

    @pytest.mark.asyncio
    async def test_prunes_other_flow_types(self, registry: ShadowRegistry, make_atom) -> None:
        await registry.create_shadow(
            make_atom(atom_id="writer", operations=("save",), outputs=("side_effect",), verb="set")
        )

        assert await registry.find_similar(_fingerprinted(make_atom(atom_id="getter"))) == []

    @pytest.mark.asyncio
    async def test_guard_excludes_unrelated_lookalikes(
        self, registry: ShadowRegistry, make_atom
    ) -> None:
        await registry.create_shadow(make_atom(atom_id="getOrder", verb="fetch", domain="order"))

        atom = _fingerprinted(make_atom(atom_id="getUser"))

        assert await registry.find_similar(atom, min_similarity=0.6) == []

    @pytest.mark.asyncio
    async def test_sorted_and_limited(self, registry: ShadowRegistry, make_atom) -> None:
        exact = await registry.create_shadow(make_atom(atom_id="exact"))
        close = await registry.create_shadow(
            make_atom(atom_id="close", verb="fetch", domain="user")
        )
        atom = _fingerprinted(make_atom(atom_id="new"))

        matches = await registry.find_similar(atom)

        assert [m.shadow.shadow_id for m in matches] == [exact.shadow_id, close.shadow_id]
        assert matches[0].similarity > matches[1].similarity

        limited = await registry.find_similar(atom, limit=1)
        assert [m.shadow.shadow_id for m in limited] == [exact.shadow_id]

    @pytest.mark.asyncio
    async def test_skips_missing_bodies(self, registry: ShadowRegistry, make_atom) -> None:
        shadow = await registry.create_shadow(make_atom(atom_id="old"))
        await registry.storage.delete(shadow.shadow_id)
        registry.cache.clear()

        assert await registry.find_similar(_fingerprinted(make_atom(atom_id="new"))) == []

    @pytest.mark.asyncio
    async def test_config_defaults(self, tmp_path, make_atom) -> None:
        config = LineageConfig(search=SearchConfig(limit=1))
        registry = ShadowRegistry(tmp_path / "store", config)
        await registry.create_shadow(make_atom(atom_id="a"))
        await registry.create_shadow(make_atom(atom_id="b"))

        matches = await registry.find_similar(_fingerprinted(make_atom(atom_id="new")))

        assert len(matches) == 1


class TestFindBestMatch:
    @pytest.mark.asyncio
    async def test_threshold_is_stricter(self, registry: ShadowRegistry, make_atom) -> None:
        await registry.create_shadow(make_atom(atom_id="old"))
        atom = _fingerprinted(make_atom(atom_id="new"))
        # Same structure and pattern, same-length sequence, different fingerprint
        atom.dna = replace(
            atom.dna,
            operation_sequence=("receive", "read", "return"),
            semantic_fingerprint="get:user:profile",
        )

        similar = await registry.find_similar(atom)
        assert len(similar) == 1
        assert similar[0].similarity == pytest.approx(0.8)

        assert await registry.find_best_match(atom) is None

    @pytest.mark.asyncio
    async def test_returns_single_best(self, registry: ShadowRegistry, make_atom) -> None:
        exact = await registry.create_shadow(make_atom(atom_id="exact"))
        await registry.create_shadow(make_atom(atom_id="close", verb="fetch", domain="user"))

        best = await registry.find_best_match(_fingerprinted(make_atom(atom_id="new")))

        assert best is not None
        assert best.shadow.shadow_id == exact.shadow_id

    @pytest.mark.asyncio
    async def test_module_functions(self, registry: ShadowRegistry, make_atom) -> None:
        shadow = await registry.create_shadow(make_atom(atom_id="old"))
        atom = _fingerprinted(make_atom(atom_id="new"))

        similar = await find_similar_shadows(atom, registry.index, registry.get_shadow)
        best = await find_best_match(atom, registry.index, registry.get_shadow)

        assert [m.shadow.shadow_id for m in similar] == [shadow.shadow_id]
        assert best.shadow.shadow_id == shadow.shadow_id
        assert best.to_dict()["similarity"] == pytest.approx(1.0)
