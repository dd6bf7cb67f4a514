"""Shadow registry: the store handle downstream callers work with.

Composes storage, index, cache, search and ancestry propagation behind a
single explicit handle. There is no process-wide instance; construct one
per store and pass it to whoever needs it.

Storage layout:
    {store_path}/
    ├── index.json           # shadow entries + parent → children links
    └── shadows/
        ├── shadow_{uuid}.json
        └── ...

Example:
    >>> registry = ShadowRegistry(Path("/project/.atomlineage"))
    >>> shadow = await registry.create_shadow(old_atom, reason="deleted")
    >>> ancestry = await registry.enrich_with_ancestry(new_atom)
    >>> assert ancestry.replaced == shadow.shadow_id
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any

from atomlineage.foundation.errors import InvalidAtomError
from atomlineage.foundation.types.config import LineageConfig
from atomlineage.lineage.ancestry import propagate_inheritance
from atomlineage.lineage.cache import ShadowCache
from atomlineage.lineage.dna import compute_dna
from atomlineage.lineage.index import ShadowIndex
from atomlineage.lineage.models import (
    Ancestry,
    Atom,
    IndexEntry,
    Shadow,
    ShadowStatus,
)
from atomlineage.lineage.search import SimilarShadow, find_best_match, find_similar_shadows
from atomlineage.lineage.storage import ShadowStorage
from atomlineage.lineage.tracker import reconstruct_lineage, register_death
from atomlineage.lineage.validation import validate_for_lineage

logger = logging.getLogger(__name__)


class ShadowRegistry:
    """Tombstone store for deleted atoms with lineage-aware lookups.

    Shadow bodies are read-modify-written under one write lock so that
    two create/replace sequences never interleave; the index serializes
    its own document updates.
    """

    def __init__(self, store_path: Path, config: LineageConfig | None = None) -> None:
        self.config = config or LineageConfig()
        self.store_path = store_path
        self.shadows_path = store_path / "shadows"
        self.shadows_path.mkdir(parents=True, exist_ok=True)

        self.storage = ShadowStorage(self.shadows_path)
        self.index = ShadowIndex(store_path / "index.json")
        self.cache = ShadowCache(self.config.store.cache_size)
        self._write_lock = asyncio.Lock()

    @classmethod
    def for_project(cls, project_root: Path, config: LineageConfig | None = None) -> "ShadowRegistry":
        """Open the registry under a project's configured store directory."""
        config = config or LineageConfig()
        return cls(project_root / config.store.base_path, config)

    # ─────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────

    async def _save_shadow(self, shadow: Shadow) -> None:
        await self.storage.save(shadow)
        self.cache.set(shadow)
        await self.index.update_shadow(shadow)

    async def get_shadow(self, shadow_id: str) -> Shadow | None:
        """Load a shadow, cache first."""
        shadow = self.cache.get(shadow_id)
        if shadow is not None:
            return shadow
        shadow = await self.storage.load(shadow_id)
        if shadow is not None:
            self.cache.set(shadow)
        return shadow

    # ─────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────

    async def create_shadow(
        self,
        atom: Atom,
        *,
        reason: str = "unknown",
        replacement_id: str | None = None,
        commits: Iterable[str] = (),
        risk: float = 0.0,
    ) -> Shadow:
        """Bury a deleted atom.

        Fingerprints the atom if needed (without modifying it), persists
        the shadow, indexes it, and links it under its parent shadow when
        the atom was itself a descendant.

        Raises:
            InvalidAtomError: If atom is None or has no id
        """
        if atom is None:
            raise InvalidAtomError("atom is required")
        if not atom.id:
            raise InvalidAtomError("atom has no id")

        validation = validate_for_lineage(atom)
        if not validation.valid:
            logger.warning(
                "Burying %s despite metadata errors (%s): %s",
                atom.id,
                validation.summary(),
                "; ".join(validation.errors),
            )
        elif validation.warnings:
            logger.debug(
                "Metadata warnings for %s (%s): %s",
                atom.id,
                validation.summary(),
                "; ".join(validation.warnings),
            )

        if atom.dna is None:
            atom = replace(atom, dna=compute_dna(atom))

        shadow = register_death(
            atom,
            reason=reason,
            replacement_id=replacement_id,
            commits=commits,
            risk=risk,
            config=self.config.ancestry,
        )

        async with self._write_lock:
            await self._save_shadow(shadow)

            parent_id = shadow.lineage.parent_shadow_id
            if parent_id:
                parent = await self.get_shadow(parent_id)
                if parent is None:
                    logger.warning(
                        "Parent shadow %s of %s not found", parent_id, shadow.shadow_id
                    )
                else:
                    await self._save_shadow(parent.with_child(shadow.shadow_id))

        logger.info(
            "Created shadow %s for %s (%s)", shadow.shadow_id, atom.id, shadow.status.value
        )
        return shadow

    async def mark_replaced(self, shadow_id: str, replacement_id: str) -> Shadow | None:
        """Mark a shadow as replaced by a live atom. No-op if the shadow is missing."""
        async with self._write_lock:
            return await self._mark_replaced(shadow_id, replacement_id)

    async def _mark_replaced(self, shadow_id: str, replacement_id: str) -> Shadow | None:
        # Caller holds _write_lock.
        shadow = await self.get_shadow(shadow_id)
        if shadow is None:
            logger.debug("Cannot mark %s replaced: not found", shadow_id)
            return None
        updated = shadow.with_replaced(replacement_id)
        await self._save_shadow(updated)
        logger.info("Shadow %s replaced by %s", shadow_id, replacement_id)
        return updated

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    async def get_lineage(self, shadow_id: str) -> list[Shadow]:
        """Ancestor chain of a shadow, root first, ending with the shadow itself.

        Raises:
            LineageCycleError: If parent links form a cycle
            LineageDepthError: If the chain exceeds the configured depth
        """
        return await reconstruct_lineage(
            shadow_id, self.get_shadow, self.config.ancestry.max_lineage_depth
        )

    async def get_children(self, shadow_id: str) -> list[str]:
        """IDs of shadows recorded as direct descendants."""
        return await self.index.children_of(shadow_id)

    async def list_shadows(
        self,
        *,
        status: ShadowStatus | str | None = None,
        flow_type: str | None = None,
        pattern_hash: str | None = None,
    ) -> list[IndexEntry]:
        """Index entries matching every given filter."""
        return await self.index.filter(
            status=status, flow_type=flow_type, pattern_hash=pattern_hash
        )

    async def find_similar(
        self,
        atom: Atom,
        *,
        min_similarity: float | None = None,
        limit: int | None = None,
        include_replaced: bool = False,
    ) -> list[SimilarShadow]:
        """Shadows similar to ``atom``, best first."""
        return await find_similar_shadows(
            atom,
            self.index,
            self.get_shadow,
            min_similarity=min_similarity,
            limit=limit,
            include_replaced=include_replaced,
            config=self.config,
        )

    async def find_best_match(
        self,
        atom: Atom,
        *,
        min_similarity: float | None = None,
    ) -> SimilarShadow | None:
        """The single best unreplaced match for ``atom``, or None."""
        return await find_best_match(
            atom,
            self.index,
            self.get_shadow,
            min_similarity=min_similarity,
            config=self.config,
        )

    # ─────────────────────────────────────────────────────────────────
    # Enrichment
    # ─────────────────────────────────────────────────────────────────

    async def enrich_with_ancestry(self, atom: Atom) -> Ancestry:
        """Attach ancestry to a new atom.

        Computes the atom's DNA when missing, then looks for its best
        predecessor. Without one the atom is a genesis atom; with one the
        predecessor's inheritance is propagated and the matched shadow is
        marked replaced by ``atom.id``.

        Returns:
            The ancestry now set on ``atom.ancestry``
        """
        if atom.dna is None:
            atom.dna = compute_dna(atom)

        # Search and claim under one lock: a shadow gets at most one successor.
        async with self._write_lock:
            match = await self.find_best_match(atom)
            if match is None:
                atom.ancestry = Ancestry.genesis_record()
                logger.debug("No ancestor for %s, genesis", atom.id)
                return atom.ancestry

            shadow = match.shadow
            chain = await self.get_lineage(shadow.shadow_id)
            ancestors = [s.shadow_id for s in reversed(chain) if s.shadow_id != shadow.shadow_id]

            atom.ancestry = propagate_inheritance(
                shadow, atom, match.similarity, ancestors, self.config.ancestry
            )
            await self._mark_replaced(shadow.shadow_id, atom.id)

        logger.info(
            "Atom %s descends from %s (generation %d, similarity %.2f)",
            atom.id,
            shadow.shadow_id,
            atom.ancestry.generation,
            match.similarity,
        )
        return atom.ancestry

    # ─────────────────────────────────────────────────────────────────
    # Statistics
    # ─────────────────────────────────────────────────────────────────

    async def stats(self) -> dict[str, Any]:
        """Counts by status and flow type, deepest generation, cache stats."""
        entries = await self.index.get_entries()
        return {
            "total": len(entries),
            "by_status": dict(Counter(e.status.value for e in entries)),
            "by_flow_type": dict(Counter(e.flow_type or "none" for e in entries)),
            "max_generation": max((e.generation for e in entries), default=0),
            "cache": self.cache.stats(),
        }
