"""Secondary index over the shadow store.

A single shared document lets searches filter shadows without loading
their bodies:

    {
      "version": 1,
      "updated_at": "...",
      "shadows": {shadow_id: IndexEntry},
      "lineages": {parent_shadow_id: [child_shadow_id, ...]}
    }

Every mutation is a load-mutate-save of the whole document. Mutations are
serialized behind one asyncio.Lock so that two writers interleaving
across an await can never drop each other's updates. Nothing coordinates
writers in different processes: treat a store as single-writer.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from atomlineage.foundation.errors import ShadowStorageError
from atomlineage.foundation.utils.serialization import atomic_write_json, read_json
from atomlineage.lineage.models import IndexEntry, Shadow, ShadowStatus, utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexDocument:
    """In-memory form of the index file."""

    shadows: dict[str, IndexEntry] = field(default_factory=dict)
    lineages: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self, version: int) -> dict:
        return {
            "version": version,
            "updated_at": utc_now().isoformat(),
            "shadows": {sid: entry.to_dict() for sid, entry in self.shadows.items()},
            "lineages": {pid: list(children) for pid, children in self.lineages.items()},
        }


class ShadowIndex:
    """Index of shadows by ID with parent → children links."""

    INDEX_VERSION = 1

    def __init__(self, index_path: Path) -> None:
        self.index_path = index_path
        self._lock = asyncio.Lock()

    # ─────────────────────────────────────────────────────────────────
    # Document I/O
    # ─────────────────────────────────────────────────────────────────

    def _load_sync(self) -> IndexDocument:
        try:
            data = read_json(self.index_path)
        except json.JSONDecodeError as e:
            raise ShadowStorageError(self.index_path, f"invalid JSON: {e.msg}") from e
        if data is None:
            return IndexDocument()

        document = IndexDocument()
        for shadow_id, raw in (data.get("shadows") or {}).items():
            try:
                document.shadows[shadow_id] = IndexEntry.from_dict(raw)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Skipping corrupt index entry %s: %s", shadow_id, e)
        for parent_id, children in (data.get("lineages") or {}).items():
            if isinstance(children, list):
                document.lineages[parent_id] = [str(c) for c in children]
        return document

    def _save_sync(self, document: IndexDocument) -> None:
        atomic_write_json(document.to_dict(self.INDEX_VERSION), self.index_path)

    async def load(self) -> IndexDocument:
        """Read the current index document."""
        return await asyncio.to_thread(self._load_sync)

    async def _save(self, document: IndexDocument) -> None:
        await asyncio.to_thread(self._save_sync, document)

    # ─────────────────────────────────────────────────────────────────
    # Mutations (serialized)
    # ─────────────────────────────────────────────────────────────────

    async def update_shadow(self, shadow: Shadow) -> IndexEntry:
        """Insert or refresh a shadow's entry and its parent link."""
        entry = IndexEntry.of(shadow)
        async with self._lock:
            document = await self.load()
            document.shadows[shadow.shadow_id] = entry
            parent_id = shadow.lineage.parent_shadow_id
            if parent_id:
                children = document.lineages.setdefault(parent_id, [])
                if shadow.shadow_id not in children:
                    children.append(shadow.shadow_id)
            await self._save(document)
        return entry

    async def remove_shadow(self, shadow_id: str) -> bool:
        """Drop a shadow's entry and any links to it (maintenance only)."""
        async with self._lock:
            document = await self.load()
            removed = document.shadows.pop(shadow_id, None) is not None
            document.lineages.pop(shadow_id, None)
            for children in document.lineages.values():
                if shadow_id in children:
                    children.remove(shadow_id)
            await self._save(document)
        return removed

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    async def get_entries(self) -> list[IndexEntry]:
        """All index entries."""
        document = await self.load()
        return list(document.shadows.values())

    async def get_entry(self, shadow_id: str) -> IndexEntry | None:
        document = await self.load()
        return document.shadows.get(shadow_id)

    async def children_of(self, parent_shadow_id: str) -> list[str]:
        """Shadow IDs recorded as direct descendants of a parent shadow."""
        document = await self.load()
        return list(document.lineages.get(parent_shadow_id, ()))

    async def filter(
        self,
        *,
        status: ShadowStatus | str | None = None,
        flow_type: str | None = None,
        pattern_hash: str | None = None,
    ) -> list[IndexEntry]:
        """Entries matching every given criterion, newest death first."""
        status = ShadowStatus(status) if status is not None else None
        entries = [
            entry
            for entry in await self.get_entries()
            if (status is None or entry.status is status)
            and (flow_type is None or entry.flow_type == flow_type)
            and (pattern_hash is None or entry.pattern_hash == pattern_hash)
        ]
        entries.sort(key=lambda e: e.died_at, reverse=True)
        return entries
