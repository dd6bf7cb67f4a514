"""Persistent storage for shadow bodies.

One JSON file per shadow, written atomically. Blocking file I/O runs in
worker threads so the event loop is never stalled; I/O failures propagate
to the caller unmodified.

Storage layout:
    {store_path}/
    ├── index.json           # secondary index (see ShadowIndex)
    └── shadows/
        ├── shadow_{uuid}.json
        └── ...
"""

import asyncio
import json
import logging
from pathlib import Path

from atomlineage.foundation.errors import ShadowStorageError
from atomlineage.foundation.utils.serialization import atomic_write_json, read_json
from atomlineage.lineage.models import Shadow

logger = logging.getLogger(__name__)


class ShadowStorage:
    """Reads and writes shadow documents under a directory."""

    def __init__(self, shadows_path: Path) -> None:
        self.shadows_path = shadows_path

    def _shadow_path(self, shadow_id: str) -> Path:
        """Get file path for a shadow."""
        if not shadow_id or "/" in shadow_id or "\\" in shadow_id or shadow_id.startswith("."):
            raise ValueError(f"Invalid shadow id: {shadow_id!r}")
        return self.shadows_path / f"{shadow_id}.json"

    # ─────────────────────────────────────────────────────────────────
    # Sync primitives (run in worker threads)
    # ─────────────────────────────────────────────────────────────────

    def _save_sync(self, shadow: Shadow) -> None:
        atomic_write_json(shadow.to_dict(), self._shadow_path(shadow.shadow_id))

    def _load_sync(self, shadow_id: str) -> Shadow | None:
        path = self._shadow_path(shadow_id)
        try:
            data = read_json(path)
        except json.JSONDecodeError as e:
            raise ShadowStorageError(path, f"invalid JSON: {e.msg}") from e
        if data is None:
            return None
        try:
            return Shadow.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            raise ShadowStorageError(path, f"malformed shadow: {e}") from e

    def _delete_sync(self, shadow_id: str) -> bool:
        try:
            self._shadow_path(shadow_id).unlink()
        except FileNotFoundError:
            return False
        return True

    def _list_ids_sync(self) -> list[str]:
        if not self.shadows_path.exists():
            return []
        return sorted(p.stem for p in self.shadows_path.glob("*.json"))

    # ─────────────────────────────────────────────────────────────────
    # Async API
    # ─────────────────────────────────────────────────────────────────

    async def save(self, shadow: Shadow) -> None:
        """Persist a shadow, overwriting any previous version.

        Raises:
            OSError: If the shadows directory is missing or unwritable
        """
        await asyncio.to_thread(self._save_sync, shadow)
        logger.debug("Saved shadow %s", shadow.shadow_id)

    async def load(self, shadow_id: str) -> Shadow | None:
        """Load a shadow, or None if it does not exist.

        Raises:
            ShadowStorageError: If the stored document cannot be decoded
        """
        return await asyncio.to_thread(self._load_sync, shadow_id)

    async def exists(self, shadow_id: str) -> bool:
        """Check whether a shadow document exists."""
        return await asyncio.to_thread(self._shadow_path(shadow_id).exists)

    async def delete(self, shadow_id: str) -> bool:
        """Remove a shadow document (maintenance only). Missing files are ignored.

        Returns:
            True if a file was removed
        """
        return await asyncio.to_thread(self._delete_sync, shadow_id)

    async def list_ids(self) -> list[str]:
        """List every stored shadow ID."""
        return await asyncio.to_thread(self._list_ids_sync)
