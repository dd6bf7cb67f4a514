"""Point-lookup cache for shadows.

A true LRU: hits move an entry to the back of the eviction queue, and the
least recently *used* entry is evicted when the cache is full. Shadows are
immutable records, so cached instances can be handed out directly.
"""

import logging
import threading
from collections import OrderedDict

from atomlineage.lineage.models import Shadow

logger = logging.getLogger(__name__)


class ShadowCache:
    """LRU cache of shadows keyed by shadow ID.

    Thread-safe via internal locking (storage I/O runs in worker threads).
    Uses OrderedDict for O(1) LRU operations.
    """

    def __init__(self, max_size: int = 100) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._cache: OrderedDict[str, Shadow] = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._hits = 0
        self._misses = 0

    def get(self, shadow_id: str) -> Shadow | None:
        """Get cached shadow or None."""
        with self._lock:
            shadow = self._cache.get(shadow_id)
            if shadow is not None:
                self._hits += 1
                self._cache.move_to_end(shadow_id)
            else:
                self._misses += 1
            return shadow

    def set(self, shadow: Shadow) -> None:
        """Cache a shadow, evicting the least recently used entry if full."""
        shadow_id = shadow.shadow_id
        with self._lock:
            if shadow_id in self._cache:
                del self._cache[shadow_id]
            while len(self._cache) >= self._max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted shadow %s from cache", evicted)
            self._cache[shadow_id] = shadow

    def has(self, shadow_id: str) -> bool:
        """Check if key exists without updating access order."""
        with self._lock:
            return shadow_id in self._cache

    def invalidate(self, shadow_id: str) -> bool:
        """Drop a single entry. Returns True if it was cached."""
        with self._lock:
            return self._cache.pop(shadow_id, None) is not None

    def clear(self) -> None:
        """Clear all cached shadows."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    @property
    def size(self) -> int:
        """Current number of cached entries."""
        return len(self._cache)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def hit_rate(self) -> float:
        """Cache hit rate (0.0 to 1.0)."""
        total = self._hits + self._misses
        return self._hits / total if total > 0 else 0.0

    def stats(self) -> dict[str, int | float]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self.hit_rate,
            }
