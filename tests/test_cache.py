"""Tests for the shadow LRU cache."""

from dataclasses import replace

import pytest

from atomlineage.lineage.cache import ShadowCache
from atomlineage.lineage.models import Atom
from atomlineage.lineage.tracker import register_death


def _shadow(shadow_id: str):
    return replace(register_death(Atom(id=f"atom-{shadow_id}")), shadow_id=shadow_id)


class TestShadowCache:
    def test_get_set(self) -> None:
        cache = ShadowCache(max_size=3)
        shadow = _shadow("a")

        cache.set(shadow)

        assert cache.get("a") is shadow
        assert cache.get("missing") is None
        assert cache.has("a")
        assert cache.size == 1

    def test_evicts_least_recently_used(self) -> None:
        cache = ShadowCache(max_size=2)
        cache.set(_shadow("a"))
        cache.set(_shadow("b"))

        cache.get("a")  # a is now most recently used
        cache.set(_shadow("c"))

        assert cache.has("a")
        assert not cache.has("b")
        assert cache.has("c")
        assert cache.size == 2

    def test_has_does_not_refresh(self) -> None:
        cache = ShadowCache(max_size=2)
        cache.set(_shadow("a"))
        cache.set(_shadow("b"))

        cache.has("a")
        cache.set(_shadow("c"))

        assert not cache.has("a")

    def test_overwrite_does_not_evict(self) -> None:
        cache = ShadowCache(max_size=2)
        cache.set(_shadow("a"))
        cache.set(_shadow("b"))

        updated = _shadow("a")
        cache.set(updated)

        assert cache.size == 2
        assert cache.get("a") is updated
        assert cache.has("b")

    def test_invalidate_and_clear(self) -> None:
        cache = ShadowCache()
        cache.set(_shadow("a"))
        cache.set(_shadow("b"))

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert not cache.has("a")

        cache.clear()
        assert cache.size == 0

    def test_stats(self) -> None:
        cache = ShadowCache(max_size=10)
        cache.set(_shadow("a"))
        cache.get("a")
        cache.get("a")
        cache.get("b")

        stats = cache.stats()

        assert stats["size"] == 1
        assert stats["max_size"] == 10
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == pytest.approx(2 / 3)

    def test_empty_hit_rate(self) -> None:
        assert ShadowCache().hit_rate == 0.0

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            ShadowCache(max_size=0)
