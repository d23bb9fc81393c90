"""Unit tests for the subscription-fed region cache."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from mapfence.geometry import Point
from mapfence.regions import (
    InMemoryRegionStore,
    Region,
    RegionCache,
    RegionDefaults,
    RegionUpdate,
    StoreError,
)


class TestRegionCacheAttach:
    """Tests for wiring the cache to a store."""

    def test_attach_loads_initial_state(self, memory_store: InMemoryRegionStore) -> None:
        cache = RegionCache()
        assert not cache.loaded

        cache.attach(memory_store)

        assert cache.loaded
        assert cache.regions == []
        assert cache.playing_area is None

    @pytest.mark.asyncio
    async def test_pushes_replace_contents(
        self, memory_store: InMemoryRegionStore, rect: Callable[..., tuple]
    ) -> None:
        cache = RegionCache()
        cache.attach(memory_store)

        region = await memory_store.create_region(rect(0, 0, 10, 10), RegionDefaults())
        area = await memory_store.set_playing_area(rect(0, 0, 90, 90))

        assert cache.regions == [region]
        assert cache.playing_area == area

    @pytest.mark.asyncio
    async def test_detach_stops_updates(
        self, memory_store: InMemoryRegionStore, rect: Callable[..., tuple]
    ) -> None:
        cache = RegionCache()
        cache.attach(memory_store)
        cache.detach()

        await memory_store.create_region(rect(0, 0, 10, 10), RegionDefaults())

        assert cache.regions == []

    def test_load_error_recorded(self) -> None:
        cache = RegionCache()
        cache.attach(InMemoryRegionStore(fail_on={"load"}))

        assert cache.loaded
        assert isinstance(cache.load_error, StoreError)
        assert cache.regions == []

    def test_listeners_fire_on_push(self, make_region: Callable[..., Region]) -> None:
        cache = RegionCache()
        seen: list[int] = []
        cache.add_listener(lambda c: seen.append(len(c.regions)))

        cache.on_regions([make_region("a", (0, 0, 10, 10))])

        assert seen == [1]


class TestRegionCacheProvisional:
    """Tests for provisional (interim) values."""

    @pytest.fixture
    def cache(self, make_region: Callable[..., Region]) -> RegionCache:
        cache = RegionCache()
        cache.on_regions(
            [make_region("a", (0, 0, 10, 10)), make_region("b", (20, 20, 30, 30), order=1)]
        )
        return cache

    def test_provisional_shown_over_authoritative(self, cache: RegionCache) -> None:
        original = cache.get("a")
        assert original is not None
        moved = original.model_copy(
            update={"polygon": (Point(x=1, y=1), *original.polygon[1:])}
        )

        cache.apply_provisional(moved)

        assert cache.get("a") == moved
        assert cache.authoritative_regions[0] == original
        assert cache.has_provisional("a")
        assert [r.id for r in cache.regions] == ["a", "b"]

    def test_next_push_discards_provisional(
        self, cache: RegionCache, make_region: Callable[..., Region]
    ) -> None:
        original = cache.get("a")
        assert original is not None
        cache.apply_provisional(original.model_copy(update={"name": "interim"}))

        pushed = make_region("a", (0, 0, 10, 10), name="saved")
        cache.on_regions([pushed])

        assert not cache.has_provisional("a")
        assert cache.get("a") == pushed

    def test_discard_provisional(self, cache: RegionCache) -> None:
        original = cache.get("b")
        assert original is not None
        cache.apply_provisional(original.model_copy(update={"name": "interim"}))

        cache.discard_provisional("b")

        assert cache.get("b") == original

    def test_unknown_region_ignored(
        self, cache: RegionCache, make_region: Callable[..., Region]
    ) -> None:
        cache.apply_provisional(make_region("ghost", (0, 0, 5, 5)))
        assert cache.get("ghost") is None


class TestRegionCacheConvergence:
    """Tests that the cache ends where the store ends."""

    @pytest.mark.asyncio
    async def test_two_caches_agree(
        self, memory_store: InMemoryRegionStore, rect: Callable[..., tuple]
    ) -> None:
        left, right = RegionCache(), RegionCache()
        left.attach(memory_store)
        right.attach(memory_store)

        region = await memory_store.create_region(rect(0, 0, 10, 10), RegionDefaults())
        await memory_store.update_region(region.id, RegionUpdate(floors=(2, 3)))

        assert left.regions == right.regions == await memory_store.load_regions()
