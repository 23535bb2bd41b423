"""Unit tests for the in-process query cache."""

import pytest

from app.shared.cache import QueryCache, cached, query_cache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(clock=clock)


class TestQueryCache:
    def test_miss_then_hit(self, cache):
        found, _ = cache.get("k")
        assert found is False

        cache.set("k", 42, ttl=10)
        assert cache.get("k") == (True, 42)

    def test_entries_expire(self, cache, clock):
        cache.set("k", "v", ttl=5)
        clock.now += 5
        assert cache.get("k") == (False, None)
        assert len(cache) == 0

    def test_none_is_cached(self, cache):
        cache.set("missing", None, ttl=5)
        assert cache.get("missing") == (True, None)

    def test_invalidate_by_tag(self, cache):
        cache.set("a", 1, ttl=10, tags=["events", "event_1"])
        cache.set("b", 2, ttl=10, tags=["events", "event_2"])
        cache.set("c", 3, ttl=10, tags=["guides"])

        assert cache.invalidate("event_1") == 1
        assert cache.get("a") == (False, None)
        assert cache.get("b") == (True, 2)

        assert cache.invalidate("events", "guides") == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_get_or_load_counts(self, cache):
        calls = []

        async def loader():
            calls.append(1)
            return "row"

        assert await cache.get_or_load("k", loader, ttl=10) == "row"
        assert await cache.get_or_load("k", loader, ttl=10) == "row"
        assert len(calls) == 1
        assert (cache.hits, cache.misses) == (1, 1)


class TestCachedDecorator:
    @pytest.mark.asyncio
    async def test_session_is_not_part_of_key(self, cache):
        calls = []

        @cached("thing", ttl=lambda: 30, tags=lambda thing_id: [f"thing_{thing_id}"], cache=cache)
        async def get_thing(db, thing_id):
            calls.append((db, thing_id))
            return {"id": thing_id}

        assert await get_thing("session-1", 7) == {"id": 7}
        assert await get_thing("session-2", 7) == {"id": 7}
        assert await get_thing("session-2", 8) == {"id": 8}
        assert [c[1] for c in calls] == [7, 8]

    @pytest.mark.asyncio
    async def test_invalidation_forces_reload(self, cache):
        version = {"n": 0}

        @cached("counter", ttl=lambda: 30, tags=lambda: ["counters"], cache=cache)
        async def read(db):
            version["n"] += 1
            return version["n"]

        assert await read(None) == 1
        assert await read(None) == 1
        cache.invalidate("counters")
        assert await read(None) == 2

    @pytest.mark.asyncio
    async def test_empty_cache_passed_in_is_used(self, cache):
        @cached("thing", ttl=lambda: 30, tags=lambda thing_id: ["things"], cache=cache)
        async def get_thing(db, thing_id):
            return {"id": thing_id}

        assert len(cache) == 0
        await get_thing(None, 1)

        assert len(cache) == 1
        assert len(query_cache) == 0
