"""Tests for the profile-aware catalog cache."""

import asyncio

from conftest import run

from streamview.errors import NetworkFailure
from streamview.models.media import Category, LiveItem, MediaType
from streamview.services.cache_service import CacheService
from streamview.services.http_client import HttpClientService
from streamview.services.xtream_service import XtreamService


class FakeSource:
    """Stands in for XtreamService; answers per profile and counts fetches."""

    def __init__(self):
        self.calls: list[tuple[str, MediaType, str]] = []
        self.fail = False
        self.gate: asyncio.Event | None = None

    async def fetch_categories(self, media_type, profile=None):
        self.calls.append(("categories", media_type, profile))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise NetworkFailure("connection refused")
        return [Category(id="1", name=f"US {profile} {media_type.value}")]

    async def fetch_category_items(self, media_type, profile=None):
        self.calls.append(("items", media_type, profile))
        if self.fail:
            raise NetworkFailure("connection refused")
        return [LiveItem(id="101", name=f"{profile} channel")]


def make_cache(config_service):
    source = FakeSource()
    return CacheService(config_service, source), source


class TestProfileInvalidation:

    def test_second_call_same_profile_is_served_from_cache(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            first = await cache.retrieve_categories(MediaType.MOVIE)
            second = await cache.retrieve_categories(MediaType.MOVIE)
            return first, second

        first, second = run(scenario())
        assert first == second
        assert len(source.calls) == 1

    def test_profile_change_triggers_refetch_and_replaces_entry(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            await cache.retrieve_categories(MediaType.MOVIE)
            config_service.set_active_profile("bob")
            bob = await cache.retrieve_categories(MediaType.MOVIE)
            await cache.retrieve_categories(MediaType.MOVIE)
            return bob

        bob = run(scenario())
        assert bob[0].name == "US bob movie"
        assert [c[2] for c in source.calls] == ["alice", "bob"]
        entries = cache.stats()
        assert len(entries) == 1
        assert entries[0]["profile"] == "bob"

    def test_switching_back_refetches(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            for name in ("alice", "bob", "alice"):
                config_service.set_active_profile(name)
                await cache.retrieve_categories(MediaType.LIVE)

        run(scenario())
        assert [c[2] for c in source.calls] == ["alice", "bob", "alice"]

    def test_media_types_and_kinds_are_cached_separately(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            await cache.retrieve_categories(MediaType.LIVE)
            await cache.retrieve_categories(MediaType.SERIES)
            await cache.retrieve_category_info(MediaType.LIVE)
            await cache.retrieve_categories(MediaType.LIVE)
            await cache.retrieve_category_info(MediaType.LIVE)

        run(scenario())
        assert len(source.calls) == 3
        assert len(cache.stats()) == 3

    def test_returned_list_is_a_copy(self, config_service):
        cache, _ = make_cache(config_service)

        async def scenario():
            first = await cache.retrieve_categories(MediaType.LIVE)
            first.clear()
            return await cache.retrieve_categories(MediaType.LIVE)

        assert len(run(scenario())) == 1


class TestFailures:

    def test_failure_returns_empty_and_is_retried(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            source.fail = True
            failed = await cache.retrieve_categories(MediaType.MOVIE)
            source.fail = False
            recovered = await cache.retrieve_categories(MediaType.MOVIE)
            return failed, recovered

        failed, recovered = run(scenario())
        assert failed == []
        assert len(recovered) == 1
        assert len(source.calls) == 2

    def test_invalidate(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            await cache.retrieve_categories(MediaType.MOVIE)
            await cache.retrieve_categories(MediaType.LIVE)
            assert cache.invalidate(MediaType.MOVIE) == 1
            await cache.retrieve_categories(MediaType.MOVIE)
            await cache.retrieve_categories(MediaType.LIVE)

        run(scenario())
        assert len(source.calls) == 3
        assert cache.invalidate() == 2
        assert cache.stats() == []

    def test_category_rows_carrying_id_fields_are_listed(self, config_service, panel):
        panel.panels["alpha.example"]["get_live_categories"] = [
            {"category_id": "1", "category_name": "US News", "id": 7},
        ]
        source = XtreamService(config_service, HttpClientService(transport=panel.transport))
        cats = run(CacheService(config_service, source).retrieve_categories(MediaType.LIVE))
        assert [(c.id, c.name) for c in cats] == [("1", "US News")]


class TestConcurrency:

    def test_overlapping_calls_share_one_fetch(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            source.gate = asyncio.Event()
            waiters = [asyncio.create_task(cache.retrieve_categories(MediaType.MOVIE)) for _ in range(3)]
            await asyncio.sleep(0)
            source.gate.set()
            return await asyncio.gather(*waiters)

        results = run(scenario())
        assert len(source.calls) == 1
        assert results[0] == results[1] == results[2]
        assert cache.fetch_count == 1

    def test_result_landing_after_profile_switch_is_not_cached(self, config_service):
        cache, source = make_cache(config_service)

        async def scenario():
            source.gate = asyncio.Event()
            pending = asyncio.create_task(cache.retrieve_categories(MediaType.MOVIE))
            await asyncio.sleep(0)
            config_service.set_active_profile("bob")
            source.gate.set()
            stale = await pending
            source.gate = None
            fresh = await cache.retrieve_categories(MediaType.MOVIE)
            return stale, fresh

        stale, fresh = run(scenario())
        assert stale[0].name == "US alice movie"
        assert fresh[0].name == "US bob movie"
        assert [c[2] for c in source.calls] == ["alice", "bob"]
        assert [e["profile"] for e in cache.stats()] == ["bob"]
