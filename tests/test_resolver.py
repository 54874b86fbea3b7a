"""Tests for the cached, rate-limited classification resolver."""

import asyncio
import time
from unittest.mock import AsyncMock

import pytest

from actor_graph.classification import (
    ClassificationLookupError,
    ClassificationResolver,
    ClassificationSource,
    category_stats,
    group_by_category,
)
from actor_graph.config import GraphConfig
from actor_graph.types import Category


def make_source(return_value=None, side_effect=None):
    source = AsyncMock(spec=ClassificationSource)
    if side_effect is not None:
        source.instance_of.side_effect = side_effect
    else:
        source.instance_of.return_value = ["Q5"] if return_value is None else return_value
    return source


class TestResolutionOrder:
    """Overrides, reference index and cache come before external lookups."""

    @pytest.mark.asyncio
    async def test_override_skips_lookup(self, config):
        source = make_source(["Q5"])
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Israel") == Category.COUNTRY
        assert await resolver.classify("  congress ") == Category.LEGISLATIVE_BRANCH
        source.instance_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_overrides_replace_defaults(self, config):
        source = make_source(["Q5"])
        resolver = ClassificationResolver(
            source, config=config, overrides={"Acme": Category.ORGANIZATION}
        )

        assert await resolver.classify("acme") == Category.ORGANIZATION
        assert await resolver.classify("Israel") == Category.PERSON
        source.instance_of.assert_awaited_once_with("Israel")

    @pytest.mark.asyncio
    async def test_reference_index_skips_lookup(self, config, index):
        source = make_source(["Q5"])
        resolver = ClassificationResolver(source, reference_index=index, config=config)

        assert await resolver.classify("Democrats") == Category.POLITICAL_ORGANIZATION
        source.instance_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_reference_substring_match_wins(self, config, index):
        """Approximate catalog matches take precedence over the external source."""
        source = make_source(["Q43229"])
        resolver = ClassificationResolver(source, reference_index=index, config=config)

        # "nato" is a substring of the "senator sanders" alias
        assert await resolver.classify("NATO") == Category.PUBLIC_OFFICE
        source.instance_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_name(self, config):
        source = make_source()
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("") == Category.UNKNOWN
        assert await resolver.classify("   ") == Category.UNKNOWN
        source.instance_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_lookup_uses_canonical_name(self, config):
        source = make_source(["Q327333"])
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Environmental Agencies's") == Category.ORGANIZATION
        source.instance_of.assert_awaited_once_with("Environmental Agency")


class TestCaching:
    """Results are cached under raw and canonical keys."""

    @pytest.mark.asyncio
    async def test_second_call_hits_cache(self, config):
        source = make_source(["Q6256"])
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Russia") == Category.COUNTRY
        assert await resolver.classify("Russia") == Category.COUNTRY
        assert source.instance_of.await_count == 1

    @pytest.mark.asyncio
    async def test_variants_share_cache_entry(self, config):
        source = make_source(["Q43229"])
        resolver = ClassificationResolver(source, config=config)

        await resolver.classify("NATO's")
        assert await resolver.classify("NATO") == Category.ORGANIZATION
        assert source.instance_of.await_count == 1
        assert resolver.cached("NATO's") == Category.ORGANIZATION

    @pytest.mark.asyncio
    async def test_failure_cached_as_unknown(self, config):
        source = make_source(side_effect=ClassificationLookupError("HTTP 503"))
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Atlantis") == Category.UNKNOWN
        assert await resolver.classify("Atlantis") == Category.UNKNOWN
        assert source.instance_of.await_count == 1

    @pytest.mark.asyncio
    async def test_failure_retried_when_not_cached(self, config):
        config = config.with_overrides(cache_failed_lookups=False)
        source = make_source(side_effect=[ClassificationLookupError("timeout"), ["Q6256"]])
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Atlantis") == Category.UNKNOWN
        assert resolver.cached("Atlantis") is None
        assert await resolver.classify("Atlantis") == Category.COUNTRY
        assert source.instance_of.await_count == 2

    @pytest.mark.asyncio
    async def test_no_match_is_unknown_and_cached(self, config):
        source = make_source([])
        resolver = ClassificationResolver(source, config=config)

        assert await resolver.classify("Nowhere Land") == Category.UNKNOWN
        assert resolver.cached("Nowhere Land") == Category.UNKNOWN

    @pytest.mark.asyncio
    async def test_clear_cache_and_info(self, config):
        source = make_source(["Q5"])
        resolver = ClassificationResolver(source, config=config)

        await resolver.classify("Jane Doe")
        info = resolver.cache_info()
        assert info.size == 1
        assert info.in_flight == 0
        assert info.entries == {"Jane Doe": Category.PERSON}

        resolver.clear_cache()
        assert resolver.cache_info().size == 0


class TestSingleFlight:
    """Concurrent requests for one canonical name share one lookup."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_lookup(self, config):
        release = asyncio.Event()

        async def slow_lookup(name):
            await release.wait()
            return ["Q6256"]

        source = make_source(side_effect=slow_lookup)
        resolver = ClassificationResolver(source, config=config)

        tasks = [
            asyncio.create_task(resolver.classify(name))
            for name in ("Russia", "Russia", " Russia ", "Russia's")
        ]
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert resolver.cache_info().in_flight == 1

        release.set()
        results = await asyncio.gather(*tasks)

        assert results == [Category.COUNTRY] * 4
        assert source.instance_of.await_count == 1
        assert resolver.cache_info().in_flight == 0

    @pytest.mark.asyncio
    async def test_shared_failure_resolves_unknown_for_all(self, config):
        release = asyncio.Event()

        async def failing_lookup(name):
            await release.wait()
            raise ClassificationLookupError("connection reset")

        source = make_source(side_effect=failing_lookup)
        resolver = ClassificationResolver(source, config=config)

        tasks = [asyncio.create_task(resolver.classify("Atlantis")) for _ in range(3)]
        await asyncio.sleep(0)
        release.set()

        assert await asyncio.gather(*tasks) == [Category.UNKNOWN] * 3
        assert source.instance_of.await_count == 1


class TestRateLimit:
    """Dispatches are spaced by the minimum interval across all callers."""

    @pytest.mark.asyncio
    async def test_dispatch_spacing(self, config):
        dispatched: list[float] = []

        async def record_time(name):
            dispatched.append(time.monotonic())
            return ["Q5"]

        source = make_source(side_effect=record_time)
        resolver = ClassificationResolver(source, config=config, min_interval=0.05)

        await resolver.classify_many(["Alpha One", "Bravo Two", "Charlie Three", "Delta Four"])

        assert len(dispatched) == 4
        gaps = [b - a for a, b in zip(dispatched, dispatched[1:])]
        assert all(gap >= 0.045 for gap in gaps)
        assert resolver.lookups_dispatched == 4

    @pytest.mark.asyncio
    async def test_interval_from_config(self):
        resolver = ClassificationResolver(make_source(), config=GraphConfig(min_lookup_interval=0.3))
        assert resolver.min_interval == 0.3


class TestClassifyMany:
    @pytest.mark.asyncio
    async def test_unique_names_in_first_seen_order(self, config):
        source = make_source(["Q43229"])
        resolver = ClassificationResolver(source, config=config)

        results = await resolver.classify_many(["NATO", "", "Israel", "NATO", "  "])

        assert list(results) == ["NATO", "Israel"]
        assert results["Israel"] == Category.COUNTRY
        assert results["NATO"] == Category.ORGANIZATION

    @pytest.mark.asyncio
    async def test_empty_input(self, config):
        resolver = ClassificationResolver(make_source(), config=config)
        assert await resolver.classify_many([]) == {}

    @pytest.mark.asyncio
    async def test_preload_common_entities(self, config):
        source = make_source(["Q6256"])
        resolver = ClassificationResolver(source, config=config)

        results = await resolver.preload_common_entities()

        assert results["China"] == Category.COUNTRY
        assert resolver.cached("Germany") == Category.COUNTRY


class TestResults:
    def test_category_stats(self):
        stats = category_stats({"NATO": Category.ORGANIZATION, "EU": Category.ORGANIZATION, "Israel": Category.COUNTRY})
        assert stats["total"] == 3
        assert stats["organization"] == 2
        assert stats["country"] == 1
        assert stats["person"] == 0

    def test_group_by_category(self):
        groups = group_by_category({"NATO": Category.ORGANIZATION, "Israel": Category.COUNTRY})
        assert groups[Category.ORGANIZATION] == ["NATO"]
        assert groups[Category.PERSON] == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_closes_source(self, config):
        source = make_source()
        async with ClassificationResolver(source, config=config):
            pass
        source.close.assert_awaited_once()
