"""
Classification Resolver - Cached, Rate-Limited, Single-Flight

Attaches exactly one Category to every entity name.

Resolution order for classify(name):
1. Manual override table (known-ambiguous names)
2. Reference index, when one is injected
3. Cache, under the raw or normalized form of the name
4. A lookup already in flight for the same canonical name (awaited)
5. A fresh external lookup through the ClassificationSource

External lookups share one "last dispatch" timestamp: every dispatch waits
until min_lookup_interval has passed since the previous one, across all
callers. A failed lookup resolves to UNKNOWN and, by default, is cached.

The resolver holds all of its state; build one per process and pass it to
whoever needs classifications.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from typing import TYPE_CHECKING, Iterable, Mapping

from actor_graph.classification.categories import MANUAL_OVERRIDES, select_category
from actor_graph.classification.sources import ClassificationSource, WikidataSource
from actor_graph.config import GraphConfig
from actor_graph.types import CacheInfo, Category
from actor_graph.utils.names import normalize_name

if TYPE_CHECKING:
    from actor_graph.reference.index import ReferenceIndex

logger = logging.getLogger(__name__)

# Warmed by preload_common_entities()
COMMON_ENTITIES = (
    "United States", "China", "Russia", "Germany", "France", "United Kingdom",
    "Japan", "India", "Brazil", "Canada", "Australia", "Mexico",
    "European Union", "NATO", "United Nations", "World Bank",
    "Google", "Microsoft", "Apple", "Amazon", "Meta", "Tesla",
)


class ClassificationResolver:
    """
    Resolves names to categories.

    Usage:
        resolver = ClassificationResolver(WikidataSource(config), reference_index=index)
        category = await resolver.classify("NATO")
        categories = await resolver.classify_many(["NATO", "EU", "Russia"])
        await resolver.close()
    """

    def __init__(
        self,
        source: ClassificationSource | None = None,
        *,
        reference_index: ReferenceIndex | None = None,
        config: GraphConfig | None = None,
        overrides: Mapping[str, Category] | None = None,
        min_interval: float | None = None,
    ):
        self.config = config or GraphConfig()
        self.source = source or WikidataSource(self.config)
        self.reference_index = reference_index
        self.overrides = {
            k.lower(): Category(v)
            for k, v in (MANUAL_OVERRIDES if overrides is None else overrides).items()
        }
        self.min_interval = (
            self.config.min_lookup_interval if min_interval is None else min_interval
        )

        self._cache: dict[str, Category] = {}
        self._in_flight: dict[str, asyncio.Task[Category]] = {}
        self._rate_lock = asyncio.Lock()
        self._last_dispatch: float | None = None
        self.lookups_dispatched = 0

    async def classify(self, name: str) -> Category:
        """Category for one name. Never raises for lookup failures."""
        if not name or not name.strip():
            return Category.UNKNOWN

        raw = name.strip()
        canonical = normalize_name(raw)

        override = self.overrides.get(raw.lower()) or self.overrides.get(canonical.lower())
        if override is not None:
            return override

        if self.reference_index is not None:
            category = self.reference_index.category_for(raw)
            if category is not None:
                return category

        cached = self._cache.get(raw) or self._cache.get(canonical)
        if cached is not None:
            logger.debug(f"Classification cache hit: {raw} -> {cached.value}")
            return cached

        task = self._in_flight.get(canonical)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._lookup(raw, canonical))
            self._in_flight[canonical] = task
            task.add_done_callback(lambda _t, key=canonical: self._in_flight.pop(key, None))

        return await asyncio.shield(task)

    async def classify_many(self, names: Iterable[str]) -> dict[str, Category]:
        """
        Classify unique non-empty names with bounded concurrency.

        Returns:
            {name: category} in first-seen order
        """
        unique = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
        if not unique:
            return {}

        logger.info(f"Classifying {len(unique)} unique names")
        semaphore = asyncio.Semaphore(max(1, self.config.classify_concurrency))

        async def bounded_classify(name: str) -> Category:
            async with semaphore:
                return await self.classify(name)

        results = await asyncio.gather(*(bounded_classify(n) for n in unique))
        return dict(zip(unique, results))

    async def preload_common_entities(self) -> dict[str, Category]:
        """Warm the cache with frequently seen countries and organizations."""
        return await self.classify_many(COMMON_ENTITIES)

    async def _lookup(self, raw: str, canonical: str) -> Category:
        try:
            await self._wait_for_slot()
            identifiers = await self.source.instance_of(canonical)
        except Exception as e:
            logger.warning(f"Failed to classify '{canonical}': {e}")
            if self.config.cache_failed_lookups:
                self._store(raw, canonical, Category.UNKNOWN)
            return Category.UNKNOWN

        category = select_category(identifiers)
        self._store(raw, canonical, category)
        return category

    async def _wait_for_slot(self) -> None:
        """Block until the global minimum interval since the last dispatch has passed."""
        async with self._rate_lock:
            if self._last_dispatch is not None:
                wait = self.min_interval - (time.monotonic() - self._last_dispatch)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_dispatch = time.monotonic()
            self.lookups_dispatched += 1

    def _store(self, raw: str, canonical: str, category: Category) -> None:
        self._cache[raw] = category
        self._cache[canonical] = category

    def cached(self, name: str) -> Category | None:
        """Cached category without triggering a lookup."""
        raw = name.strip()
        return self._cache.get(raw) or self._cache.get(normalize_name(raw))

    def clear_cache(self) -> None:
        """Forget all cached classifications."""
        self._cache.clear()
        logger.info("Classification cache cleared")

    def cache_info(self) -> CacheInfo:
        return CacheInfo(
            size=len(self._cache),
            in_flight=len(self._in_flight),
            entries=dict(self._cache),
        )

    async def close(self) -> None:
        await self.source.close()

    async def __aenter__(self) -> "ClassificationResolver":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


def category_stats(results: Mapping[str, Category]) -> dict[str, int]:
    """Count of names per category, with every category present."""
    counts = Counter(Category(c) for c in results.values())
    stats = {"total": len(results)}
    stats.update({category.value: counts.get(category, 0) for category in Category})
    return stats


def group_by_category(results: Mapping[str, Category]) -> dict[Category, list[str]]:
    """Names grouped by category, every category present."""
    groups: dict[Category, list[str]] = {category: [] for category in Category}
    for name, category in results.items():
        groups[Category(category)].append(name)
    return groups
