"""
Entity Classification

Modules:
    categories: QID allow-list, tally/priority selection, display metadata
    sources: External lookup interface and the Wikidata SPARQL client
    resolver: Cached, rate-limited, single-flight ClassificationResolver
"""

from actor_graph.classification.categories import (
    CATEGORY_PRIORITY,
    INSTANCE_OF_CATEGORIES,
    MANUAL_OVERRIDES,
    category_color,
    category_icon,
    category_label,
    select_category,
)
from actor_graph.classification.resolver import (
    ClassificationResolver,
    category_stats,
    group_by_category,
)
from actor_graph.classification.sources import (
    ClassificationLookupError,
    ClassificationSource,
    WikidataSource,
)

__all__ = [
    "CATEGORY_PRIORITY",
    "INSTANCE_OF_CATEGORIES",
    "MANUAL_OVERRIDES",
    "ClassificationLookupError",
    "ClassificationResolver",
    "ClassificationSource",
    "WikidataSource",
    "category_color",
    "category_icon",
    "category_label",
    "category_stats",
    "group_by_category",
    "select_category",
]
