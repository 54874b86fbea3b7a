"""
actor-graph - Entity Relationship Graphs from Event Records

Builds one deduplicated, weighted entity-relationship graph from a curated
reference catalog and batches of "Actor did Action to Target" records, and
labels every entity with a category.

Example:
    >>> from actor_graph import ActorNetwork
    >>> network = ActorNetwork.from_catalog("catalog.json")
    >>> graph = network.ingest([{"Actor": "NATO, EU", "Target": "Russia", "Action": "condemn"}])
    >>> await network.classify_nodes()
    >>> graph.to_payload()

Main Classes:
    ActorNetwork: Primary entry point
    ReferenceIndex: Curated entity lookup
    ClassificationResolver: Cached, rate-limited category lookup
    GraphConfig: Configuration management
"""

__version__ = "0.1.0"


# Public API - lazy imports to avoid loading httpx until needed
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "ActorNetwork":
        from actor_graph.api.network import ActorNetwork
        return ActorNetwork

    if name == "ReferenceIndex":
        from actor_graph.reference.index import ReferenceIndex
        return ReferenceIndex

    if name in ("ClassificationResolver", "WikidataSource"):
        from actor_graph import classification
        return getattr(classification, name)

    if name == "GraphConfig":
        from actor_graph.config.settings import GraphConfig
        return GraphConfig

    if name in ("build_graph", "merge_graphs"):
        from actor_graph import graph
        return getattr(graph, name)

    if name == "normalize_name":
        from actor_graph.utils.names import normalize_name
        return normalize_name

    # Types
    if name in ("Category", "EntityRecord", "EventRecord", "Graph", "GraphEdge", "GraphNode", "RoleTag"):
        from actor_graph import types
        return getattr(types, name)

    raise AttributeError(f"module 'actor_graph' has no attribute {name!r}")


__all__ = [
    # Main classes
    "ActorNetwork",
    "ReferenceIndex",
    "ClassificationResolver",
    "WikidataSource",
    "GraphConfig",

    # Functions
    "build_graph",
    "merge_graphs",
    "normalize_name",

    # Types
    "Category",
    "EntityRecord",
    "EventRecord",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "RoleTag",

    # Version
    "__version__",
]
