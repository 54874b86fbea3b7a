"""
Graph Construction

Modules:
    builder: Event records -> derived graph, weights, fingerprints
    merge: Reference graph + derived graph -> unified graph
    analysis: Per-node neighbourhood summaries
"""

from actor_graph.graph.analysis import summarize_node
from actor_graph.graph.builder import (
    GraphBuilder,
    assign_weights,
    build_graph,
    record_fingerprint,
)
from actor_graph.graph.merge import drop_dangling_edges, merge_graphs

__all__ = [
    "GraphBuilder",
    "assign_weights",
    "build_graph",
    "drop_dangling_edges",
    "merge_graphs",
    "record_fingerprint",
    "summarize_node",
]
