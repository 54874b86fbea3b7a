"""
Graph Merge Engine

Reconciles the derived graph (from event records) with the static reference
graph (from the catalog's own relationships).

1. Seed the unified graph with copies of every reference node
2. Fold derived nodes in: shared ids sum counts, union labels, append
   records and become BOTH; new ids are inserted with their own role
3. Fold derived edges the same way, keyed by (source, target)
4. Drop edges whose endpoints are not both nodes of the unified graph
5. Re-assign node weights over the unified node set

Neither input is mutated. Merging is not deduplicated internally: callers
must only merge a derived graph once per record batch (see
ActorNetwork.ingest, which guards on the batch fingerprint).
"""

from __future__ import annotations

import logging

from actor_graph.config import GraphConfig
from actor_graph.graph.builder import assign_weights
from actor_graph.types import Graph, GraphEdge, GraphNode, RoleTag

logger = logging.getLogger(__name__)


def _fold_node(existing: GraphNode, incoming: GraphNode) -> None:
    existing.occurrence_count += incoming.occurrence_count
    existing.action_labels |= incoming.action_labels
    existing.source_records.extend(incoming.source_records)
    existing.role = RoleTag.BOTH
    if existing.category is None:
        existing.category = incoming.category
    if existing.entity is None:
        existing.entity = incoming.entity


def _fold_edge(existing: GraphEdge, incoming: GraphEdge) -> None:
    existing.occurrence_count += incoming.occurrence_count
    existing.action_labels |= incoming.action_labels
    existing.source_records.extend(incoming.source_records)
    if existing.relationship_label is None:
        existing.relationship_label = incoming.relationship_label


def drop_dangling_edges(graph: Graph) -> list[tuple[str, str]]:
    """Remove edges with a missing endpoint; returns the dropped keys."""
    dropped = graph.dangling_edges()
    for source, target in dropped:
        del graph.edges[(source, target)]
        logger.warning(f"Dropping edge with missing endpoint: {source} -> {target}")
    return dropped


def merge_graphs(
    reference: Graph,
    derived: Graph,
    config: GraphConfig | None = None,
) -> Graph:
    """
    Merge a derived graph into a copy of the reference graph.

    Args:
        reference: Graph built from the reference catalog
        derived: Graph built from event records
        config: Weight settings

    Returns:
        Unified graph in which every edge has both endpoints as nodes
    """
    unified = Graph()

    for node in reference.nodes.values():
        seeded = node.copy_node()
        seeded.role = RoleTag.REFERENCE_ENTITY
        unified.add_node(seeded)

    for edge in reference.edges.values():
        unified.add_edge(edge.copy_edge())

    folded_nodes = 0
    for node in derived.nodes.values():
        existing = unified.nodes.get(node.id)
        if existing is None:
            unified.add_node(node.copy_node())
        else:
            _fold_node(existing, node)
            folded_nodes += 1

    for edge in derived.edges.values():
        existing_edge = unified.edges.get(edge.key)
        if existing_edge is None:
            unified.add_edge(edge.copy_edge())
        else:
            _fold_edge(existing_edge, edge)

    dropped = drop_dangling_edges(unified)
    assign_weights(unified, config)

    logger.info(
        f"Merged graph: {len(unified.nodes)} nodes ({folded_nodes} shared), "
        f"{len(unified.edges)} edges, {len(dropped)} dropped"
    )
    return unified
