"""Neighbourhood summaries for a single node."""

from __future__ import annotations

from collections import Counter
from typing import Callable

from actor_graph.types import Connection, Graph, NodeSummary
from actor_graph.utils.names import normalize_name


def summarize_node(
    graph: Graph,
    node_id: str,
    resolve: Callable[[str], str] = normalize_name,
) -> NodeSummary | None:
    """
    Connections, partners and action frequencies for one node.

    Args:
        graph: Graph holding the node
        node_id: Node to summarize
        resolve: Maps a raw record name to its node id; pass the builder's
            canonical_id so aliases count towards their catalog entity

    Returns None when the node is not in the graph.
    """
    node = graph.nodes.get(node_id)
    if node is None:
        return None

    connections: list[Connection] = []
    partners: dict[str, None] = {}
    actions: Counter[str] = Counter()

    for edge in graph.edges_for(node_id):
        is_source = edge.source == node_id
        partner = edge.target if is_source else edge.source
        connections.append(
            Connection(
                partner=partner,
                direction="acts_on" if is_source else "acted_upon_by",
                count=edge.occurrence_count,
                actions=sorted(edge.action_labels),
            )
        )
        partners.setdefault(partner, None)
        actions.update(edge.action_labels)

    as_actor = 0
    as_target = 0
    for record in node.source_records:
        actor_ids = {resolve(n) for n in record.actors}
        target_ids = {resolve(n) for n in record.targets}
        if node_id in actor_ids or node.display_name in record.actors:
            as_actor += 1
        if node_id in target_ids or node.display_name in record.targets:
            as_target += 1

    return NodeSummary(
        node_id=node_id,
        connections=connections,
        as_actor_count=as_actor,
        as_target_count=as_target,
        unique_partners=list(partners),
        common_actions=dict(actions.most_common()),
    )
