"""
Relationship Graph Builder

Turns event records with multi-valued Actor/Target fields into a weighted
multigraph.

For each record:
1. Skip it if Actor or Target is empty
2. Split both fields on commas and normalize each name
3. Upsert actor nodes and target nodes (promoting to BOTH when a name
   appears on both sides), counting occurrences, action labels, records
4. Upsert one edge per (actor, target) pair of the Cartesian product

Node weights are assigned once all records are folded in. Iteration order
of nodes and edges is first-seen order.

Rebuilding is triggered by a change in the record batch's fingerprint, not
by diffing records.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from actor_graph.config import GraphConfig
from actor_graph.types import EventRecord, Graph, GraphEdge, GraphNode, RoleTag
from actor_graph.utils.names import normalize_name

if TYPE_CHECKING:
    from actor_graph.reference.index import ReferenceIndex

logger = logging.getLogger(__name__)


def assign_weights(graph: Graph, config: GraphConfig | None = None) -> None:
    """
    Set every node's weight from its occurrence count.

    weight = clamp(min, max, count / max_count * scale + min)
    """
    config = config or GraphConfig()
    max_count = graph.max_occurrence_count

    for node in graph.nodes.values():
        if max_count <= 0:
            node.weight = config.node_weight_min
            continue
        raw = (node.occurrence_count / max_count) * config.node_weight_scale + config.node_weight_min
        node.weight = max(config.node_weight_min, min(config.node_weight_max, raw))


def record_fingerprint(records: Sequence[EventRecord], sample: int = 5) -> str:
    """
    Cheap content fingerprint of a record batch.

    Hashes the record count plus Actor/Target/Action of the first and last
    `sample` records. Used only to skip redundant rebuilds.
    """
    head = list(records[:sample])
    tail = list(records[-sample:]) if len(records) > sample else []
    digest = hashlib.sha256()
    digest.update(str(len(records)).encode())
    for record in (*head, *tail):
        digest.update(json.dumps([record.actor, record.target, record.action]).encode())
    return digest.hexdigest()


class GraphBuilder:
    """
    Builds derived graphs from event records.

    Usage:
        builder = GraphBuilder(config, reference_index=index)
        graph = builder.build(records)

        # Skip the rebuild when the batch is unchanged
        graph, changed = builder.build_if_changed(records)

    When a reference index is given, names that resolve to a catalog entity
    by exact key (no fuzzy matching) use the entity's primary id as node id.
    """

    def __init__(
        self,
        config: GraphConfig | None = None,
        reference_index: ReferenceIndex | None = None,
    ):
        self.config = config or GraphConfig()
        self.reference_index = reference_index
        self._last_fingerprint: str | None = None
        self._last_graph: Graph | None = None

    def canonical_id(self, name: str) -> str:
        """Node id for a raw name."""
        if self.reference_index is not None:
            entity = self.reference_index.find(name, fuzzy=False)
            if entity is not None:
                return entity.id
        return normalize_name(name)

    def build(self, records: Iterable[EventRecord]) -> Graph:
        """Build a graph from scratch."""
        graph = Graph()
        skipped = 0

        for record in records:
            if not record.actor.strip() or not record.target.strip():
                skipped += 1
                continue

            actors = self._resolve_names(record.actors)
            targets = self._resolve_names(record.targets)
            if not actors or not targets:
                skipped += 1
                continue

            for node_id, display in actors:
                self._fold_node(graph, node_id, display, RoleTag.ACTOR, record)
            for node_id, display in targets:
                self._fold_node(graph, node_id, display, RoleTag.TARGET, record)

            for actor_id, _ in actors:
                for target_id, _ in targets:
                    self._fold_edge(graph, actor_id, target_id, record)

        assign_weights(graph, self.config)

        if skipped:
            logger.debug(f"Skipped {skipped} records without actor or target")
        logger.info(f"Processed {len(graph.nodes)} nodes and {len(graph.edges)} edges")
        return graph

    def build_if_changed(self, records: Sequence[EventRecord]) -> tuple[Graph, bool]:
        """
        Build unless the batch fingerprint matches the previous build.

        Returns:
            (graph, changed) where changed is False when the cached graph
            from the previous build was returned
        """
        fingerprint = record_fingerprint(records, self.config.fingerprint_sample)
        if fingerprint == self._last_fingerprint and self._last_graph is not None:
            logger.debug("Record batch unchanged; reusing previous graph")
            return self._last_graph, False

        graph = self.build(records)
        self._last_fingerprint = fingerprint
        self._last_graph = graph
        return graph, True

    def reset(self) -> None:
        """Forget the previous build so the next call rebuilds."""
        self._last_fingerprint = None
        self._last_graph = None

    def _resolve_names(self, names: list[str]) -> list[tuple[str, str]]:
        resolved: list[tuple[str, str]] = []
        for name in names:
            node_id = self.canonical_id(name)
            if node_id and node_id.strip():
                resolved.append((node_id, name))
        return resolved

    @staticmethod
    def _fold_node(
        graph: Graph,
        node_id: str,
        display: str,
        role: RoleTag,
        record: EventRecord,
    ) -> None:
        node = graph.nodes.get(node_id)
        if node is None:
            node = graph.add_node(GraphNode(id=node_id, display_name=display, role=role))
        elif node.role != role and node.role in (RoleTag.ACTOR, RoleTag.TARGET):
            node.role = RoleTag.BOTH

        node.occurrence_count += 1
        node.action_labels.add(record.action)
        node.source_records.append(record)

    @staticmethod
    def _fold_edge(graph: Graph, source: str, target: str, record: EventRecord) -> None:
        edge = graph.edge(source, target)
        if edge is None:
            edge = graph.add_edge(GraphEdge(source=source, target=target))
        edge.occurrence_count += 1
        edge.action_labels.add(record.action)
        edge.source_records.append(record)


def build_graph(
    records: Iterable[EventRecord],
    config: GraphConfig | None = None,
    reference_index: ReferenceIndex | None = None,
) -> Graph:
    """Build a derived graph from event records."""
    return GraphBuilder(config, reference_index).build(records)
