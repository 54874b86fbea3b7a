"""
ActorNetwork - Main Entry Point

Wires the reference index, graph builder, merge engine and classification
resolver together.

Example:
    >>> network = ActorNetwork.from_catalog("./catalog.json")
    >>> graph = network.ingest(rows)              # rebuild + merge
    >>> graph = network.ingest(rows)              # unchanged batch: no-op
    >>> await network.classify_nodes()
    >>> payload = network.graph.to_payload()
    >>> await network.close()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from actor_graph.classification.resolver import ClassificationResolver
from actor_graph.classification.sources import ClassificationSource
from actor_graph.config import GraphConfig
from actor_graph.graph.analysis import summarize_node
from actor_graph.graph.builder import GraphBuilder, record_fingerprint
from actor_graph.graph.merge import merge_graphs
from actor_graph.reference.index import ReferenceIndex
from actor_graph.types import Category, EventRecord, Graph, NodeSummary

logger = logging.getLogger(__name__)


def _as_records(rows: Iterable[EventRecord | Mapping[str, Any]]) -> list[EventRecord]:
    return [
        row if isinstance(row, EventRecord) else EventRecord.from_row(dict(row))
        for row in rows
    ]


class ActorNetwork:
    """
    Unified entity-relationship graph over a reference catalog and event records.

    The reference graph is built once. Each ingest() rebuilds the derived
    graph and re-merges it only when the batch fingerprint changed, so an
    unchanged batch is never merged twice.
    """

    def __init__(
        self,
        reference_index: ReferenceIndex | None = None,
        *,
        config: GraphConfig | None = None,
        resolver: ClassificationResolver | None = None,
        source: ClassificationSource | None = None,
    ):
        self.config = config or GraphConfig()
        self.reference_index = (
            reference_index if reference_index is not None else ReferenceIndex(self.config)
        )
        self.resolver = resolver or ClassificationResolver(
            source, reference_index=self.reference_index, config=self.config
        )
        self.builder = GraphBuilder(self.config, reference_index=self.reference_index)

        self._reference_graph: Graph | None = None
        self._graph: Graph | None = None
        self._records: list[EventRecord] = []
        self._last_fingerprint: str | None = None
        self.merge_count = 0

    @classmethod
    def from_catalog(
        cls,
        path: str | Path,
        *,
        config: GraphConfig | None = None,
        source: ClassificationSource | None = None,
    ) -> "ActorNetwork":
        """Load a reference catalog JSON file and wrap it."""
        config = config or GraphConfig()
        return cls(ReferenceIndex.from_file(path, config), config=config, source=source)

    @property
    def reference_graph(self) -> Graph:
        if self._reference_graph is None:
            self._reference_graph = self.reference_index.reference_graph()
        return self._reference_graph

    @property
    def graph(self) -> Graph:
        """The unified graph; the reference graph alone before any ingest."""
        if self._graph is None:
            self._graph = merge_graphs(self.reference_graph, Graph(), self.config)
        return self._graph

    @property
    def records(self) -> list[EventRecord]:
        return list(self._records)

    def ingest(self, rows: Iterable[EventRecord | Mapping[str, Any]]) -> Graph:
        """
        Replace the current record batch and return the unified graph.

        A batch whose fingerprint matches the previous one is not rebuilt
        or merged again.
        """
        records = _as_records(rows)
        fingerprint = record_fingerprint(records, self.config.fingerprint_sample)
        if fingerprint == self._last_fingerprint and self._graph is not None:
            logger.debug("Record batch unchanged; skipping rebuild and merge")
            return self._graph

        derived = self.builder.build(records)
        self._graph = merge_graphs(self.reference_graph, derived, self.config)
        self._records = records
        self._last_fingerprint = fingerprint
        self.merge_count += 1
        return self._graph

    async def classify_nodes(self) -> dict[str, Category]:
        """
        Attach a category to every node of the unified graph that lacks one.

        Returns:
            {node_id: category} for the nodes classified by this call
        """
        graph = self.graph
        pending = [node for node in graph.nodes.values() if node.category is None]
        if not pending:
            return {}

        results = await self.resolver.classify_many(node.id for node in pending)
        for node in pending:
            node.category = results.get(node.id.strip(), Category.UNKNOWN)
        return {node.id: node.category for node in pending}

    def summarize(self, node_id: str) -> NodeSummary | None:
        return summarize_node(self.graph, node_id, self.builder.canonical_id)

    def stats(self) -> dict[str, int]:
        graph = self.graph
        return {
            "reference_entities": len(self.reference_index),
            "records": len(self._records),
            "nodes": len(graph.nodes),
            "edges": len(graph.edges),
        }

    async def close(self) -> None:
        await self.resolver.close()

    async def __aenter__(self) -> "ActorNetwork":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
