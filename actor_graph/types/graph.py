"""
Graph Types

The node/edge tables produced by the graph builder and the merge engine.

Models:
    - RoleTag: How a node participates in the graph
    - GraphNode: One entity, keyed by canonical name
    - GraphEdge: One ordered (source, target) pair
    - Graph: Ordered node and edge tables plus the presentation payload
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from actor_graph.types.entities import Category, EntityRecord
from actor_graph.types.records import EventRecord

EdgeKey = tuple[str, str]


class RoleTag(str, Enum):
    """Node role. BOTH is reached by appearing on both sides, or in both graphs."""

    ACTOR = "actor"
    TARGET = "target"
    BOTH = "both"
    REFERENCE_ENTITY = "reference_entity"


class GraphNode(BaseModel):
    """
    A graph node.

    Attributes:
        id: Canonical name (identity key)
        display_name: Name as first seen
        role: Actor/target/both/reference_entity
        occurrence_count: Number of occurrences folded into this node
        action_labels: Distinct action labels seen on this node
        source_records: Originating records (shared, not copied)
        weight: Visual size, monotonic in occurrence_count
        category: Classification, if known
        entity: Reference catalog entity, if this node is one
    """

    id: str
    display_name: str
    role: RoleTag
    occurrence_count: int = Field(default=0, ge=0)
    action_labels: set[str] = Field(default_factory=set)
    source_records: list[EventRecord] = Field(default_factory=list)
    weight: float = 0.0
    category: Category | None = None
    entity: EntityRecord | None = None

    def copy_node(self) -> GraphNode:
        """Copy with fresh label set and record list; records themselves stay shared."""
        return self.model_copy(
            update={
                "action_labels": set(self.action_labels),
                "source_records": list(self.source_records),
            }
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "roleTag": self.role.value,
            "occurrenceCount": self.occurrence_count,
            "actionLabels": sorted(self.action_labels),
            "weight": self.weight,
            "category": self.category.value if self.category else None,
        }


class GraphEdge(BaseModel):
    """
    A directed edge keyed by (source, target).

    relationship_label is set only for edges declared by the reference catalog.
    """

    source: str
    target: str
    occurrence_count: int = Field(default=0, ge=0)
    action_labels: set[str] = Field(default_factory=set)
    source_records: list[EventRecord] = Field(default_factory=list)
    relationship_label: str | None = None

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)

    def copy_edge(self) -> GraphEdge:
        return self.model_copy(
            update={
                "action_labels": set(self.action_labels),
                "source_records": list(self.source_records),
            }
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "source": self.source,
            "target": self.target,
            "occurrenceCount": self.occurrence_count,
            "actionLabels": sorted(self.action_labels),
        }
        if self.relationship_label:
            payload["relationshipLabel"] = self.relationship_label
        return payload


class Graph(BaseModel):
    """
    Node and edge tables in insertion order.

    Presentation collaborators read `to_payload()`; they never mutate the graph.
    """

    nodes: dict[str, GraphNode] = Field(default_factory=dict)
    edges: dict[EdgeKey, GraphEdge] = Field(default_factory=dict)

    def add_node(self, node: GraphNode) -> GraphNode:
        self.nodes[node.id] = node
        return node

    def add_edge(self, edge: GraphEdge) -> GraphEdge:
        self.edges[edge.key] = edge
        return edge

    def edge(self, source: str, target: str) -> GraphEdge | None:
        return self.edges.get((source, target))

    def dangling_edges(self) -> list[EdgeKey]:
        """Edge keys whose source or target is not a node of this graph."""
        return [
            key
            for key in self.edges
            if key[0] not in self.nodes or key[1] not in self.nodes
        ]

    def edges_for(self, node_id: str) -> list[GraphEdge]:
        return [e for e in self.edges.values() if node_id in (e.source, e.target)]

    @property
    def max_occurrence_count(self) -> int:
        return max((n.occurrence_count for n in self.nodes.values()), default=0)

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        """The graph as handed to table/map/network/timeline renderers."""
        return {
            "nodes": [node.to_payload() for node in self.nodes.values()],
            "edges": [edge.to_payload() for edge in self.edges.values()],
        }
