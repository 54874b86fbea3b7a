"""
Type Definitions

Pydantic models for all data structures.

Reference Models:
    - EntityRecord, Relationship - Curated catalog entries
    - Category - Closed classification labels

Record Models:
    - EventRecord - Parsed "Actor did Action to Target" rows

Graph Models:
    - Graph, GraphNode, GraphEdge, RoleTag - Node/edge tables

Result Models:
    - RecordMatches, NameMatch, EntityProfile - Reference lookups
    - NodeSummary, Connection - Graph neighbourhoods
    - CacheInfo - Resolver cache statistics
"""

from actor_graph.types.entities import Category, EntityRecord, Relationship
from actor_graph.types.graph import EdgeKey, Graph, GraphEdge, GraphNode, RoleTag
from actor_graph.types.records import EventRecord
from actor_graph.types.results import (
    CacheInfo,
    Connection,
    EntityProfile,
    NameMatch,
    NodeSummary,
    RecordMatches,
)

__all__ = [
    # Reference
    "Category",
    "EntityRecord",
    "Relationship",
    # Records
    "EventRecord",
    # Graph
    "EdgeKey",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "RoleTag",
    # Results
    "CacheInfo",
    "Connection",
    "EntityProfile",
    "NameMatch",
    "NodeSummary",
    "RecordMatches",
]
