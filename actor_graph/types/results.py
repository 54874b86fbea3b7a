"""
Result Types

Derived views returned by the reference index, resolver and graph analysis.

Models:
    - NameMatch / RecordMatches: Per-name reference matches for one record
    - EntityProfile: A reference entity with the records that mention it
    - Connection / NodeSummary: Neighbourhood of one node in a graph
    - CacheInfo: Classification cache statistics
"""

from pydantic import BaseModel, Field

from actor_graph.types.entities import Category, EntityRecord
from actor_graph.types.records import EventRecord


class NameMatch(BaseModel):
    """One name from an Actor/Target field and the entity it resolved to."""

    name: str
    entity: EntityRecord | None = None


class RecordMatches(BaseModel):
    """Reference matches for every name in a record."""

    record: EventRecord
    actor_matches: list[NameMatch] = Field(default_factory=list)
    target_matches: list[NameMatch] = Field(default_factory=list)


class EntityProfile(BaseModel):
    """
    Profile of a reference entity.

    Attributes:
        entity: The catalog record
        category: Category inferred from the entity's role
        related_records: Records naming the entity as actor or target
    """

    entity: EntityRecord
    category: Category
    related_records: list[EventRecord] = Field(default_factory=list)


class Connection(BaseModel):
    """One edge seen from a node's point of view."""

    partner: str
    direction: str = Field(..., description="'acts_on' or 'acted_upon_by'")
    count: int
    actions: list[str] = Field(default_factory=list)


class NodeSummary(BaseModel):
    """Neighbourhood summary for one node."""

    node_id: str
    connections: list[Connection] = Field(default_factory=list)
    as_actor_count: int = 0
    as_target_count: int = 0
    unique_partners: list[str] = Field(default_factory=list)
    common_actions: dict[str, int] = Field(default_factory=dict)


class CacheInfo(BaseModel):
    """Snapshot of the classification cache."""

    size: int
    in_flight: int
    entries: dict[str, Category] = Field(default_factory=dict)
