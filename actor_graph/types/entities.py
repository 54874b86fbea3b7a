"""
Entity Types

Reference entities come from the curated catalog and are immutable once
loaded. Categories are the closed set of labels attached to every entity.

Models:
    - Category: Closed classification enum
    - Relationship: Directed relationship declared by a catalog entity
    - EntityRecord: One catalog entry
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Catalog keys consumed directly by EntityRecord; everything else lands in `attributes`
_CATALOG_KEYS = {
    "id",
    "alternate_names",
    "role",
    "state_or_country",
    "connections",
    "non_us",
}


class Category(str, Enum):
    """
    Entity classification labels.

    Every canonical name resolves to exactly one of these. UNKNOWN covers
    names the external source does not know and lookups that failed.
    """

    COUNTRY = "country"
    REGION = "region"
    PERSON = "person"
    PUBLIC_OFFICE = "public_office"
    LEGISLATIVE_BRANCH = "legislative_branch"
    POLITICAL_ORGANIZATION = "political_organization"
    ORGANIZATION = "organization"
    UNKNOWN = "unknown"


class Relationship(BaseModel):
    """A directed relationship from one catalog entity to another."""

    target_id: str = Field(..., description="Name of the related entity (may be an alias)")
    relationship_label: str = Field(default="", description="e.g. 'ally', 'spouse'")

    model_config = ConfigDict(frozen=True)


class EntityRecord(BaseModel):
    """
    A reference catalog entity.

    Attributes:
        id: Primary name, unique within the catalog
        alternate_names: Other spellings and aliases
        role: Free-text role or title ("U.S. Senator", "Political party")
        location_tag: State or country the entity is tied to
        non_us: True when location_tag is a country rather than a US state
        relationships: Declared relationships to other catalog entities
        attributes: Any other catalog fields (party, events, quotes, ...)
    """

    id: str
    alternate_names: tuple[str, ...] = ()
    role: str | None = None
    location_tag: str | None = None
    non_us: bool = False
    relationships: tuple[Relationship, ...] = ()
    attributes: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_catalog_entry(cls, entry: dict[str, Any]) -> "EntityRecord":
        """
        Build a record from a raw catalog object.

        Raises:
            ValueError: If the entry has no usable id, or a list field is not a list
            pydantic.ValidationError: If a field has the wrong shape
        """
        entity_id = entry.get("id")
        if not isinstance(entity_id, str) or not entity_id.strip():
            raise ValueError("catalog entry is missing 'id'")

        for key in ("alternate_names", "connections"):
            value = entry.get(key)
            if value is not None and not isinstance(value, list):
                raise ValueError(f"catalog entry {entity_id!r}: '{key}' must be a list")

        relationships = [
            Relationship(
                target_id=conn["target"],
                relationship_label=conn.get("relationship") or "",
            )
            for conn in entry.get("connections") or []
            if isinstance(conn, dict) and conn.get("target")
        ]

        return cls(
            id=entity_id.strip(),
            alternate_names=tuple(entry.get("alternate_names") or []),
            role=entry.get("role"),
            location_tag=entry.get("state_or_country"),
            non_us=bool(entry.get("non_us", False)),
            relationships=tuple(relationships),
            attributes={k: v for k, v in entry.items() if k not in _CATALOG_KEYS},
        )

    @property
    def location(self) -> str | None:
        """Location string suitable for geocoding collaborators."""
        if not self.location_tag:
            return None
        if self.non_us:
            return self.location_tag
        return f"{self.location_tag}, United States"
