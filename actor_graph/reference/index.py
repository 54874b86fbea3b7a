"""
Reference Index - Curated Entity Lookup

Loads the reference catalog once and answers "which known entity is this
name?" before any external classification lookup is attempted.

Every entity is registered under several keys:
1. Lowercased primary name, and that name without titles
2. Each alternate name, and its title-stripped form
3. Title + name variants derived from the entity's role ("sen. <name>")
4. Bare surname, only for a shortlist of well-known figures whose surname
   no other catalog entry shares

Lookup tries the title-stripped key, then the raw key, then (optionally) an
approximate scan: equality after stripping titles on both sides, then
substring containment with a minimum length guard. The scan returns the
first hit in scan order, which is deterministic but not necessarily the
best match.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from actor_graph.config import GraphConfig
from actor_graph.graph.builder import assign_weights
from actor_graph.types import (
    Category,
    EntityProfile,
    EntityRecord,
    EventRecord,
    Graph,
    GraphEdge,
    GraphNode,
    NameMatch,
    RecordMatches,
    RoleTag,
)
from actor_graph.utils.names import name_key, strip_titles

logger = logging.getLogger(__name__)

REFERENCE_ACTION = "reference_connection"

# Surnames specific enough to identify a figure on their own
PROMINENT_SURNAMES = frozenset(
    {
        "trump", "biden", "harris", "obama", "clinton", "sanders", "warren",
        "desantis", "newsom", "abbott", "whitmer", "pence",
    }
)

# role keyword -> title prefixes registered for the entity
ROLE_TITLES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("senator", ("sen.", "senator")),
    ("representative", ("rep.", "representative")),
    ("governor", ("gov.", "governor")),
    ("secretary", ("sec.", "secretary")),
    ("speaker", ("speaker",)),
    ("attorney general", ("attorney general",)),
)

_OFFICE_WORDS = ("senator", "representative", "governor", "president", "mayor", "judge")
_LEGISLATURE_WORDS = ("legislature", "parliament", "congress", "senate", "legislative")
_POLITICAL_ORG_WORDS = ("party", "committee", "pac", "campaign")
_ORGANIZATION_WORDS = ("organization", "company", "corporation", "foundation", "agency")
_COUNTRY_WORDS = ("country", "sovereign state", "nation")


def infer_category(entity: EntityRecord) -> Category:
    """Category implied by a catalog entity's role; PERSON when nothing matches."""
    if not entity.role:
        return Category.PERSON

    role = entity.role.lower()
    if any(word in role for word in _OFFICE_WORDS):
        return Category.PUBLIC_OFFICE
    if any(word in role for word in _LEGISLATURE_WORDS):
        return Category.LEGISLATIVE_BRANCH
    if any(word in role for word in _POLITICAL_ORG_WORDS):
        return Category.POLITICAL_ORGANIZATION
    if any(word in role for word in _ORGANIZATION_WORDS):
        return Category.ORGANIZATION
    if any(word in role for word in _COUNTRY_WORDS):
        return Category.COUNTRY
    return Category.PERSON


def _title_variations(entity: EntityRecord) -> list[str]:
    base = entity.id.lower()
    role = (entity.role or "").lower()
    variations: list[str] = []

    for keyword, titles in ROLE_TITLES:
        if keyword in role:
            variations.extend(f"{title} {base}" for title in titles)

    if "vice president" in role:
        variations.extend([f"vice president {base}", f"vp {base}"])
    elif "president" in role:
        variations.extend([f"pres. {base}", f"president {base}"])

    return variations


class ReferenceIndex:
    """
    Multi-key lookup table over the reference catalog.

    Read-only after load(); safe to share between any number of readers.

    Usage:
        index = ReferenceIndex.from_file("catalog.json")
        entity = index.find("Sen. Bernie Sanders")
        graph = index.reference_graph()
    """

    def __init__(self, config: GraphConfig | None = None):
        self.config = config or GraphConfig()
        self._entities: list[EntityRecord] = []
        self._table: dict[str, EntityRecord] = {}
        # (key, title-stripped key, entity) in registration order, for fuzzy scans
        self._scan: list[tuple[str, str, EntityRecord]] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str | Path, config: GraphConfig | None = None) -> "ReferenceIndex":
        """
        Load a catalog JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file isn't valid JSON
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Reference catalog not found at {path}")
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in reference catalog {path}: {e}") from e

        index = cls(config)
        index.load(data)
        return index

    def load(self, catalog: dict[str, Any] | Iterable[dict[str, Any]]) -> None:
        """
        Load catalog entries and build the lookup table (one-time).

        Accepts a list of entity objects or a document with a "nodes" array.
        Entries without an id, or with malformed fields, are skipped.

        Raises:
            RuntimeError: If the index was already loaded
            ValueError: If the catalog is not a list or a {"nodes": [...]} document
        """
        if self._loaded:
            raise RuntimeError("ReferenceIndex is already loaded")

        if isinstance(catalog, dict):
            if "edges" in catalog:
                logger.info(
                    f"Catalog has {len(catalog['edges'])} raw edges; "
                    "relationships are read from entity connections instead"
                )
            entries = catalog.get("nodes")
            if entries is None:
                raise ValueError("Catalog document has no 'nodes' array")
        else:
            entries = catalog

        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping catalog entry {position}: not an object")
                continue
            try:
                entity = EntityRecord.from_catalog_entry(entry)
            except (ValueError, ValidationError) as e:
                logger.warning(f"Skipping catalog entry {position}: {e}")
                continue
            self._entities.append(entity)

        for entity in self._entities:
            self._register_entity(entity)

        self._loaded = True
        logger.info(
            f"Loaded {len(self._entities)} reference entities "
            f"under {len(self._table)} lookup keys"
        )

    def _register(self, key: str, entity: EntityRecord) -> None:
        key = key.strip()
        if not key:
            return
        if key not in self._table:
            self._scan.append((key, name_key(strip_titles(key)), entity))
        self._table[key] = entity

    def _register_entity(self, entity: EntityRecord) -> None:
        for name in (entity.id, *entity.alternate_names):
            key = name_key(name)
            self._register(key, entity)
            stripped = name_key(strip_titles(key))
            if stripped != key:
                self._register(stripped, entity)

        for variation in _title_variations(entity):
            self._register(variation, entity)

        self._register_surname(entity)

    def _register_surname(self, entity: EntityRecord) -> None:
        parts = entity.id.lower().split()
        if len(parts) < 2:
            return
        surname = parts[-1]
        if surname not in PROMINENT_SURNAMES:
            return
        for other in self._entities:
            if other.id != entity.id and other.id.lower().split()[-1:] == [surname]:
                return
        self._register(surname, entity)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def entities(self) -> list[EntityRecord]:
        return list(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def get(self, entity_id: str) -> EntityRecord | None:
        """Exact lookup by primary id."""
        return next((e for e in self._entities if e.id == entity_id), None)

    def find(self, name: str, *, fuzzy: bool | None = None) -> EntityRecord | None:
        """
        Find the entity a name refers to.

        Args:
            name: Raw name, possibly with titles or a possessive
            fuzzy: Override config.fuzzy_matching for this call

        Returns:
            The matching EntityRecord, or None
        """
        if not name or not isinstance(name, str) or not name.strip():
            return None

        key = name_key(name)
        stripped = name_key(strip_titles(key))

        entity = self._table.get(stripped) or self._table.get(key)
        if entity is not None:
            return entity

        if fuzzy is None:
            fuzzy = self.config.fuzzy_matching
        if not fuzzy:
            return None
        return self._fuzzy_find(key, stripped)

    def _scan_entries(self) -> list[tuple[str, str, EntityRecord]]:
        if self.config.fuzzy_scan_order == "longest_first":
            return sorted(self._scan, key=lambda item: len(item[0]), reverse=True)
        return self._scan

    def _fuzzy_find(self, key: str, stripped: str) -> EntityRecord | None:
        entries = self._scan_entries()
        min_length = self.config.fuzzy_min_length

        for _, entry_stripped, entity in entries:
            if entry_stripped == stripped:
                return entity

        for _, entry_stripped, entity in entries:
            if self._contains_either(entry_stripped, stripped, min_length):
                return entity

        for entry_key, _, entity in entries:
            if self._contains_either(entry_key, key, min_length):
                return entity

        return None

    @staticmethod
    def _contains_either(a: str, b: str, min_length: int) -> bool:
        if min(len(a), len(b)) < min_length:
            return False
        return a in b or b in a

    def names(self) -> list[str]:
        """Primary names followed by every registered lookup key (for pre-caching)."""
        seen: dict[str, None] = {}
        for entity in self._entities:
            seen.setdefault(entity.id, None)
        for key in self._table:
            seen.setdefault(key, None)
        return list(seen)

    def category_for(self, name: str) -> Category | None:
        """Category of the entity a name resolves to, or None."""
        entity = self.find(name)
        return infer_category(entity) if entity else None

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def reference_graph(self) -> Graph:
        """
        Graph of the catalog's own declared relationships.

        Relationship targets are resolved by exact key only; targets that
        cannot be resolved are skipped with a warning. Edge endpoints are
        primary entity ids.
        """
        graph = Graph()

        for entity in self._entities:
            graph.add_node(
                GraphNode(
                    id=entity.id,
                    display_name=entity.id,
                    role=RoleTag.REFERENCE_ENTITY,
                    occurrence_count=len(entity.relationships),
                    action_labels={REFERENCE_ACTION},
                    category=infer_category(entity),
                    entity=entity,
                )
            )

        for entity in self._entities:
            for rel in entity.relationships:
                target = self.find(rel.target_id, fuzzy=False)
                if target is None:
                    logger.warning(
                        f"Skipping connection to unknown entity: "
                        f"{rel.target_id} from {entity.id}"
                    )
                    continue

                edge = graph.edge(entity.id, target.id)
                if edge is None:
                    edge = graph.add_edge(
                        GraphEdge(
                            source=entity.id,
                            target=target.id,
                            relationship_label=rel.relationship_label or None,
                        )
                    )
                edge.occurrence_count += 1
                edge.action_labels.add(REFERENCE_ACTION)

        assign_weights(graph, self.config)
        logger.info(
            f"Built reference graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges"
        )
        return graph

    def reference_records(self) -> list[EventRecord]:
        """Catalog relationships expressed as event records."""
        today = date.today().isoformat()
        records: list[EventRecord] = []

        for entity in self._entities:
            for rel in entity.relationships:
                target = self.find(rel.target_id, fuzzy=False)
                if target is None:
                    continue
                records.append(
                    EventRecord(
                        actor=entity.id,
                        target=rel.target_id,
                        action=REFERENCE_ACTION,
                        payload={
                            "Sentence": (
                                f"{entity.id} has {rel.relationship_label} "
                                f"relationship with {rel.target_id}"
                            ),
                            "Locations": self._combined_locations(entity, target),
                            "Datetimes": today,
                            "relationship": rel.relationship_label,
                            "source_role": entity.role,
                            "target_role": target.role,
                        },
                    )
                )

        return records

    @staticmethod
    def _combined_locations(first: EntityRecord, second: EntityRecord) -> str:
        locations: list[str] = []
        if first.location:
            locations.append(first.location)
        if second.location and second.location_tag != first.location_tag:
            locations.append(second.location)
        return ", ".join(locations) if locations else "United States"

    def match_record(self, record: EventRecord) -> RecordMatches:
        """Resolve every actor and target name of a record."""
        return RecordMatches(
            record=record,
            actor_matches=[NameMatch(name=n, entity=self.find(n)) for n in record.actors],
            target_matches=[NameMatch(name=n, entity=self.find(n)) for n in record.targets],
        )

    def profile(self, name: str, records: Iterable[EventRecord] = ()) -> EntityProfile | None:
        """Entity profile with the records that mention it, or None if unknown."""
        entity = self.find(name)
        if entity is None:
            return None

        related = [record for record in records if self._mentions(record, name, entity)]
        return EntityProfile(
            entity=entity,
            category=infer_category(entity),
            related_records=related,
        )

    def _mentions(self, record: EventRecord, name: str, entity: EntityRecord) -> bool:
        for candidate in (*record.actors, *record.targets):
            if candidate == name:
                return True
            match = self.find(candidate)
            if match is not None and match.id == entity.id:
                return True
        return False
