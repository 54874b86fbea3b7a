"""Tests for data types."""

import pytest
from pydantic import ValidationError

from actor_graph.types import (
    Category,
    EntityRecord,
    EventRecord,
    Graph,
    GraphEdge,
    GraphNode,
    RoleTag,
)


class TestEntityRecord:
    """Catalog entries."""

    def test_from_catalog_entry(self):
        entity = EntityRecord.from_catalog_entry(
            {
                "id": " Gavin Newsom ",
                "alternate_names": ["Governor Newsom"],
                "role": "Governor of California",
                "state_or_country": "California",
                "connections": [
                    {"target": "Kamala Harris", "relationship": "ally"},
                    {"relationship": "missing target"},
                ],
                "party": "Democratic",
            }
        )
        assert entity.id == "Gavin Newsom"
        assert entity.alternate_names == ("Governor Newsom",)
        assert [r.target_id for r in entity.relationships] == ["Kamala Harris"]
        assert entity.attributes == {"party": "Democratic"}
        assert entity.location == "California, United States"

    def test_non_list_fields_rejected(self):
        with pytest.raises(ValueError, match="alternate_names"):
            EntityRecord.from_catalog_entry({"id": "Jane Roe", "alternate_names": "JR"})
        with pytest.raises(ValueError, match="connections"):
            EntityRecord.from_catalog_entry({"id": "Jane Roe", "connections": "Jane Doe"})

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            EntityRecord.from_catalog_entry({"role": "Senator"})

    def test_immutable(self):
        entity = EntityRecord(id="Jane Doe")
        with pytest.raises(ValidationError):
            entity.role = "Mayor"

    def test_no_location(self):
        assert EntityRecord(id="Jane Doe").location is None


class TestEventRecord:
    """Parsed event rows."""

    def test_from_row_keeps_extra_columns(self):
        row = {"Actor": "NATO", "Target": "Russia", "Action": "condemn", "Datetimes": "2024-03-01"}
        record = EventRecord.from_row(row)
        assert record.actor == "NATO"
        assert record.payload == {"Datetimes": "2024-03-01"}
        assert record.to_row() == row

    def test_missing_fields(self):
        record = EventRecord.from_row({"Actor": None, "Action": "  "})
        assert record.actor == ""
        assert record.target == ""
        assert record.action == "unknown"

    def test_split_fields(self):
        record = EventRecord(actor="NATO, EU", target="Russia,", action="condemn")
        assert record.actors == ["NATO", "EU"]
        assert record.targets == ["Russia"]


class TestGraph:
    """Node and edge tables."""

    def test_copy_node_is_independent(self):
        record = EventRecord(actor="A", target="B", action="x")
        node = GraphNode(
            id="A", display_name="A", role=RoleTag.ACTOR, action_labels={"x"}, source_records=[record]
        )
        copy = node.copy_node()
        copy.action_labels.add("y")
        copy.source_records.append(record)
        assert node.action_labels == {"x"}
        assert len(node.source_records) == 1
        assert copy.source_records[0] is record

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            GraphNode(id="A", display_name="A", role=RoleTag.ACTOR, occurrence_count=-1)

    def test_payload(self):
        graph = Graph()
        graph.add_node(
            GraphNode(id="A", display_name="A's", role=RoleTag.BOTH, occurrence_count=2,
                      action_labels={"b", "a"}, weight=25.0, category=Category.COUNTRY)
        )
        graph.add_node(GraphNode(id="B", display_name="B", role=RoleTag.TARGET))
        graph.add_edge(GraphEdge(source="A", target="B", occurrence_count=1, relationship_label="ally"))
        graph.add_edge(GraphEdge(source="B", target="A", occurrence_count=1))

        payload = graph.to_payload()

        assert payload["nodes"][0] == {
            "id": "A",
            "displayName": "A's",
            "roleTag": "both",
            "occurrenceCount": 2,
            "actionLabels": ["a", "b"],
            "weight": 25.0,
            "category": "country",
        }
        assert payload["nodes"][1]["category"] is None
        assert payload["edges"][0]["relationshipLabel"] == "ally"
        assert "relationshipLabel" not in payload["edges"][1]

    def test_edges_for(self):
        graph = Graph()
        graph.add_edge(GraphEdge(source="A", target="B"))
        graph.add_edge(GraphEdge(source="C", target="A"))
        graph.add_edge(GraphEdge(source="B", target="C"))
        assert [e.key for e in graph.edges_for("A")] == [("A", "B"), ("C", "A")]
