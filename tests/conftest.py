"""Shared fixtures: a small reference catalog and event records."""

import copy

import pytest

from actor_graph.config import GraphConfig
from actor_graph.reference import ReferenceIndex
from actor_graph.types import EventRecord

CATALOG = [
    {
        "id": "Bernie Sanders",
        "alternate_names": ["Senator Sanders"],
        "role": "U.S. Senator",
        "state_or_country": "Vermont",
        "party": "Independent",
        "connections": [
            {"target": "Elizabeth Warren", "relationship": "ally"},
            {"target": "Democratic Party", "relationship": "caucuses with"},
            {"target": "Nobody In Catalog", "relationship": "rival"},
        ],
    },
    {
        "id": "Elizabeth Warren",
        "role": "U.S. Senator",
        "state_or_country": "Massachusetts",
        "connections": [{"target": "Sen. Bernie Sanders", "relationship": "ally"}],
    },
    {
        "id": "Democratic Party",
        "alternate_names": ["Democrats"],
        "role": "Political party",
    },
    {
        "id": "Emmanuel Macron",
        "role": "President of France",
        "state_or_country": "France",
        "non_us": True,
    },
]


@pytest.fixture
def config(monkeypatch):
    for var in (
        "ACTOR_GRAPH_SPARQL_ENDPOINT",
        "ACTOR_GRAPH_USER_AGENT",
        "ACTOR_GRAPH_MIN_LOOKUP_INTERVAL",
        "ACTOR_GRAPH_REQUEST_TIMEOUT",
        "ACTOR_GRAPH_CLASSIFY_CONCURRENCY",
        "ACTOR_GRAPH_CACHE_FAILED_LOOKUPS",
        "ACTOR_GRAPH_FUZZY_MIN_LENGTH",
        "ACTOR_GRAPH_CATALOG",
    ):
        monkeypatch.delenv(var, raising=False)
    return GraphConfig(min_lookup_interval=0.0)


@pytest.fixture
def catalog():
    return copy.deepcopy(CATALOG)


@pytest.fixture
def index(config, catalog):
    idx = ReferenceIndex(config)
    idx.load(catalog)
    return idx


@pytest.fixture
def records():
    return [
        EventRecord(actor="NATO, EU", target="Russia", action="condemn"),
        EventRecord(actor="United States", target="UK", action="visit"),
        EventRecord(actor="United States", target="UK", action="meet"),
        EventRecord(actor="Russia", target="Ukraine", action="attack"),
    ]
