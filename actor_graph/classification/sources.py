"""
Classification Sources

External lookups answering "what is this name an instance of?".

Sources return raw class identifiers (Wikidata QIDs); mapping them to
categories happens in the resolver. Any failure is raised as
ClassificationLookupError, which the resolver turns into UNKNOWN.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from actor_graph.config import GraphConfig

logger = logging.getLogger(__name__)


class ClassificationLookupError(RuntimeError):
    """An external classification lookup failed (network, status or parse)."""


class ClassificationSource(ABC):
    """Abstract interface for external classification lookups."""

    @abstractmethod
    async def instance_of(self, name: str) -> list[str]:
        """Class identifiers the named entity is an instance of (may be empty)."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None


def _escape_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_instance_of_query(name: str, limit: int = 10) -> str:
    """SPARQL selecting items labelled `name` (English) and their P31 classes."""
    return (
        "SELECT DISTINCT ?item ?instanceOf WHERE {\n"
        f'  ?item rdfs:label "{_escape_literal(name)}"@en .\n'
        "  ?item wdt:P31 ?instanceOf .\n"
        "}\n"
        f"LIMIT {int(limit)}"
    )


def parse_instance_of_results(data: Any) -> list[str]:
    """
    Extract class identifiers from SPARQL JSON results.

    Raises:
        ClassificationLookupError: If the document is not SPARQL JSON
    """
    try:
        bindings = data["results"]["bindings"]
    except (KeyError, TypeError) as e:
        raise ClassificationLookupError(f"Unexpected SPARQL response shape: {e}") from e

    identifiers: list[str] = []
    for binding in bindings:
        value = (binding.get("instanceOf") or {}).get("value") if isinstance(binding, dict) else None
        if value:
            identifiers.append(value.rstrip("/").rsplit("/", 1)[-1])
    return identifiers


class WikidataSource(ClassificationSource):
    """
    Wikidata SPARQL "instance of" lookup.

    Usage:
        async with WikidataSource(config) as source:
            qids = await source.instance_of("NATO")
    """

    def __init__(
        self,
        config: GraphConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or GraphConfig()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={
                    "Accept": "application/sparql-results+json",
                    "User-Agent": self.config.user_agent,
                },
                timeout=self.config.request_timeout,
            )
            self._owns_client = True
        return self._client

    async def instance_of(self, name: str) -> list[str]:
        query = build_instance_of_query(name, self.config.result_limit)
        client = self._get_client()

        try:
            response = await client.get(
                self.config.sparql_endpoint,
                params={"query": query, "format": "json"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ClassificationLookupError(
                f"HTTP {e.response.status_code} from {self.config.sparql_endpoint}"
            ) from e
        except httpx.HTTPError as e:
            raise ClassificationLookupError(f"Request failed: {e}") from e
        except ValueError as e:
            raise ClassificationLookupError(f"Invalid JSON in response: {e}") from e

        identifiers = parse_instance_of_results(data)
        logger.debug(f"Wikidata returned {len(identifiers)} classes for '{name}'")
        return identifiers

    async def close(self) -> None:
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "WikidataSource":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
