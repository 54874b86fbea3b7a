"""
GraphConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> network = ActorNetwork.from_catalog("./catalog.json")

    >>> # Explicit configuration
    >>> config = GraphConfig(min_lookup_interval=0.5, fuzzy_min_length=4)
    >>> network = ActorNetwork.from_catalog("./catalog.json", config=config)

    >>> # From config file
    >>> config = GraphConfig.from_file("./actor_graph.toml")

Environment Variables:
    ACTOR_GRAPH_SPARQL_ENDPOINT - Classification SPARQL endpoint
    ACTOR_GRAPH_USER_AGENT - User-Agent sent with classification queries
    ACTOR_GRAPH_MIN_LOOKUP_INTERVAL - Seconds between external lookups
    ACTOR_GRAPH_REQUEST_TIMEOUT - Seconds before a lookup is abandoned
    ACTOR_GRAPH_CLASSIFY_CONCURRENCY - Max concurrent classifications
    ACTOR_GRAPH_CACHE_FAILED_LOOKUPS - "0"/"false" to retry failed lookups
    ACTOR_GRAPH_FUZZY_MIN_LENGTH - Minimum length for substring matching
    ACTOR_GRAPH_CATALOG - Path to the reference catalog JSON
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

FUZZY_SCAN_ORDERS = ("insertion", "longest_first")

_TRUE_VALUES = {"1", "true", "yes", "on"}


class GraphConfig:
    """Configuration for actor-graph."""

    # === Classification ===

    sparql_endpoint: str = "https://query.wikidata.org/sparql"
    """SPARQL endpoint queried for "instance of" categories"""

    user_agent: str = "actor-graph/0.1 (entity classification)"
    """User-Agent header for classification queries"""

    min_lookup_interval: float = 0.1
    """Minimum seconds between two external lookup dispatches (global)"""

    request_timeout: float | None = None
    """Per-lookup timeout in seconds; None waits indefinitely"""

    result_limit: int = 10
    """LIMIT applied to each classification query"""

    classify_concurrency: int = 5
    """Max concurrent classify() calls issued by classify_many()"""

    cache_failed_lookups: bool = True
    """Cache UNKNOWN after a failed lookup instead of retrying next time"""

    # === Reference Matching ===

    fuzzy_matching: bool = True
    """Fall back to substring matching when exact lookups miss"""

    fuzzy_min_length: int = 3
    """Both sides of a substring match must be at least this long"""

    fuzzy_scan_order: str = "insertion"
    """Order of the fuzzy scan: "insertion" (catalog order) or "longest_first" """

    catalog_path: str | None = None
    """Default reference catalog used by the CLI"""

    # === Graph ===

    node_weight_min: float = 8.0
    """Smallest node weight"""

    node_weight_max: float = 25.0
    """Largest node weight"""

    node_weight_scale: float = 20.0
    """Weight added for the most frequent node before clamping"""

    fingerprint_sample: int = 5
    """Records sampled from each end of a batch for change detection"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

        if self.fuzzy_scan_order not in FUZZY_SCAN_ORDERS:
            raise ValueError(
                f"fuzzy_scan_order must be one of {FUZZY_SCAN_ORDERS}, "
                f"got {self.fuzzy_scan_order!r}"
            )

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        if endpoint := os.getenv("ACTOR_GRAPH_SPARQL_ENDPOINT"):
            self.sparql_endpoint = endpoint
        if agent := os.getenv("ACTOR_GRAPH_USER_AGENT"):
            self.user_agent = agent
        if interval := os.getenv("ACTOR_GRAPH_MIN_LOOKUP_INTERVAL"):
            self.min_lookup_interval = float(interval)
        if timeout := os.getenv("ACTOR_GRAPH_REQUEST_TIMEOUT"):
            self.request_timeout = float(timeout)
        if concurrency := os.getenv("ACTOR_GRAPH_CLASSIFY_CONCURRENCY"):
            self.classify_concurrency = int(concurrency)
        if cache_failed := os.getenv("ACTOR_GRAPH_CACHE_FAILED_LOOKUPS"):
            self.cache_failed_lookups = cache_failed.strip().lower() in _TRUE_VALUES
        if min_length := os.getenv("ACTOR_GRAPH_FUZZY_MIN_LENGTH"):
            self.fuzzy_min_length = int(min_length)
        if catalog := os.getenv("ACTOR_GRAPH_CATALOG"):
            self.catalog_path = catalog

    @classmethod
    def from_file(cls, path: str | Path) -> "GraphConfig":
        """
        Load configuration from TOML file.

        Sections are flattened into option names; top-level keys are used as is.

        Example TOML:
            [classification]
            min_lookup_interval = 0.25
            cache_failed_lookups = false

            [matching]
            fuzzy_min_length = 4
            fuzzy_scan_order = "longest_first"

            [graph]
            node_weight_max = 30

        Args:
            path: Path to TOML configuration file

        Returns:
            GraphConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file names an unknown option
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        flat_config: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, dict):
                flat_config.update(value)
            else:
                flat_config[key] = value

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> "GraphConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """Save configuration to a sectioned TOML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool | None]] = {
            "classification": {
                "sparql_endpoint": self.sparql_endpoint,
                "user_agent": self.user_agent,
                "min_lookup_interval": self.min_lookup_interval,
                "request_timeout": self.request_timeout,
                "result_limit": self.result_limit,
                "classify_concurrency": self.classify_concurrency,
                "cache_failed_lookups": self.cache_failed_lookups,
            },
            "matching": {
                "fuzzy_matching": self.fuzzy_matching,
                "fuzzy_min_length": self.fuzzy_min_length,
                "fuzzy_scan_order": self.fuzzy_scan_order,
                "catalog_path": self.catalog_path,
            },
            "graph": {
                "node_weight_min": self.node_weight_min,
                "node_weight_max": self.node_weight_max,
                "node_weight_scale": self.node_weight_scale,
                "fingerprint_sample": self.fingerprint_sample,
            },
        }

        # Build TOML string manually; None values are omitted
        lines = ["# actor-graph configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
            lines.append("")

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> "GraphConfig":
        """Return new config with specified overrides."""
        new_config = GraphConfig.__new__(GraphConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            setattr(new_config, key, value)
        return new_config
