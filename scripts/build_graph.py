#!/usr/bin/env python3
"""
Build Graph Script

Thin wrapper around the ActorNetwork ingestion APIs.

Usage:
    python scripts/build_graph.py data/events.csv --catalog data/catalog.json
    python scripts/build_graph.py data/events.json --catalog data/catalog.json --classify
    python scripts/build_graph.py data/events.csv --output ./graph.json --min-interval 0.5
"""

from __future__ import annotations

import argparse
import asyncio
import json
import time
from pathlib import Path

from dotenv import load_dotenv

from actor_graph.api.network import ActorNetwork
from actor_graph.cli import load_rows
from actor_graph.config import GraphConfig
from actor_graph.reference.index import ReferenceIndex

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a unified entity graph from event records"
    )
    parser.add_argument("input", type=Path, help="Path to .json or .csv event records")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Reference catalog JSON (default: ACTOR_GRAPH_CATALOG)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("./graph.json"),
        help="Output path for the graph payload (default: ./graph.json)",
    )
    parser.add_argument(
        "--min-interval",
        type=float,
        default=None,
        help="Seconds between classification lookups (default: from GraphConfig)",
    )
    parser.add_argument(
        "--classify",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Classify nodes without a reference category (default: false)",
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()

    if not args.input.exists():
        raise FileNotFoundError(f"Input file not found: {args.input}")

    config = (
        GraphConfig(min_lookup_interval=args.min_interval)
        if args.min_interval is not None
        else GraphConfig()
    )
    catalog = args.catalog or (Path(config.catalog_path) if config.catalog_path else None)
    index = ReferenceIndex.from_file(catalog, config) if catalog else None

    start = time.time()
    async with ActorNetwork(index, config=config) as network:
        print(f"Ingesting {args.input}...")
        graph = network.ingest(load_rows(args.input))

        if args.classify:
            print("Classifying nodes...")
            classified = await network.classify_nodes()
            print(f"  Classified {len(classified)} nodes")
            print(f"  External lookups: {network.resolver.lookups_dispatched}")

        stats = network.stats()

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(graph.to_payload(), indent=2, ensure_ascii=False))

    total = time.time() - start
    print("\nBuild complete")
    print(f"  Reference entities: {stats['reference_entities']}")
    print(f"  Records: {stats['records']}")
    print(f"  Nodes: {stats['nodes']}")
    print(f"  Edges: {stats['edges']}")
    print(f"  Output: {args.output}")
    print(f"  Total script duration: {total:.2f}s")


if __name__ == "__main__":
    asyncio.run(main())
