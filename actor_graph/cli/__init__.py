"""
Command-Line Interface

Commands:
    actor-graph build     - Build the unified graph from a catalog and records
    actor-graph classify  - Classify entity names
    actor-graph lookup    - Resolve a name against the reference catalog
    actor-graph profile   - Show a reference entity and the records naming it

Usage:
    actor-graph build events.csv --catalog catalog.json --output graph.json
    actor-graph build events.json --catalog catalog.json --classify
    actor-graph classify NATO "European Union" Israel
    actor-graph lookup "Sen. Bernie Sanders" --catalog catalog.json
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from actor_graph.config import GraphConfig

__all__ = ["main", "app"]

app = typer.Typer(
    name="actor-graph",
    help="Entity relationship graphs from event records",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Read event rows from a .json (list or {"records": [...]}) or .csv file."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        rows = data.get("records", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise typer.BadParameter(f"{path} does not contain a list of records")
        return [row for row in rows if isinstance(row, dict)]
    if suffix == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))
    raise typer.BadParameter(f"Unsupported records file type: {suffix} (expected .json/.csv)")


def _config(config_file: Optional[Path]) -> GraphConfig:
    return GraphConfig.from_file(config_file) if config_file else GraphConfig()


def _catalog_path(catalog: Optional[Path], config: GraphConfig) -> Path | None:
    if catalog is not None:
        return catalog
    return Path(config.catalog_path) if config.catalog_path else None


@app.command()
def build(
    records: Path = typer.Argument(..., help="Event records (.json or .csv)", exists=True),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="Reference catalog JSON", exists=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the graph payload as JSON"
    ),
    classify: bool = typer.Option(
        False, "--classify/--no-classify", help="Classify nodes missing a category"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="TOML configuration file", exists=True
    ),
) -> None:
    """Build the unified graph."""
    from actor_graph.api.network import ActorNetwork
    from actor_graph.reference.index import ReferenceIndex

    config = _config(config_file)
    catalog_path = _catalog_path(catalog, config)

    async def _run() -> None:
        index = ReferenceIndex.from_file(catalog_path, config) if catalog_path else None
        async with ActorNetwork(index, config=config) as network:
            graph = network.ingest(load_rows(records))

            if classify:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    console=console,
                ) as progress:
                    task = progress.add_task("Classifying nodes...")
                    await network.classify_nodes()
                    progress.update(task, completed=True)

            stats = network.stats()
            table = Table(title="Unified Graph")
            table.add_column("Metric", style="cyan")
            table.add_column("Count", justify="right", style="green")
            for key, value in stats.items():
                table.add_row(key.replace("_", " ").title(), str(value))
            console.print(table)

            if output:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(json.dumps(graph.to_payload(), indent=2, ensure_ascii=False))
                console.print(f"[green]Wrote graph to {output}[/]")

    asyncio.run(_run())


@app.command()
def classify(
    names: list[str] = typer.Argument(..., help="Entity names"),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="Reference catalog JSON", exists=True
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="TOML configuration file", exists=True
    ),
) -> None:
    """Classify entity names."""
    from actor_graph.classification import (
        ClassificationResolver,
        category_icon,
        category_label,
    )
    from actor_graph.reference.index import ReferenceIndex

    config = _config(config_file)
    catalog_path = _catalog_path(catalog, config)

    async def _run() -> None:
        index = ReferenceIndex.from_file(catalog_path, config) if catalog_path else None
        async with ClassificationResolver(reference_index=index, config=config) as resolver:
            results = await resolver.classify_many(names)

        table = Table(title="Classifications")
        table.add_column("Name", style="cyan")
        table.add_column("Category")
        for name, category in results.items():
            table.add_row(name, f"{category_icon(category)} {category_label(category)}")
        console.print(table)

    asyncio.run(_run())


@app.command()
def lookup(
    name: str = typer.Argument(..., help="Name to resolve"),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="Reference catalog JSON", exists=True
    ),
    exact: bool = typer.Option(False, "--exact", help="Disable substring matching"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="TOML configuration file", exists=True
    ),
) -> None:
    """Resolve a name against the reference catalog."""
    from actor_graph.reference.index import ReferenceIndex, infer_category

    config = _config(config_file)
    catalog_path = _catalog_path(catalog, config)
    if catalog_path is None:
        console.print("[red]No catalog given (use --catalog or ACTOR_GRAPH_CATALOG)[/]")
        raise typer.Exit(code=1)

    index = ReferenceIndex.from_file(catalog_path, config)
    entity = index.find(name, fuzzy=False if exact else None)
    if entity is None:
        console.print(f"[yellow]No reference entity matches '{name}'[/]")
        raise typer.Exit(code=1)

    console.print(Panel(
        f"  Role: {entity.role or '-'}\n"
        f"  Location: {entity.location or '-'}\n"
        f"  Category: {infer_category(entity).value}\n"
        f"  Alternate names: {', '.join(entity.alternate_names) or '-'}\n"
        f"  Relationships: {len(entity.relationships)}",
        title=entity.id,
    ))


@app.command()
def profile(
    name: str = typer.Argument(..., help="Entity name"),
    records: Path = typer.Argument(..., help="Event records (.json or .csv)", exists=True),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="Reference catalog JSON", exists=True
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="TOML configuration file", exists=True
    ),
) -> None:
    """Show a reference entity and the records that mention it."""
    from actor_graph.reference.index import ReferenceIndex
    from actor_graph.types import EventRecord

    config = _config(config_file)
    catalog_path = _catalog_path(catalog, config)
    if catalog_path is None:
        console.print("[red]No catalog given (use --catalog or ACTOR_GRAPH_CATALOG)[/]")
        raise typer.Exit(code=1)

    index = ReferenceIndex.from_file(catalog_path, config)
    result = index.profile(name, [EventRecord.from_row(row) for row in load_rows(records)])
    if result is None:
        console.print(f"[yellow]No reference entity matches '{name}'[/]")
        raise typer.Exit(code=1)

    table = Table(title=f"{result.entity.id} ({result.category.value})")
    table.add_column("Actor", style="cyan")
    table.add_column("Action")
    table.add_column("Target", style="cyan")
    for record in result.related_records:
        table.add_row(record.actor, record.action, record.target)
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()
