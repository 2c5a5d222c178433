"""Command-line interface for TopicGraph.

Builds the topic engagement graph from a SQLite corpus or a JSON snapshot.
"""

import click
import json
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import print as rprint

from topicgraph import __version__
from topicgraph.cli_config import CLIConfig
from topicgraph.config import TopicGraphConfig
from topicgraph.engine import TopicGraphEngine, rank_topics
from topicgraph.integrations.storage import SQLiteStorage
from topicgraph.providers.corpus import CorpusProvider, JSONCorpusProvider
from topicgraph.serialization import graph_to_payload

logger = logging.getLogger(__name__)

console = Console()


# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s - %(message)s'
)


def _open_provider(database: Optional[str], snapshot: Optional[str]) -> CorpusProvider:
    """Snapshot file if given, otherwise the SQLite database."""
    if snapshot:
        if not Path(snapshot).exists():
            rprint(f"[red]✗[/red] Snapshot not found: {snapshot}")
            raise SystemExit(1)
        return JSONCorpusProvider(snapshot)

    database = database or CLIConfig().get("database")
    if not Path(database).exists():
        rprint(f"[red]✗[/red] Database not found: {database}")
        rprint("\nImport a snapshot first with: [cyan]topicgraph import <snapshot.json>[/cyan]")
        raise SystemExit(1)
    return SQLiteStorage(database)


def _engine_config(
    max_nodes: Optional[int],
    regularization_weight: Optional[float],
    min_sample_size: Optional[int],
    category_threshold: Optional[float],
) -> TopicGraphConfig:
    """Command-line values, falling back to saved settings."""
    cfg = CLIConfig()
    config = TopicGraphConfig.from_params(
        regularization_weight=cfg.get("regularization_weight") if regularization_weight is None else regularization_weight,
        minimum_sample_size=cfg.get("minimum_sample_size") if min_sample_size is None else min_sample_size,
        max_nodes=cfg.get("max_nodes") if max_nodes is None else max_nodes,
        category_threshold=cfg.get("category_threshold") if category_threshold is None else category_threshold,
    )
    try:
        config.validate()
    except ValueError as e:
        raise click.BadParameter(str(e))
    return config


def graph_options(func):
    """Options shared by the commands that compute a graph."""
    options = [
        click.option("--database", default=None, help="SQLite corpus (defaults to saved setting)"),
        click.option("--snapshot", default=None, help="Read the corpus from a JSON snapshot instead"),
        click.option("--max-nodes", type=int, default=None, help="Maximum number of topics in the graph"),
        click.option("--regularization-weight", type=float, default=None, help="Virtual samples at multiplier 1.0"),
        click.option("--min-sample-size", type=int, default=None, help="Starting minimum videos per topic"),
        click.option("--category-threshold", type=float, default=None, help="Connection strength that counts toward a category"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="topicgraph")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """TopicGraph - which subjects lift audience engagement.

    Scores content against its channel's baseline, aggregates by topic and
    maps how topics co-occur.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command("graph")
@graph_options
@click.option("--output", default=None, help="Write the graph view JSON payload to this file")
def graph_command(
    database: Optional[str],
    snapshot: Optional[str],
    max_nodes: Optional[int],
    regularization_weight: Optional[float],
    min_sample_size: Optional[int],
    category_threshold: Optional[float],
    output: Optional[str],
):
    """Compute the topic engagement graph.

    Example:
        topicgraph graph --max-nodes 20
        topicgraph graph --snapshot corpus.json --output graph.json
    """
    config = _engine_config(max_nodes, regularization_weight, min_sample_size, category_threshold)
    provider = _open_provider(database, snapshot)

    try:
        graph = TopicGraphEngine(config).compute_from_provider(provider)
    finally:
        if isinstance(provider, SQLiteStorage):
            provider.close()

    if not graph.topics:
        rprint("[yellow]⚠[/yellow]  No topics with content found")
    else:
        table = Table(title="Topic Graph")
        table.add_column("#", style="dim")
        table.add_column("Topic", style="cyan")
        table.add_column("Videos", justify="right")
        table.add_column("Multiplier", justify="right", style="green")
        table.add_column("Category", justify="center")
        table.add_column("Top Connection")

        for topic in graph.topics:
            top = topic.connections[0] if topic.connections else None
            table.add_row(
                str(topic.index + 1),
                topic.name,
                str(topic.video_count),
                f"{topic.engagement_multiplier:.3f}",
                "✓" if topic.is_category else "",
                f"{top.target_name} ({top.weight:.0%})" if top else "-",
            )

        console.print(table)
        rprint(f"\nRelationships: {len(graph.relationships)}")
        rprint(f"Minimum sample size used: {graph.effective_minimum_sample_size}")

    if output:
        with open(output, 'w') as f:
            json.dump(graph_to_payload(graph), f, indent=2)
        rprint(f"[green]✓[/green] Wrote graph payload to {output}")


@main.command("ranking")
@graph_options
@click.option("--limit", default=10, type=int, help="Number of topics to show")
def ranking_command(
    database: Optional[str],
    snapshot: Optional[str],
    max_nodes: Optional[int],
    regularization_weight: Optional[float],
    min_sample_size: Optional[int],
    category_threshold: Optional[float],
    limit: int,
):
    """Rank topics by engagement multiplier."""
    config = _engine_config(max_nodes, regularization_weight, min_sample_size, category_threshold)
    provider = _open_provider(database, snapshot)

    try:
        graph = TopicGraphEngine(config).compute_from_provider(provider)
    finally:
        if isinstance(provider, SQLiteStorage):
            provider.close()

    table = Table(title="Topic Ranking")
    table.add_column("Rank", style="dim")
    table.add_column("Topic", style="cyan")
    table.add_column("Multiplier", justify="right", style="green")
    table.add_column("Videos", justify="right")

    for rank, topic in enumerate(rank_topics(graph)[:limit], start=1):
        table.add_row(str(rank), topic.name, f"{topic.engagement_multiplier:.3f}", str(topic.video_count))

    console.print(table)


@main.command("import")
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--database", default=None, help="SQLite corpus to import into (defaults to saved setting)")
def import_command(snapshot: str, database: Optional[str]):
    """Import a JSON snapshot into the SQLite corpus."""
    database = database or CLIConfig().get("database")

    with SQLiteStorage(database) as storage:
        counts = storage.import_snapshot(JSONCorpusProvider(snapshot))

    rprint(
        f"[green]✓[/green] Imported {counts['content_items']} content items, "
        f"{counts['topics']} topics and {counts['associations']} associations into {database}"
    )


@main.command("stats")
@click.option("--database", default=None, help="SQLite corpus (defaults to saved setting)")
@click.option("--source", type=click.Choice(["author", "ai"]), default=None, help="Only count one association source")
def stats_command(database: Optional[str], source: Optional[str]):
    """Show content counts per topic."""
    storage = _open_provider(database, None)
    try:
        stats = storage.get_topic_stats(source=source)
    finally:
        storage.close()

    table = Table(title="Topic Statistics")
    table.add_column("Topic", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Avg Engagement", justify="right", style="green")

    for row in stats:
        table.add_row(row["name"], str(row["video_count"]), f"{row['avg_engagement']:,.0f}")

    console.print(table)
    rprint(f"\nTotal topics: {len(stats)}")


@main.group()
def config():
    """Manage saved TopicGraph settings."""
    pass


@config.command("show")
def show_config():
    """Show current settings."""
    cfg = CLIConfig()

    table = Table(title="TopicGraph Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in cfg.show().items():
        table.add_row(key, str(value))

    console.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
def set_config(key: str, value: str):
    """Save a default, e.g. `topicgraph config set max_nodes 25`."""
    cfg = CLIConfig()
    try:
        cfg.set(key, value)
    except ValueError as e:
        rprint(f"[red]✗[/red] {e}")
        raise SystemExit(1)

    rprint(f"[green]✓[/green] {key} set to: {cfg.get(key)}")


@config.command("clear")
@click.confirmation_option(prompt="Are you sure you want to reset all settings?")
def clear_config():
    """Reset all settings to defaults (requires confirmation)."""
    CLIConfig().clear()

    rprint("[green]✓[/green] Configuration reset")


if __name__ == "__main__":
    main()
