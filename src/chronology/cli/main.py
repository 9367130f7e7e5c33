"""
Command Line Interface for Chronology.

Lays out a JSON export of timed notes on the day or week timeline and prints
it as a tree, or dumps the grouping as JSON for other tools.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from chronology import __version__
from chronology.config import AppConfig, ConfigError, TimelineConfig, load_config
from chronology.core.models import BucketizationResult, ClusterBucket, TimedItem
from chronology.core.taxonomy import CalendarGranularity
from chronology.loader import ItemLoadError, load_items
from chronology.utils.logging import LogContext, setup_logging

logger = logging.getLogger(__name__)

console = Console()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def print_header(text: str) -> None:
    """Print a styled header."""
    console.print()
    console.print(Panel(text, style="bold blue", expand=False))
    console.print()


def print_success(text: str) -> None:
    """Print green success message."""
    console.print(f"[bold green]✓[/bold green] {text}", soft_wrap=True)


def print_warning(text: str) -> None:
    """Print yellow warning message."""
    console.print(f"[bold yellow]⚠[/bold yellow] {text}", soft_wrap=True)


def print_error(text: str) -> None:
    """Print red error message."""
    console.print(f"[bold red]✗[/bold red] {escape(text)}", soft_wrap=True)


def format_time(moment: datetime, settings: TimelineConfig) -> str:
    """Clock time of an item in the configured clock style."""
    return moment.strftime("%H:%M" if settings.use_24_hour_clock else "%I:%M %p")


def describe_item(item: TimedItem, settings: TimelineConfig) -> str:
    """One tree leaf: badge, time and path."""
    return (
        f"[dim]\\[{item.attribute.badge}][/dim] "
        f"{format_time(item.time, settings)}  {escape(item.path)}"
    )


def describe_collapsed(cluster: ClusterBucket, settings: TimelineConfig) -> str:
    """Summary line replacing a multi-item cluster when grouping is on."""
    first, last = cluster.time_span(lambda item: item.time)
    return (
        f"{format_time(first, settings)} - {format_time(last, settings)}  "
        f"[bold]{len(cluster.items)}[/bold] Elements ..."
    )


def render_timeline(result: BucketizationResult, view: str, settings: TimelineConfig) -> Tree:
    """Build the rich tree for a bucketed timeline.

    Empty clusters are omitted, empty slots inside the active span are kept
    so gaps stay visible.
    """
    tree = Tree(f"[bold]{view.capitalize()} timeline[/bold]")
    for slot in result.slots:
        slot_label = f"[bold cyan]{escape(slot.label)}[/bold cyan]"
        if slot.is_empty():
            tree.add(f"{slot_label} [dim](no items)[/dim]")
            continue

        slot_node = tree.add(slot_label)
        for cluster in slot.clusters:
            if cluster.is_empty():
                continue
            if settings.group_items_in_same_bucket and len(cluster.items) > 1:
                slot_node.add(describe_collapsed(cluster, settings))
                continue
            cluster_node = slot_node.add(f"[magenta]:{escape(cluster.label)}[/magenta]")
            for item in cluster.items:
                cluster_node.add(describe_item(item, settings))
    return tree


def result_to_json(view: str, result: BucketizationResult | None) -> dict[str, Any]:
    """Serializable form of a bucketing run."""
    if result is None:
        return {"view": view, "clustered": False, "slots": [], "unbucketed": []}
    return {
        "view": view,
        "clustered": True,
        "slots": [slot.model_dump(mode="json") for slot in result.slots],
        "unbucketed": [item.model_dump(mode="json") for item in result.unbucketed],
    }


# =============================================================================
# MAIN CLI GROUP
# =============================================================================


@click.group()
@click.version_option(__version__, prog_name="Chronology")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.option(
    "--config", "config_path", type=click.Path(path_type=Path), help="Custom config file"
)
@click.pass_context
def cli(ctx, verbose, debug, config_path):
    """
    Chronology - lay out timed notes on a day or week timeline.

    Items are grouped into hour or weekday slots, each split into smaller
    clusters, with empty slots before the first and after the last item
    trimmed away.
    """
    try:
        app_config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        sys.exit(1)

    if debug or app_config.debug:
        level = "DEBUG"
    elif verbose or app_config.verbose:
        level = "INFO"
    else:
        level = app_config.logging.level
    setup_logging(level=level, log_file=app_config.logging.log_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = app_config
    ctx.obj["debug"] = debug


# =============================================================================
# TIMELINE COMMAND
# =============================================================================


@cli.command()
@click.argument("items_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--view",
    type=click.Choice([g.value for g in CalendarGranularity]),
    default=CalendarGranularity.DAY.value,
    show_default=True,
    help="Calendar view to lay the items out for",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["tree", "json"]),
    default="tree",
    show_default=True,
    help="Output format",
)
@click.option("--24h/--12h", "use_24h", default=None, help="Clock style for hour labels")
@click.option(
    "--group/--no-group", "group_items", default=None, help="Collapse multi-item clusters"
)
@click.option(
    "--first-weekday",
    type=click.IntRange(0, 6),
    default=None,
    help="First day of the week view (0 = Monday, 6 = Sunday)",
)
@click.pass_context
def timeline(ctx, items_file, view, output_format, use_24h, group_items, first_weekday):
    """
    Show ITEMS_FILE on a timeline.

    ITEMS_FILE is a JSON list of {"path", "attribute", "time"} records, or an
    object holding such a list under "items".

    Example:
        chronology timeline notes.json --view week --12h
    """
    app_config: AppConfig = ctx.obj["config"]
    overrides = {
        "use_24_hour_clock": use_24h,
        "group_items_in_same_bucket": group_items,
        "first_weekday": first_weekday,
    }
    settings = app_config.timeline.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )

    try:
        with LogContext(f"Loading {items_file.name}", logger=logger):
            items = load_items(items_file)
    except ItemLoadError as e:
        print_error(str(e))
        if ctx.obj.get("debug"):
            logger.exception("Item loading failure details")
        sys.exit(1)

    taxonomy = CalendarGranularity(view).taxonomy(settings)
    if taxonomy is None:
        logger.info(f"No clustering defined for the {view} view")
        if output_format == "json":
            click.echo(json.dumps(result_to_json(view, None), indent=2))
        else:
            print_warning(f"The {view} view has no timeline layout; nothing to show.")
        return

    with LogContext(f"Bucketizing {len(items)} items", logger=logger):
        result = taxonomy.bucketize_detailed(items)

    if output_format == "json":
        click.echo(json.dumps(result_to_json(view, result), indent=2))
        return

    if not result.slots:
        print_warning("No items to show.")
    else:
        console.print(render_timeline(result, view, settings))
        print_success(f"{result.bucketed_count} items across {len(result.slots)} slots")

    if result.unbucketed:
        print_warning(
            f"{len(result.unbucketed)} items fall outside the {view} layout and are not shown"
        )


# =============================================================================
# CONFIG GROUP
# =============================================================================


@cli.group()
def config():
    """Inspect configuration settings."""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Display the effective configuration."""
    app_config: AppConfig = ctx.obj["config"]
    print_header("Current Configuration")

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")

    for key, value in app_config.timeline.model_dump().items():
        table.add_row(f"timeline.{key}", str(value))
    table.add_row("logging.level", app_config.logging.level)
    table.add_row("logging.log_file", str(app_config.logging.log_file or "-"))
    table.add_row("debug", str(app_config.debug))

    console.print(table)


def main():
    """Entry point for the console script."""
    cli()


if __name__ == "__main__":
    main()
