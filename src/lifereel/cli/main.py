"""Command-line interface for lifereel.

A thin shell over the chronology engine, handy for checking how a folder of
photos will be bucketed before wiring the engine into an app.

Usage:
    lifereel age 2024-01-15 2024-03-20
    lifereel buckets ~/Pictures/ada --birth 2024-01-15 --granularity coarse
    lifereel range "2 Months" --birth 2024-01-15
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from lifereel import __version__
from lifereel.config import AppConfig, ConfigError, get_config, load_config
from lifereel.core import (
    AgeCalculator,
    Bucketizer,
    BucketOrderer,
    ChronologyError,
    DateRangeResolver,
    Granularity,
    Person,
    SortOrder,
)
from lifereel.sources import LocalFolderPhotoSource
from lifereel.utils.logging import configure_logging, timed

logger = logging.getLogger(__name__)

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


# =============================================================================
# Helper Functions
# =============================================================================


def print_error(text: str) -> None:
    """Print an error message with red icon."""
    console.print(f"[red]✗[/red] {text}")


def print_warning(text: str) -> None:
    """Print a warning message with yellow icon."""
    console.print(f"[yellow]⚠[/yellow] {text}")


def _format_dt(dt: datetime) -> str:
    if dt == datetime.min.replace(tzinfo=dt.tzinfo):
        return "(earliest)"
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _config(ctx: click.Context) -> AppConfig:
    return ctx.obj["config"]


# =============================================================================
# Main Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="lifereel")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", "-c", "config_path", type=click.Path(path_type=Path), help="Path to config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """lifereel - browse photos of a person by age."""
    try:
        config = load_config(config_path) if config_path else get_config()
    except ConfigError as e:
        print_error(str(e))
        sys.exit(1)

    configure_logging(config.logging, verbose=verbose)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Commands
# =============================================================================


@cli.command()
@click.argument("birth", type=click.DateTime(formats=DATE_FORMATS))
@click.argument("at", type=click.DateTime(formats=DATE_FORMATS), required=False)
@click.option("--name", help="Describe the age as a sentence about this person")
def age(birth: datetime, at: datetime | None, name: str | None) -> None:
    """Print the age at AT (default: now) of someone born at BIRTH."""
    at = at or datetime.now()
    calculator = AgeCalculator()
    try:
        if name:
            text = calculator.describe(Person(name=name, date_of_birth=birth), at)
        else:
            text = calculator.calculate_string(birth, at)
    except ChronologyError as e:
        print_error(str(e))
        sys.exit(1)
    console.print(text)


@cli.command()
@click.argument("folder", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--birth", required=True, type=click.DateTime(formats=DATE_FORMATS), help="Birth date or due date")
@click.option(
    "--granularity",
    "-g",
    type=click.Choice([g.value for g in Granularity]),
    help="Bucket granularity (default from config)",
)
@click.option(
    "--order",
    type=click.Choice(["oldest", "latest"]),
    help="Show oldest or latest stacks first (default from config)",
)
@click.pass_context
def buckets(
    ctx: click.Context,
    folder: Path,
    birth: datetime,
    granularity: str | None,
    order: str | None,
) -> None:
    """Group the photos in FOLDER into age buckets."""
    config = _config(ctx)
    chosen = Granularity(granularity) if granularity else config.chronology.default_granularity
    if order is None:
        sort_order = config.chronology.sort_order
    else:
        sort_order = SortOrder.OLDEST_TO_LATEST if order == "oldest" else SortOrder.LATEST_TO_OLDEST

    source = LocalFolderPhotoSource(folder)
    with timed(f"Scanning {folder}", logger):
        photos = source.fetch()

    try:
        grouped = Bucketizer().group(photos, birth, chosen)
    except ChronologyError as e:
        print_error(str(e))
        sys.exit(1)
    ordered = BucketOrderer(config.chronology.year_order).apply_sort_order(grouped, sort_order)

    table = Table(title=f"{len(photos)} photos, {chosen.value} buckets")
    table.add_column("Bucket", style="cyan")
    table.add_column("Photos", justify="right")
    table.add_column("First")
    table.add_column("Last")
    for bucket in ordered:
        taken = [p.date_taken for p in bucket.photos]
        table.add_row(
            bucket.title,
            str(bucket.count),
            min(taken).strftime("%Y-%m-%d"),
            max(taken).strftime("%Y-%m-%d"),
        )
    console.print(table)

    if source.skipped:
        print_warning(f"{len(source.skipped)} file(s) had no capture date and were skipped")


@cli.command(name="range")
@click.argument("label")
@click.option("--birth", required=True, type=click.DateTime(formats=DATE_FORMATS), help="Birth date or due date")
def range_(label: str, birth: datetime) -> None:
    """Print the date window denoted by bucket LABEL."""
    try:
        window = DateRangeResolver().resolve_range(label, birth)
    except ChronologyError as e:
        print_error(str(e))
        sys.exit(1)
    console.print(f"{label}: {_format_dt(window.start)} -> {_format_dt(window.end)}")


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
