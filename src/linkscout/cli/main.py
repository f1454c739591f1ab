"""
Main CLI entry point for linkscout.
"""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from linkscout import __version__
from linkscout.config.settings import settings
from linkscout.exceptions import (
    EXIT_CODE_FETCH_FAILED,
    EXIT_CODE_GENERAL_ERROR,
    FetchError,
)
from linkscout.models.metadata import MetadataRecord
from linkscout.services.extraction import extract_metadata

console = Console()

app = typer.Typer(
    name="linkscout",
    help="Content metadata extraction for web links",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Display order for the result table.
_FIELD_LABELS: dict[str, str] = {
    "record_kind": "Kind",
    "title": "Title",
    "description": "Description",
    "author": "Author",
    "site_name": "Site",
    "publish_date": "Published",
    "image_url": "Image",
    "canonical_url": "Canonical URL",
    "content_type_hint": "Type hint",
    "video_id": "Video ID",
    "channel_name": "Channel",
    "channel_url": "Channel URL",
    "view_count": "Views",
}


def _configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the ``linkscout`` logger."""
    log_level = logging.DEBUG if verbose else getattr(logging, settings.log_level)

    package_logger = logging.getLogger("linkscout")
    package_logger.setLevel(log_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        package_logger.addHandler(handler)


def _render_record(record: MetadataRecord) -> Table:
    table = Table(title=record.url, show_header=True, header_style="bold blue")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")

    for field, label in _FIELD_LABELS.items():
        value = getattr(record, field)
        if value is None:
            continue
        if field == "record_kind":
            value = value.value
        elif field == "view_count":
            value = f"{value:,}"
        table.add_row(label, str(value))

    return table


@app.command()
def extract(
    url: str = typer.Argument(..., help="URL to extract metadata from"),
    as_json: bool = typer.Option(
        False, "--json", "-j", help="Print the record as JSON"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Enable debug logging on stderr"
    ),
) -> None:
    """Extract a metadata record for URL."""
    _configure_logging(verbose)

    try:
        record = asyncio.run(extract_metadata(url))
    except FetchError as e:
        console.print(
            Panel(
                f"[red]{escape(e.message)}[/red]",
                title="Fetch Failed",
                border_style="red",
            )
        )
        raise typer.Exit(code=EXIT_CODE_FETCH_FAILED)
    except ValueError as e:
        console.print(
            Panel(f"[red]{escape(str(e))}[/red]", title="Invalid Input", border_style="red")
        )
        raise typer.Exit(code=EXIT_CODE_GENERAL_ERROR)

    if as_json:
        typer.echo(json.dumps(record.to_public_dict(), indent=2, ensure_ascii=False))
        return

    console.print(_render_record(record))


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]linkscout[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
) -> None:
    """
    linkscout - Content metadata extraction for web links.

    Resolves title, description, author, publish date, thumbnail and, for
    YouTube videos, view counts from public page metadata.
    """
    if version:
        console.print(f"linkscout v{__version__}")
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'linkscout --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
