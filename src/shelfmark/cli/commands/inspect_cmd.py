# ABOUTME: The `shelfmark inspect` command for previewing extracted metadata.
# ABOUTME: Runs extraction only (no cover, no storage) and prints the result as a table.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shelfmark.core.pipeline import PipelineCoordinator

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--name",
    "original_name",
    default=None,
    help="Original upload filename, if different from PATH.",
)
def inspect(path: Path, original_name: str | None) -> None:
    """Show the title, author and genre Shelfmark would guess for a file."""
    result = PipelineCoordinator().extract(path, original_name)

    table = Table(title=escape(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", escape(result.title) if result.title else "[dim]unknown[/dim]")
    table.add_row("Author", escape(result.author) if result.author else "[dim]unknown[/dim]")
    table.add_row("Genre", escape(result.genre))
    table.add_row("Pages", str(result.page_count) if result.page_count else "[dim]unknown[/dim]")
    table.add_row("Language", result.language or "[dim]unknown[/dim]")
    if result.published_year:
        table.add_row("Published", str(result.published_year))
    if result.subject:
        table.add_row("Subject", escape(result.subject))
    if result.keywords:
        table.add_row("Keywords", escape(", ".join(result.keywords)))
    table.add_row("Description", escape(result.description) if result.description else "[dim]none[/dim]")
    table.add_row("Method", result.method.value)
    table.add_row("Confidence", str(result.confidence))
    if result.error:
        table.add_row("Read error", f"[yellow]{escape(result.error)}[/yellow]")

    console.print(table)
