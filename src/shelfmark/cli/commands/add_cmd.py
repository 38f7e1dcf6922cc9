# ABOUTME: The `shelfmark add` command: store an upload, run the pipeline, print the book record.
# ABOUTME: Plays the book-creation handler for local use; nothing is persisted beyond files.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shelfmark.cli.options import author_option, no_raster_option, title_option, uploads_dir_option
from shelfmark.core.intake import store_upload
from shelfmark.core.pipeline import PipelineConfig, PipelineCoordinator, PipelineResult
from shelfmark.core.storage import UploadLayout, remove_quietly
from shelfmark.errors import UploadRejected, ValidationFailed

console = Console()


def _print_result(result: PipelineResult) -> None:
    record = result.to_record()
    table = Table(title=escape(result.title), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", escape(result.title))
    table.add_row("Author", escape(result.author))
    table.add_row("Genre", escape(result.genre))
    table.add_row("Pages", str(result.pages) if result.pages else "[dim]unknown[/dim]")
    table.add_row("Description", escape(result.description) if result.description else "[dim]none[/dim]")
    table.add_row("Book", record["book_file"]["url"])
    if record["cover_image"]:
        cover = record["cover_image"]
        table.add_row("Cover", f"{cover['url']} ({cover['generation_type']})")
    else:
        table.add_row("Cover", "[yellow]none[/yellow]")
    table.add_row("Method", result.extraction.method.value)
    table.add_row("Confidence", str(result.confidence))
    console.print(table)


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@title_option
@author_option
@click.option("--genre", default=None, help="Book genre.")
@click.option("--description", default=None, help="Book description.")
@uploads_dir_option
@no_raster_option
@click.option(
    "--compose/--no-compose",
    "compose",
    default=False,
    help="Also prepend a cover page to PDF uploads.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the record as JSON.")
def add(
    path: Path,
    title: str | None,
    author: str | None,
    genre: str | None,
    description: str | None,
    uploads_dir: Path,
    no_raster: bool,
    compose: bool,
    as_json: bool,
) -> None:
    """Add a book file: store it, guess missing metadata and generate a cover."""
    layout = UploadLayout(uploads_dir)
    try:
        stored = store_upload(path, layout)
    except UploadRejected as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc
    except OSError as exc:
        console.print(f"[red]Error:[/red] could not store upload: {escape(str(exc))}")
        raise SystemExit(1) from exc

    config = PipelineConfig(
        uploads_dir=uploads_dir,
        attempt_first_page_raster=not no_raster,
        compose_cover_page=compose,
    )
    coordinator = PipelineCoordinator(config)
    try:
        result = coordinator.process(
            stored,
            user_title=title,
            user_author=author,
            user_genre=genre,
            user_description=description,
            original_name=path.name,
        )
    except ValidationFailed as exc:
        remove_quietly(stored)
        console.print("[red]Error:[/red] please provide title and author")
        if exc.extraction is not None:
            console.print(
                f"  [dim]Guessed title:[/dim] {escape(exc.extraction.title or '-')}  "
                f"[dim]author:[/dim] {escape(exc.extraction.author or '-')}"
            )
        raise SystemExit(1) from exc

    if as_json:
        click.echo(json.dumps(result.to_record(), indent=2))
        return

    if result.cover_error:
        console.print(f"[yellow]Warning:[/yellow] no cover generated: {escape(result.cover_error)}")
    _print_result(result)
