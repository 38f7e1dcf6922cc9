# ABOUTME: The `shelfmark cover` command for generating a cover image for one file.
# ABOUTME: Uses the given title/author, or extracted ones when omitted.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from shelfmark.cli.options import author_option, no_raster_option, title_option
from shelfmark.core.cover import CoverOptions, CoverSynthesizer
from shelfmark.core.pipeline import PipelineCoordinator

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@title_option
@author_option
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to write the cover image into.",
)
@no_raster_option
def cover(
    path: Path,
    title: str | None,
    author: str | None,
    output_dir: Path,
    no_raster: bool,
) -> None:
    """Generate a cover image for a book file."""
    if not title or not author:
        extraction = PipelineCoordinator().extract(path)
        title = title or extraction.title
        author = author or extraction.author

    if not title:
        console.print("[red]Error:[/red] could not determine a title; pass --title")
        raise SystemExit(1)

    synthesizer = CoverSynthesizer(output_dir, CoverOptions(attempt_raster=not no_raster))
    outcome = synthesizer.synthesize(path, title, author)
    if outcome.cover is None:
        console.print(f"[red]Error:[/red] {escape(str(outcome.error))}")
        raise SystemExit(1)

    if outcome.raster_error:
        console.print(f"[dim]First-page render failed: {escape(outcome.raster_error)}[/dim]")
    console.print(
        f"[green]Cover written:[/green] {escape(str(outcome.cover.image_path))} "
        f"({outcome.cover.generation_type}, {outcome.cover.size_bytes} bytes)"
    )
