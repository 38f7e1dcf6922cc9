# ABOUTME: The `shelfmark compose` command for prepending a cover page to a PDF.
# ABOUTME: Writes a new file next to the original (or into --output-dir); never edits the original.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from shelfmark.core.compose import compose_cover_page
from shelfmark.formats.reader import supports_cover_page

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--title", required=True, help="Title printed on the cover page.")
@click.option("--author", default="", help="Author printed on the cover page.")
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the new PDF (default: next to PATH).",
)
def compose(path: Path, title: str, author: str, output_dir: Path | None) -> None:
    """Create a copy of a PDF with a generated cover page in front."""
    if not supports_cover_page(path):
        console.print(f"[red]Error:[/red] cover pages are only supported for PDF files: {escape(path.name)}")
        raise SystemExit(1)

    result = compose_cover_page(path, title, author, output_dir=output_dir)
    if not result.success:
        console.print(f"[red]Error:[/red] {escape(str(result.error))}")
        raise SystemExit(1)

    console.print(f"[green]Written:[/green] {escape(str(result.path))} ({result.page_count} pages)")
