# ABOUTME: Shared Click options for Shelfmark CLI commands.
# ABOUTME: Provides reusable decorators for the uploads directory and cover flags.

from pathlib import Path

import click

from shelfmark.core.pipeline import DEFAULT_UPLOADS_DIR

uploads_dir_option = click.option(
    "--uploads-dir",
    "uploads_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_UPLOADS_DIR,
    show_default=True,
    envvar="SHELFMARK_UPLOADS_DIR",
    help="Root directory for stored books and covers.",
)

no_raster_option = click.option(
    "--no-raster",
    is_flag=True,
    default=False,
    help="Skip first-page rendering and always draw a template cover.",
)

title_option = click.option("--title", default=None, help="Book title.")
author_option = click.option("--author", default=None, help="Book author.")
