# ABOUTME: CLI package for Shelfmark, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from shelfmark.cli.commands import add_cmd, compose_cmd, cover_cmd, inspect_cmd


def _configure_logging(verbose: int) -> None:
    """Route log records through rich; -v shows info, -vv shows debug."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="shelfmark")
@click.option("-v", "--verbose", count=True, help="Increase log output (repeatable).")
def cli(verbose: int) -> None:
    """Shelfmark - metadata and cover generation for uploaded books."""
    _configure_logging(verbose)


cli.add_command(inspect_cmd.inspect)
cli.add_command(cover_cmd.cover)
cli.add_command(compose_cmd.compose)
cli.add_command(add_cmd.add)
