"""CLI entry point for hunkscope.

This module provides the typer application that combines all commands into a
single interface.
"""

import logging

import typer

from hunkscope import __version__
from hunkscope.cli.commands import (
    context_command,
    init_command,
    split_command,
    symbols_command,
)


def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit",
    ),
) -> None:
    """Budgeted commit-message context and split analysis for staged changes."""
    if version:
        typer.echo(f"hunkscope {__version__}")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


# Main application
app = typer.Typer(
    name="hunkscope",
    help="hunkscope: commit-message context and split analysis",
    add_completion=False,
)

app.command("context")(context_command)
app.command("split")(split_command)
app.command("symbols")(symbols_command)
app.command("init")(init_command)

app.callback(invoke_without_command=True)(main_callback)


__all__ = [
    "app",
    "context_command",
    "split_command",
    "symbols_command",
    "init_command",
    "main_callback",
]
