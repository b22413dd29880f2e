"""Typer CLI for wpdock - Main entry point."""

import typer

from . import __version__
from .commands import (
    allocate,
    config,
    export_cmd,
    get,
    probe,
    prune,
    release,
    stats,
    status,
)

app = typer.Typer(
    name="wpdock",
    help="Port allocation for WordPress container stacks",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wpdock version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Port allocation for WordPress container stacks."""
    pass

# Register all commands
app.command()(allocate)
app.command()(get)
app.command()(release)
app.command(name="export")(export_cmd)
app.command()(status)
app.command()(probe)
app.command()(prune)
app.command()(stats)
app.command()(config)


def main() -> None:
    """Main entry point."""
    app()
