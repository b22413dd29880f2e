"""Release command - forget a project's ports."""

import typer

from .common import console, error, get_ledger, get_settings, require_project


def release(
    project: str = typer.Argument(..., help="Project whose ports to release"),
) -> None:
    """Release the port record of a project.

    Examples:
        wpdock release demo
    """
    project = require_project(project)
    ledger = get_ledger(get_settings())

    try:
        deleted = ledger.delete(project)
    except OSError as e:
        error(f"Could not release {project}: {e}")
        raise typer.Exit(1)

    if deleted:
        console.print(f"[green]Released {project}[/green]")
    else:
        console.print(f"[yellow]No ports recorded for {project}[/yellow]")
