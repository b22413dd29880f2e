"""Probe command - explain why a port is free or busy."""

import typer
from rich.table import Table

from ..probe import PortProbe
from ..system import PortStatus
from .common import console, error, get_settings, require_project

_STYLES = {
    PortStatus.FREE: "[green]free[/green]",
    PortStatus.BUSY: "[red]busy[/red]",
    PortStatus.INCONCLUSIVE: "[yellow]inconclusive[/yellow]",
}


def probe(
    port: int = typer.Argument(..., help="Port number to probe"),
    project: str = typer.Option("", "--project", help="Ignore this project's own containers"),
) -> None:
    """Probe a port with every signal.

    Examples:
        wpdock probe 8080
        wpdock probe 8080 --project demo
    """
    if not 1 <= port <= 65535:
        error(f"Port {port} out of range 1-65535")
        raise typer.Exit(1)
    if project:
        project = require_project(project)

    report = PortProbe(get_settings()).check(port, project)

    table = Table(title=f"Port {port}")
    table.add_column("Signal", style="cyan")
    table.add_column("Result")
    table.add_row("Listener table", _STYLES[report.listener])
    table.add_row("Containers", _STYLES[report.container])
    table.add_row("Bind", _STYLES[report.bind])
    console.print(table)

    if report.is_free:
        console.print(f"[green]Port {port} is free[/green]")
    else:
        console.print(f"[red]Port {port} is busy[/red]")
        raise typer.Exit(1)
