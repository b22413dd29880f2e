"""Get command - show the ports recorded for a project."""

import typer

from .common import console, error_console, get_ledger, get_settings, require_project


def get(
    project: str = typer.Argument(..., help="Project name"),
    service: str | None = typer.Option(None, "-s", "--service", help="Only this service"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Output only port numbers"),
) -> None:
    """Get the recorded ports of a project.

    Examples:
        wpdock get demo
        wpdock get demo -s MySQL -q
    """
    project = require_project(project)
    ledger = get_ledger(get_settings())

    ports = ledger.load(project)
    if ports is None:
        error_console.print(f"[yellow]No ports recorded for '{project}'[/yellow]")
        raise typer.Exit(1)

    if service:
        if service not in ports:
            error_console.print(f"[yellow]No port recorded for {service} in '{project}'[/yellow]")
            raise typer.Exit(1)
        ports = {service: ports[service]}

    for name, port in ports.items():
        if quiet:
            print(port)
        else:
            console.print(f"[green]{name}[/green]: {port}")
