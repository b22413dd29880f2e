"""Allocate command - reserve ports for a project's services."""

import typer
from rich.table import Table

from ..allocator import AllocationError, PortAllocator
from ..config import parse_service_port
from ..probe import PortProbe
from .common import console, error, get_ledger, get_settings, require_project


def allocate(
    project: str = typer.Argument(..., help="Project name"),
    port: list[str] = typer.Option(
        [], "-p", "--port", help="Preferred port override: Service=PORT (repeatable)"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Minimal output"),
) -> None:
    """Allocate ports for all services of a project.

    Reuses the project's previous ports when they are all still free.

    Examples:
        wpdock allocate demo
        wpdock allocate demo --port WordPress=8090
    """
    project = require_project(project)
    settings = get_settings()

    requested = dict(settings.services)
    for override in port:
        try:
            service, preferred = parse_service_port(override)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1)
        requested[service] = preferred

    allocator = PortAllocator(
        get_ledger(settings), PortProbe(settings), max_attempts=settings.max_attempts
    )
    try:
        ports = allocator.allocate(project, requested)
    except (AllocationError, ValueError) as e:
        error(str(e))
        raise typer.Exit(1)

    if quiet:
        for service, allocated in ports.items():
            print(f"{service}={allocated}")
        return

    table = Table(title=f"Ports for {project}")
    table.add_column("Service", style="green")
    table.add_column("Preferred", style="dim")
    table.add_column("Port", style="yellow")
    for service, allocated in ports.items():
        table.add_row(service, str(requested[service]), str(allocated))
    console.print(table)
