"""Config command - manage wpdock configuration."""

from pathlib import Path

import typer
from rich.table import Table

from ..config import get_config_path, parse_service_port, save_settings
from .common import console, error, get_settings


def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    set_port: str | None = typer.Option(
        None, "--set-port", help="Set default port: Service:PORT"
    ),
    projects_dir: Path | None = typer.Option(
        None, "--projects-dir", help="Set the directory projects live in"
    ),
) -> None:
    """Manage wpdock configuration.

    Examples:
        wpdock config --show
        wpdock config --set-port WordPress:8090
        wpdock config --projects-dir ~/Sites
    """
    settings = get_settings()

    if show:
        console.print(f"[bold]Config file:[/bold]  {get_config_path()}")
        console.print(f"[bold]Projects dir:[/bold] {settings.projects_dir}")
        console.print(f"[bold]Ledger dir:[/bold]   {settings.ledger_dir}")
        console.print(f"[bold]Max attempts:[/bold] {settings.max_attempts}")
        console.print(f"[bold]Runtime:[/bold]      {settings.runtime}")

        table = Table(title="Default Service Ports")
        table.add_column("Service", style="green")
        table.add_column("Port", style="yellow")
        for service, port in settings.services.items():
            table.add_row(service, str(port))
        console.print(table)
        return

    if set_port or projects_dir:
        if set_port:
            try:
                service, port = parse_service_port(set_port)
            except ValueError as e:
                error(str(e))
                raise typer.Exit(1)
            settings.services[service] = port
            console.print(f"[green]Set default port for {service}: {port}[/green]")
        if projects_dir:
            settings.projects_dir = projects_dir.expanduser().resolve()
            console.print(f"[green]Set projects dir: {settings.projects_dir}[/green]")
        save_settings(settings)
        return

    console.print("[yellow]Use --show, --set-port or --projects-dir[/yellow]")
