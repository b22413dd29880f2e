"""Status command - show recorded port assignments."""

import typer
from rich.table import Table

from ..system import PortStatus, SystemScanner
from .common import console, get_ledger, get_settings


def status(
    live: bool = typer.Option(False, "--live", help="Check if ports are actually listening"),
) -> None:
    """Show the port records of all projects.

    Examples:
        wpdock status
        wpdock status --live
    """
    ledger = get_ledger(get_settings())
    entries = list(ledger.list_all())

    if not entries:
        console.print("[yellow]No port records found[/yellow]")
        return

    # Read the listener table once for the whole report
    scanner = SystemScanner()
    listener_table = scanner.get_listener_table() if live else None

    table = Table(title="Port Records")
    table.add_column("Project", style="cyan")
    table.add_column("Service", style="green")
    table.add_column("Port", style="yellow")
    table.add_column("Last Used", style="dim")
    if live:
        table.add_column("Status", style="magenta")

    for entry in entries:
        for service, port in entry.ports.items():
            row = [
                entry.project_name,
                service,
                str(port),
                entry.last_used.strftime("%Y-%m-%d %H:%M"),
            ]
            if live:
                if listener_table is None:
                    row.append("? unknown")
                elif scanner.match_listener_text(listener_table, port) == PortStatus.BUSY:
                    row.append("● LISTEN")
                else:
                    row.append("○ free")
            table.add_row(*row)

    console.print(table)
