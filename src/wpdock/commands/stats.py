"""Stats command - summarize the port ledger."""

from rich.table import Table

from ..pruner import Pruner
from .common import console, get_ledger, get_settings


def stats() -> None:
    """Show port usage statistics and cross-project collisions.

    Examples:
        wpdock stats
    """
    settings = get_settings()
    summary = Pruner(get_ledger(settings)).compute_statistics(active_days=settings.active_days)

    console.print(f"[bold]Projects:[/bold]     {summary.total_projects}")
    console.print(
        f"[bold]Active:[/bold]       {summary.active_projects} "
        f"[dim](used in the last {settings.active_days} days)[/dim]"
    )
    console.print(f"[bold]Ports used:[/bold]   {summary.unique_ports_used}")

    if not summary.collisions:
        console.print("[green]No port collisions between projects[/green]")
        return

    table = Table(title="Port Collisions")
    table.add_column("Port", style="yellow")
    table.add_column("Projects", style="cyan")
    for port, projects in summary.collisions.items():
        table.add_row(str(port), ", ".join(projects))
    console.print(table)
