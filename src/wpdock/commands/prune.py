"""Prune command - remove port records of deleted projects."""

from functools import partial

import typer

from ..project import project_exists
from ..pruner import Pruner
from .common import console, get_ledger, get_settings, warning


def prune(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show what would be removed"),
    stale_days: int | None = typer.Option(
        None, "--stale", help="Also remove records not used in N days"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Remove port records whose project directory no longer exists.

    Examples:
        wpdock prune --dry-run
        wpdock prune
        wpdock prune --stale 90
    """
    settings = get_settings()
    pruner = Pruner(get_ledger(settings))

    candidates = pruner.find_orphans(partial(project_exists, settings=settings))

    # Also check stale if requested
    if stale_days:
        orphan_names = {entry.project_name for entry in candidates}
        stale = pruner.prune_stale(days=stale_days, dry_run=True)
        candidates.extend(e for e in stale.removed if e.project_name not in orphan_names)

    if not candidates:
        console.print("[green]No orphaned port records found[/green]")
        return

    # Show what would be removed
    console.print(f"[yellow]Would remove {len(candidates)} record(s):[/yellow]")
    for entry in candidates:
        ports = ", ".join(f"{svc} {port}" for svc, port in entry.ports.items())
        console.print(f"  - {entry.project_name}: {ports}")

    if dry_run:
        console.print("\n[dim]Run without --dry-run to remove.[/dim]")
        return

    # Confirm deletion
    if not force:
        confirm = typer.confirm("Proceed with deletion?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            return

    result = pruner.purge_orphans(candidates)
    for message in result.errors:
        warning(message)

    console.print(f"[green]Removed {result.count} record(s)[/green]")
    if result.errors:
        console.print(f"[yellow]Skipped {len(result.errors)} record(s)[/yellow]")
