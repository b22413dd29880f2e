"""Cleanup and statistics over the port ledger."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .config import DEFAULT_ACTIVE_DAYS
from .ledger import Ledger, LedgerEntry


@dataclass
class PruneResult:
    """Result of a prune operation."""

    removed: list[LedgerEntry] = field(default_factory=list)  # Entries removed
    kept: list[LedgerEntry] = field(default_factory=list)  # Entries kept
    errors: list[str] = field(default_factory=list)  # Errors encountered

    @property
    def count(self) -> int:
        """Number of entries removed."""
        return len(self.removed)


@dataclass
class RegistryStats:
    """Usage figures across every ledger entry."""

    total_projects: int
    active_projects: int
    unique_ports_used: int
    collisions: dict[int, list[str]]  # port -> projects claiming it


class Pruner:
    """Clean up orphaned port records and report on the ledger."""

    def __init__(self, ledger: Ledger) -> None:
        """Initialize pruner.

        Args:
            ledger: Ledger instance
        """
        self.ledger = ledger

    def find_orphans(self, project_exists: Callable[[str], bool]) -> list[LedgerEntry]:
        """Find entries whose project is gone.

        Args:
            project_exists: Predicate telling whether a project still exists

        Returns:
            Orphaned entries
        """
        return [
            entry for entry in self.ledger.list_all() if not project_exists(entry.project_name)
        ]

    def purge_orphans(self, entries: Iterable[LedgerEntry]) -> PruneResult:
        """Delete the given entries.

        A failing deletion is recorded and the rest of the batch continues.

        Args:
            entries: Entries to delete, usually from find_orphans()

        Returns:
            PruneResult with details of operation
        """
        result = PruneResult()
        for entry in entries:
            try:
                deleted = self.ledger.delete(entry.project_name)
            except OSError as e:
                result.kept.append(entry)
                result.errors.append(f"{entry.project_name}: {e}")
                continue
            if deleted:
                result.removed.append(entry)
            else:
                result.kept.append(entry)
                result.errors.append(f"{entry.project_name}: record not found")
        return result

    def prune_stale(self, days: int = 30, dry_run: bool = False) -> PruneResult:
        """Remove entries not used in the last N days.

        Useful for cleaning up old projects even if the directory still exists.

        Args:
            days: Number of days of inactivity
            dry_run: If True, don't delete, just report what would be deleted

        Returns:
            PruneResult with details of operation
        """
        cutoff = datetime.now() - timedelta(days=days)
        stale = [entry for entry in self.ledger.list_all() if entry.last_used < cutoff]

        if dry_run:
            return PruneResult(removed=stale)
        return self.purge_orphans(stale)

    def compute_statistics(self, active_days: int = DEFAULT_ACTIVE_DAYS) -> RegistryStats:
        """Summarize the ledger.

        A project is active if it was used within active_days. A collision is
        a port claimed by more than one project; it is only reported.

        Args:
            active_days: Activity window in days

        Returns:
            RegistryStats
        """
        cutoff = datetime.now() - timedelta(days=active_days)
        owners: dict[int, set[str]] = {}
        total = 0
        active = 0

        for entry in self.ledger.list_all():
            total += 1
            if entry.last_used >= cutoff:
                active += 1
            for port in entry.ports.values():
                owners.setdefault(port, set()).add(entry.project_name)

        collisions = {
            port: sorted(projects) for port, projects in sorted(owners.items()) if len(projects) > 1
        }

        return RegistryStats(
            total_projects=total,
            active_projects=active,
            unique_ports_used=len(owners),
            collisions=collisions,
        )
