"""Tests for pruner module."""

import json

from wpdock.pruner import Pruner


def _age(ledger, name, last_used):
    """Rewrite a record's LastUsed timestamp."""
    path = ledger.path_for(name)
    data = json.loads(path.read_text())
    data["LastUsed"] = last_used
    path.write_text(json.dumps(data))


def test_find_orphans(ledger):
    """Test that only entries failing the existence predicate are returned."""
    for name in ("A", "B", "C"):
        ledger.save(name, {"WordPress": 8080})

    pruner = Pruner(ledger)
    orphans = pruner.find_orphans(lambda name: name in {"A", "C"})

    assert [entry.project_name for entry in orphans] == ["B"]
    # Pure read
    assert len(list(ledger.list_all())) == 3


def test_find_orphans_with_project_dirs(ledger, settings):
    """Test the predicate built from project directories."""
    from functools import partial

    from wpdock.project import project_exists

    (settings.projects_dir / "kept").mkdir()
    ledger.save("kept", {"WordPress": 8080})
    ledger.save("gone", {"WordPress": 8081})

    orphans = Pruner(ledger).find_orphans(partial(project_exists, settings=settings))

    assert [entry.project_name for entry in orphans] == ["gone"]


def test_purge_orphans(ledger):
    """Test deleting orphaned entries."""
    ledger.save("A", {"WordPress": 8080})
    ledger.save("B", {"WordPress": 8081})

    pruner = Pruner(ledger)
    result = pruner.purge_orphans(pruner.find_orphans(lambda name: name == "A"))

    assert result.count == 1
    assert result.removed[0].project_name == "B"
    assert result.errors == []
    assert ledger.get_entry("B") is None
    assert ledger.get_entry("A") is not None


def test_purge_orphans_continues_after_failure(ledger, monkeypatch):
    """Test that one failing deletion does not stop the batch."""
    for name in ("A", "B", "C"):
        ledger.save(name, {"WordPress": 8080})

    real_delete = ledger.delete

    def flaky_delete(project_id):
        if project_id == "B":
            raise PermissionError("read-only")
        return real_delete(project_id)

    monkeypatch.setattr(ledger, "delete", flaky_delete)

    pruner = Pruner(ledger)
    result = pruner.purge_orphans(list(ledger.list_all()))

    assert result.count == 2
    assert [entry.project_name for entry in result.kept] == ["B"]
    assert len(result.errors) == 1
    assert result.errors[0].startswith("B:")


def test_prune_stale(ledger):
    """Test pruning entries not used recently."""
    ledger.save("old", {"WordPress": 8080})
    ledger.save("recent", {"WordPress": 8081})
    _age(ledger, "old", "2000-01-01 00:00:00")

    pruner = Pruner(ledger)
    result = pruner.prune_stale(days=30)

    assert [entry.project_name for entry in result.removed] == ["old"]
    assert ledger.get_entry("old") is None
    assert ledger.get_entry("recent") is not None


def test_prune_stale_dry_run(ledger):
    """Test that a stale dry run deletes nothing."""
    ledger.save("old", {"WordPress": 8080})
    _age(ledger, "old", "2000-01-01 00:00:00")

    result = Pruner(ledger).prune_stale(days=30, dry_run=True)

    assert result.count == 1
    assert ledger.get_entry("old") is not None


def test_statistics_collisions(ledger):
    """Test that a port claimed by two projects is reported for both."""
    ledger.save("A", {"svc1": 9000})
    ledger.save("B", {"svc2": 9000})

    stats = Pruner(ledger).compute_statistics()

    assert stats.collisions == {9000: ["A", "B"]}


def test_statistics_counts(ledger):
    """Test project and port counts."""
    ledger.save("A", {"WordPress": 8080, "MySQL": 3306})
    ledger.save("B", {"WordPress": 8081, "MySQL": 3306})
    ledger.save("C", {"WordPress": 8082})
    _age(ledger, "C", "2000-01-01 00:00:00")

    stats = Pruner(ledger).compute_statistics(active_days=30)

    assert stats.total_projects == 3
    assert stats.active_projects == 2
    assert stats.unique_ports_used == 4
    assert stats.collisions == {3306: ["A", "B"]}


def test_statistics_empty_ledger(ledger):
    """Test statistics with nothing recorded."""
    stats = Pruner(ledger).compute_statistics()

    assert stats.total_projects == 0
    assert stats.active_projects == 0
    assert stats.unique_ports_used == 0
    assert stats.collisions == {}


def test_purge_orphans_counts_only_deleted(ledger):
    """Test that entries whose record is already gone are not counted."""
    ledger.save("A", {"WordPress": 8080})
    ledger.save("B", {"WordPress": 8081})
    entries = list(ledger.list_all())
    ledger.delete("B")

    result = Pruner(ledger).purge_orphans(entries)

    assert result.count == 1
    assert [entry.project_name for entry in result.removed] == ["A"]
    assert [entry.project_name for entry in result.kept] == ["B"]
    assert result.errors == ["B: record not found"]
