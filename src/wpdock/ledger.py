"""Ledger of per-project port assignments - one JSON file per project."""

import hashlib
import json
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .console import debug, warning

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


def ledger_key(project_id: str) -> str:
    """Get a filesystem-safe file stem for a project.

    Names that need rewriting get a short hash of the raw name appended, so
    two projects never share a record.

    Examples:
        demo -> demo
        my site:v2 -> my_site_v2-<8 hex chars>
    """
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", project_id)
    if safe == project_id:
        return safe
    digest = hashlib.md5(project_id.encode()).hexdigest()[:8]
    return f"{safe}-{digest}"


@dataclass
class LedgerEntry:
    """Persisted port assignment of one project."""

    project_name: str
    created: datetime
    last_used: datetime
    ports: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ProjectName": self.project_name,
            "CreatedDate": self.created.strftime(TIMESTAMP_FORMAT),
            "LastUsed": self.last_used.strftime(TIMESTAMP_FORMAT),
            "Ports": dict(self.ports),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerEntry":
        """Build an entry from a decoded record.

        Raises:
            ValueError: If a field is missing or malformed
        """
        try:
            name = data["ProjectName"]
            created = datetime.strptime(data["CreatedDate"], TIMESTAMP_FORMAT)
            last_used = datetime.strptime(data["LastUsed"], TIMESTAMP_FORMAT)
            raw_ports = data["Ports"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"missing field {e}") from e

        if not isinstance(name, str) or not isinstance(raw_ports, dict):
            raise ValueError("malformed record")

        ports: dict[str, int] = {}
        for service, port in raw_ports.items():
            if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
                raise ValueError(f"invalid port for {service}: {port!r}")
            ports[service] = port

        return cls(project_name=name, created=created, last_used=last_used, ports=ports)


class Ledger:
    """Directory of JSON port records, keyed by project name."""

    def __init__(self, directory: Path) -> None:
        """Initialize ledger.

        Args:
            directory: Directory holding the records. Created on first save.
        """
        self.directory = directory

    def path_for(self, project_id: str) -> Path:
        """Get the record path of a project."""
        return self.directory / f"{ledger_key(project_id)}.json"

    def load(self, project_id: str) -> dict[str, int] | None:
        """Load a project's ports and refresh its LastUsed timestamp.

        Args:
            project_id: Project name

        Returns:
            Service to port mapping, or None if no usable record exists
        """
        entry = self.get_entry(project_id)
        if entry is None:
            return None

        entry.last_used = _now()
        try:
            self._write(entry)
        except OSError as e:
            warning(f"Could not update last-used time for '{project_id}': {e}")

        return dict(entry.ports)

    def get_entry(self, project_id: str) -> LedgerEntry | None:
        """Read a project's record without touching it.

        Args:
            project_id: Project name

        Returns:
            LedgerEntry, or None if missing or unreadable
        """
        path = self.path_for(project_id)
        if not path.exists():
            return None
        try:
            entry = self._read(path)
        except (OSError, ValueError) as e:
            warning(f"Ignoring unreadable port record {path}: {e}")
            return None
        if entry.project_name != project_id:
            warning(f"Ignoring port record {path}: it belongs to '{entry.project_name}'")
            return None
        return entry

    def save(self, project_id: str, ports: dict[str, int]) -> bool:
        """Create or overwrite a project's record.

        The creation date of an existing record is kept.

        Args:
            project_id: Project name
            ports: Service to port mapping

        Returns:
            True if the record was written, False if persisting failed
        """
        now = _now()
        existing = self.get_entry(project_id)
        entry = LedgerEntry(
            project_name=project_id,
            created=existing.created if existing else now,
            last_used=now,
            ports=dict(ports),
        )
        try:
            self._write(entry)
        except OSError as e:
            warning(f"Could not save ports for '{project_id}': {e}")
            return False
        debug(f"saved ports for {project_id} to {self.path_for(project_id)}")
        return True

    def list_all(self) -> Iterator[LedgerEntry]:
        """Iterate over every readable record, rescanning the directory.

        Yields:
            LedgerEntry objects sorted by file name
        """
        if not self.directory.is_dir():
            return
        for path in sorted(self.directory.glob("*.json")):
            try:
                yield self._read(path)
            except (OSError, ValueError) as e:
                debug(f"skipping {path.name}: {e}")

    def delete(self, project_id: str) -> bool:
        """Delete a project's record.

        Args:
            project_id: Project name

        Returns:
            True if a record was deleted, False if none existed or the
            record at the project's path belongs to another project

        Raises:
            OSError: If the record exists but cannot be removed
        """
        path = self.path_for(project_id)
        if not path.exists():
            return False
        try:
            owner = self._read(path).project_name
        except ValueError:
            owner = project_id  # unreadable records can always be removed
        if owner != project_id:
            warning(f"Not deleting {path}: it belongs to '{owner}'")
            return False
        path.unlink(missing_ok=True)
        return True

    def _read(self, path: Path) -> LedgerEntry:
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("record is not an object")
        return LedgerEntry.from_dict(data)

    def _write(self, entry: LedgerEntry) -> None:
        self.directory.mkdir(parents=True, exist_ok=True, mode=0o700)
        path = self.path_for(entry.project_name)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(entry.to_dict(), f, indent=2)
                f.write("\n")
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
