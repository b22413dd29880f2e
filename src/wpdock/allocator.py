"""Port allocation logic for wpdock."""

from collections.abc import Mapping
from dataclasses import dataclass

from .config import DEFAULT_MAX_ATTEMPTS
from .console import debug, warning
from .ledger import Ledger
from .probe import PortProbe

MAX_PORT = 65535


class AllocationError(Exception):
    """Raised when a service cannot get a free port."""

    def __init__(self, service: str, attempts: int, start_port: int) -> None:
        self.service = service
        self.attempts = attempts
        self.start_port = start_port
        super().__init__(
            f"No available port for service '{service}' "
            f"({attempts} attempt(s) starting at {start_port})"
        )


@dataclass
class PortCandidate:
    """A port found during discovery."""

    port: int
    attempts: int


class PortAllocator:
    """Allocate a set of distinct ports for a project's services."""

    def __init__(
        self,
        ledger: Ledger,
        probe: PortProbe,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize allocator.

        Args:
            ledger: Ledger of previous assignments
            probe: Port probe
            max_attempts: Ports tried per service before giving up
        """
        self.ledger = ledger
        self.probe = probe
        self.max_attempts = max_attempts

    def allocate(self, project_id: str, requested: Mapping[str, int]) -> dict[str, int]:
        """Allocate ports for a project's services.

        Strategy:
        1. If the ledger holds a mapping for this project and every port in it
           is still free → return it unchanged
        2. Otherwise → for each service in declaration order, scan upward from
           its preferred port, skipping ports taken earlier in this call
        3. Save the result to the ledger

        Args:
            project_id: Project name
            requested: Service name to preferred port, in declaration order

        Returns:
            Service name to allocated port

        Raises:
            AllocationError: If a service finds no port within max_attempts
            ValueError: If a preferred port is outside 1-65535
        """
        for service, preferred in requested.items():
            if isinstance(preferred, bool) or not isinstance(preferred, int):
                raise ValueError(f"Preferred port for '{service}' must be an integer")
            if not 1 <= preferred <= MAX_PORT:
                raise ValueError(
                    f"Preferred port {preferred} for '{service}' out of range 1-{MAX_PORT}"
                )

        existing = self.reuse(project_id, requested)
        if existing is not None:
            debug(f"reusing ledger ports for {project_id}")
            return existing

        claimed: set[int] = set()
        result: dict[str, int] = {}

        for service, preferred in requested.items():
            candidate = self._search(service, preferred, project_id, claimed)
            debug(
                f"{service}: {candidate.port} "
                f"(preferred {preferred}, {candidate.attempts} attempt(s))"
            )
            claimed.add(candidate.port)
            result[service] = candidate.port

        if not self.ledger.save(project_id, result):
            warning(f"Ports for '{project_id}' were allocated but not persisted")

        return result

    def reuse(self, project_id: str, requested: Mapping[str, int]) -> dict[str, int] | None:
        """Return the ledger mapping if it can be reused as a whole.

        The mapping is discarded entirely on a single conflict; a partial
        remap could leave generated configuration pointing at stale ports.

        Args:
            project_id: Project name
            requested: Requested services

        Returns:
            Previous mapping, or None if absent or no longer valid
        """
        existing = self.ledger.load(project_id)
        if existing is None:
            return None

        if set(existing) != set(requested):
            debug(f"ledger services for {project_id} differ from request, reallocating")
            return None

        if len(set(existing.values())) != len(existing):
            debug(f"ledger for {project_id} has duplicate ports, reallocating")
            return None

        for service, port in existing.items():
            if not self.probe.is_port_free(port, project_id):
                debug(f"ledger port {port} for {service} is taken, reallocating")
                return None

        return existing

    def _search(
        self,
        service: str,
        preferred: int,
        project_id: str,
        claimed: set[int],
    ) -> PortCandidate:
        """Find the first usable port at or above preferred.

        Raises:
            AllocationError: If max_attempts ports were tried without success
        """
        attempts = 0
        port = preferred
        while attempts < self.max_attempts and port <= MAX_PORT:
            attempts += 1
            if port not in claimed and self.probe.is_port_free(port, project_id):
                return PortCandidate(port=port, attempts=attempts)
            port += 1

        raise AllocationError(service, attempts, preferred)
