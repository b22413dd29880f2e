"""Port liveness probe for wpdock."""

from dataclasses import dataclass

from .config import Settings
from .console import debug
from .docker import ContainerRuntime
from .project import compose_project_name, get_project_dir
from .system import PortStatus, SystemScanner


def _is_own_container(name: str, prefix: str) -> bool:
    """Check whether a container name belongs to the compose project prefix.

    Compose names containers "<project>-<service>-<n>" (v2) or
    "<project>_<service>_<n>" (v1), so "demo2-db-1" is not a "demo" container.
    """
    name = name.lower()
    return name == prefix or name.startswith((f"{prefix}-", f"{prefix}_"))


@dataclass
class ProbeReport:
    """Status of every signal for one port."""

    port: int
    listener: PortStatus
    container: PortStatus
    bind: PortStatus

    @property
    def is_free(self) -> bool:
        """True only if no signal says busy and the bind succeeded."""
        if PortStatus.BUSY in (self.listener, self.container):
            return False
        return self.bind == PortStatus.FREE


class PortProbe:
    """Decide whether a port is usable, ignoring a project's own containers."""

    def __init__(
        self,
        settings: Settings,
        scanner: SystemScanner | None = None,
        runtime: ContainerRuntime | None = None,
    ) -> None:
        """Initialize probe.

        Args:
            settings: wpdock settings
            scanner: System scanner (listener table and bind check)
            runtime: Container runtime client
        """
        self.settings = settings
        self.scanner = scanner or SystemScanner()
        self.runtime = runtime or ContainerRuntime(settings.runtime)

    def is_port_free(self, port: int, project_id: str) -> bool:
        """Check if a port is free for a project.

        Strategy:
        1. Listener table lists the port → busy
        2. A running container of another project publishes it → busy
        3. Otherwise the bind check decides

        Inconclusive signals from 1 and 2 never count as free on their own;
        the bind check is always the last word.

        Args:
            port: Port number to check
            project_id: Project whose own containers are ignored

        Returns:
            True if port is available, False otherwise
        """
        if self.scanner.check_listener(port) == PortStatus.BUSY:
            return False
        if self.check_containers(port, project_id) == PortStatus.BUSY:
            return False
        return self.scanner.check_bind(port) == PortStatus.FREE

    def check(self, port: int, project_id: str) -> ProbeReport:
        """Run every signal without short-circuiting.

        Args:
            port: Port number to check
            project_id: Project whose own containers are ignored

        Returns:
            ProbeReport with one status per signal
        """
        return ProbeReport(
            port=port,
            listener=self.scanner.check_listener(port),
            container=self.check_containers(port, project_id),
            bind=self.scanner.check_bind(port),
        )

    def check_containers(self, port: int, project_id: str) -> PortStatus:
        """Check whether another project's running container publishes the port.

        Args:
            port: Port number to look for
            project_id: Project whose containers are ignored

        Returns:
            BUSY, FREE, or INCONCLUSIVE if the runtime could not be queried
        """
        project_dir = get_project_dir(project_id, self.settings)
        cwd = project_dir if project_id and project_dir.is_dir() else None

        containers = self.runtime.running_containers(cwd=cwd)
        if containers is None:
            return PortStatus.INCONCLUSIVE

        prefix = compose_project_name(project_id)
        for container in containers:
            if port not in container.ports:
                continue
            if prefix and _is_own_container(container.name, prefix):
                debug(f"port {port} held by own container {container.name}, ignoring")
                continue
            debug(f"port {port} busy: published by container {container.name}")
            return PortStatus.BUSY
        return PortStatus.FREE
