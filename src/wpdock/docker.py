"""Container runtime queries for wpdock."""

import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from .console import debug

# Host side of a published port: "0.0.0.0:8080->", "[::]:3306-3307->", ":::8080->"
_PUBLISHED_RE = re.compile(r":(\d+)(?:-(\d+))?->")


@dataclass
class RunningContainer:
    """A running container and the host ports it publishes."""

    name: str
    ports: set[int] = field(default_factory=set)


def parse_published_ports(ports_text: str) -> set[int]:
    """Extract host ports from a `docker ps` Ports column.

    Ports formats parsed:
    - "0.0.0.0:8080->80/tcp"                 → 8080
    - "[::]:8080->80/tcp", ":::8080->80/tcp" → 8080
    - "0.0.0.0:3306-3307->3306-3307/tcp"     → 3306, 3307
    - "3306/tcp"                             → nothing (not published)

    Args:
        ports_text: Ports column text

    Returns:
        Set of host port numbers
    """
    ports: set[int] = set()
    for match in _PUBLISHED_RE.finditer(ports_text):
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        ports.update(range(start, end + 1))
    return ports


def parse_ps_output(output: str) -> list[RunningContainer]:
    """Parse `docker ps --format '{{.Names}}\\t{{.Ports}}'` output.

    Args:
        output: Command stdout, one container per line

    Returns:
        List of running containers
    """
    containers: list[RunningContainer] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, _, ports_text = line.partition("\t")
        containers.append(
            RunningContainer(name=name.strip(), ports=parse_published_ports(ports_text))
        )
    return containers


class ContainerRuntime:
    """Query a docker-compatible runtime through its CLI."""

    def __init__(self, executable: str = "docker") -> None:
        """Initialize runtime client.

        Args:
            executable: Runtime CLI name (docker, podman, ...)
        """
        self.executable = executable

    def running_containers(self, cwd: Path | None = None) -> list[RunningContainer] | None:
        """List running containers with their published host ports.

        Args:
            cwd: Working directory for the runtime CLI

        Returns:
            List of containers, or None if the runtime could not be queried
        """
        try:
            result = subprocess.run(
                [
                    self.executable,
                    "ps",
                    "--filter",
                    "status=running",
                    "--format",
                    "{{.Names}}\t{{.Ports}}",
                ],
                capture_output=True,
                text=True,
                timeout=10,
                cwd=cwd,
            )
        except (subprocess.SubprocessError, OSError) as e:
            debug(f"{self.executable} ps unavailable: {e}")
            return None

        if result.returncode != 0:
            debug(f"{self.executable} ps exited with {result.returncode}: {result.stderr.strip()}")
            return None

        return parse_ps_output(result.stdout)
