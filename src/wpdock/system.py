"""System listener table scanning and bind checks for wpdock."""

import re
import socket
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum

from .console import debug


class PortStatus(Enum):
    """Outcome of a single port-busy signal."""

    FREE = "free"
    BUSY = "busy"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class ListenerPattern:
    """A textual form a listening port takes in a listener table."""

    name: str
    template: str  # regex, {port} is substituted

    def matches(self, text: str, port: int) -> bool:
        """Check whether the port appears in text in this form."""
        regex = self.template.format(port=port)
        return re.search(regex, text, re.MULTILINE) is not None


# Checked in order; a port may never be followed by another digit.
LISTENER_PATTERNS: tuple[ListenerPattern, ...] = (
    ListenerPattern("any-v4", r"0\.0\.0\.0:{port}(?!\d)"),
    ListenerPattern("loopback-v4", r"127\.0\.0\.1:{port}(?!\d)"),
    ListenerPattern("wildcard", r"\*:{port}(?!\d)"),
    ListenerPattern("bracketed-v6", r"\]:{port}(?!\d)"),
    ListenerPattern("plain", r":{port}(?=\s|$)"),
    ListenerPattern("bsd-dotted", r"\.{port}(?=\s|$)"),
)


def _listening_lines(text: str) -> str:
    """Keep only listening lines when the tool prints a state column."""
    lines = text.splitlines()
    listening = [line for line in lines if "LISTEN" in line.upper()]
    if listening:
        return "\n".join(listening)
    return text


class SystemScanner:
    """Scan the system for ports in use."""

    def __init__(self, patterns: tuple[ListenerPattern, ...] = LISTENER_PATTERNS) -> None:
        """Initialize scanner.

        Args:
            patterns: Ordered listener patterns to search for
        """
        self.patterns = patterns

    def get_listener_table(self) -> str | None:
        """Get the raw text of the system listener table.

        Tries multiple tools in order:
        1. ss (Linux, fast)
        2. lsof (macOS/Linux, slower)
        3. netstat (Windows/universal, slowest)

        Returns:
            Listener table text, or None if no tool produced output
        """
        commands = (
            ["ss", "-tlnH"],  # TCP, listening, numeric, no header
            ["lsof", "-iTCP", "-sTCP:LISTEN", "-P", "-n"],
            ["netstat", "-an"],
        )
        for command in commands:
            output = self._run(command)
            if output:
                return output
        return None

    def check_listener(self, port: int) -> PortStatus:
        """Look the port up in the listener table.

        Args:
            port: Port number to look for

        Returns:
            BUSY if any pattern matches, FREE if none does,
            INCONCLUSIVE if the table could not be read
        """
        table = self.get_listener_table()
        if table is None:
            debug(f"listener table unavailable while probing {port}")
            return PortStatus.INCONCLUSIVE
        return self.match_listener_text(table, port)

    def match_listener_text(self, text: str, port: int) -> PortStatus:
        """Search listener table text for the port.

        Args:
            text: Output of ss, lsof or netstat
            port: Port number to look for

        Returns:
            BUSY or FREE
        """
        text = _listening_lines(text)
        for pattern in self.patterns:
            if pattern.matches(text, port):
                debug(f"port {port} busy: listener table matched {pattern.name}")
                return PortStatus.BUSY
        return PortStatus.FREE

    def check_bind(self, port: int) -> PortStatus:
        """Test if a port can be bound to on the wildcard address.

        Args:
            port: Port number to test

        Returns:
            FREE if a listening socket could be opened, BUSY otherwise
        """
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                # On Windows SO_REUSEADDR lets a bind steal a port already in use
                if sys.platform == "win32":
                    s.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
                else:
                    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                s.bind(("0.0.0.0", port))
                s.listen(1)
                return PortStatus.FREE
        except (OSError, OverflowError) as e:
            debug(f"port {port} busy: bind failed ({e})")
            return PortStatus.BUSY

    def _run(self, command: list[str]) -> str | None:
        """Run a listener tool and return its stdout.

        Returns:
            Output text, or None if the tool is missing or failed
        """
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (subprocess.SubprocessError, OSError) as e:
            debug(f"{command[0]} unavailable: {e}")
            return None
        if result.returncode != 0:
            debug(f"{command[0]} exited with {result.returncode}")
            return None
        return result.stdout if result.stdout.strip() else None
