"""Test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from wpdock.config import Settings
from wpdock.docker import RunningContainer
from wpdock.ledger import Ledger
from wpdock.system import PortStatus


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir):
    """Settings pointing at temporary directories."""
    projects_dir = temp_dir / "projects"
    projects_dir.mkdir()
    return Settings(projects_dir=projects_dir, ledger_dir=temp_dir / "ports")


@pytest.fixture
def ledger(settings):
    """Ledger instance for tests."""
    return Ledger(settings.ledger_dir)


class FakeProbe:
    """Probe reporting a fixed set of busy ports."""

    def __init__(self, busy=()):
        self.busy = set(busy)
        self.calls = []

    def is_port_free(self, port, project_id):
        self.calls.append(port)
        return port not in self.busy


class FakeScanner:
    """Scanner with canned listener and bind results."""

    def __init__(self, listener=PortStatus.FREE, bind=PortStatus.FREE):
        self.listener = listener
        self.bind = bind
        self.bind_calls = 0

    def check_listener(self, port):
        return self.listener

    def check_bind(self, port):
        self.bind_calls += 1
        return self.bind


class FakeRuntime:
    """Container runtime returning canned containers (None = unavailable)."""

    def __init__(self, containers=None):
        self.containers = containers
        self.cwds = []

    def running_containers(self, cwd=None):
        self.cwds.append(cwd)
        return self.containers


@pytest.fixture
def fake_probe():
    """Factory for FakeProbe."""
    return FakeProbe


@pytest.fixture
def fake_scanner():
    """Factory for FakeScanner."""
    return FakeScanner


@pytest.fixture
def fake_runtime():
    """Factory for FakeRuntime."""
    return FakeRuntime


@pytest.fixture
def container():
    """Factory for RunningContainer."""

    def make(name, *ports):
        return RunningContainer(name=name, ports=set(ports))

    return make
