"""Tests for probe module."""

from wpdock.probe import PortProbe
from wpdock.system import PortStatus


def test_port_free_when_all_signals_free(settings, fake_scanner, fake_runtime):
    """Test that a port with no evidence of use is free."""
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=fake_runtime([]))

    assert probe.is_port_free(8080, "demo") is True


def test_listener_busy_short_circuits(settings, fake_scanner, fake_runtime):
    """Test that a listener table hit makes the port busy without binding."""
    scanner = fake_scanner(listener=PortStatus.BUSY)
    probe = PortProbe(settings, scanner=scanner, runtime=fake_runtime([]))

    assert probe.is_port_free(8080, "demo") is False
    assert scanner.bind_calls == 0


def test_other_project_container_is_busy(settings, fake_scanner, fake_runtime, container):
    """Test that a container of another project holding the port makes it busy."""
    runtime = fake_runtime([container("shop-wordpress-1", 8080)])
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=runtime)

    assert probe.is_port_free(8080, "demo") is False


def test_own_container_is_ignored(settings, fake_scanner, fake_runtime, container):
    """Test that the project's own containers do not block its ports."""
    runtime = fake_runtime([container("demo-wordpress-1", 8080)])
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=runtime)

    assert probe.is_port_free(8080, "Demo") is True


def test_container_on_other_port_is_ignored(settings, fake_scanner, fake_runtime, container):
    """Test that containers publishing other ports do not matter."""
    runtime = fake_runtime([container("shop-wordpress-1", 8081)])
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=runtime)

    assert probe.is_port_free(8080, "demo") is True


def test_bind_failure_is_authoritative(settings, fake_scanner, fake_runtime):
    """Test that a failed bind wins over free listener and container signals."""
    scanner = fake_scanner(bind=PortStatus.BUSY)
    probe = PortProbe(settings, scanner=scanner, runtime=fake_runtime([]))

    assert probe.is_port_free(8080, "demo") is False


def test_inconclusive_signals_fall_back_to_bind(settings, fake_scanner, fake_runtime):
    """Test that unavailable tools leave the decision to the bind check."""
    scanner = fake_scanner(listener=PortStatus.INCONCLUSIVE)
    probe = PortProbe(settings, scanner=scanner, runtime=fake_runtime(None))

    assert probe.is_port_free(8080, "demo") is True
    assert scanner.bind_calls == 1

    scanner.bind = PortStatus.BUSY
    assert probe.is_port_free(8080, "demo") is False


def test_check_containers_inconclusive(settings, fake_runtime):
    """Test that an unreachable runtime is reported as inconclusive."""
    probe = PortProbe(settings, runtime=fake_runtime(None))

    assert probe.check_containers(8080, "demo") == PortStatus.INCONCLUSIVE


def test_runtime_runs_in_project_dir(settings, fake_runtime):
    """Test that the runtime is queried from the project directory when it exists."""
    runtime = fake_runtime([])
    probe = PortProbe(settings, runtime=runtime)

    probe.check_containers(8080, "missing")
    (settings.projects_dir / "demo").mkdir()
    probe.check_containers(8080, "demo")

    assert runtime.cwds == [None, settings.projects_dir / "demo"]


def test_check_reports_every_signal(settings, fake_scanner, fake_runtime, container):
    """Test the per-signal report."""
    scanner = fake_scanner(listener=PortStatus.INCONCLUSIVE, bind=PortStatus.BUSY)
    runtime = fake_runtime([container("shop-db-1", 3306)])
    probe = PortProbe(settings, scanner=scanner, runtime=runtime)

    report = probe.check(3306, "demo")

    assert report.listener == PortStatus.INCONCLUSIVE
    assert report.container == PortStatus.BUSY
    assert report.bind == PortStatus.BUSY
    assert report.is_free is False
    assert scanner.bind_calls == 1


def test_report_free(settings, fake_scanner, fake_runtime):
    """Test that a report with inconclusive signals and a free bind is free."""
    probe = PortProbe(
        settings,
        scanner=fake_scanner(listener=PortStatus.INCONCLUSIVE),
        runtime=fake_runtime(None),
    )

    assert probe.check(8080, "demo").is_free is True


def test_similarly_named_project_container_is_busy(
    settings, fake_scanner, fake_runtime, container
):
    """Test that "demo2" containers are not treated as "demo" containers."""
    runtime = fake_runtime([container("demo2-wordpress-1", 8080)])
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=runtime)

    assert probe.is_port_free(8080, "demo") is False


def test_compose_v1_own_container_is_ignored(settings, fake_scanner, fake_runtime, container):
    """Test underscore-separated container names of the project."""
    runtime = fake_runtime([container("demo_wordpress_1", 8080)])
    probe = PortProbe(settings, scanner=fake_scanner(), runtime=runtime)

    assert probe.is_port_free(8080, "demo") is True
