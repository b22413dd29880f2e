"""Configuration management for wpdock."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import platformdirs
import yaml

APP_NAME = "wpdock"

DEFAULT_SERVICES: dict[str, int] = {
    "WordPress": 8080,
    "MySQL": 3306,
    "PHPMyAdmin": 8081,
}
DEFAULT_MAX_ATTEMPTS = 100
DEFAULT_ACTIVE_DAYS = 30


class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""

    pass


def get_config_dir() -> Path:
    """Get the per-user configuration directory for wpdock.

    Returns:
        Path to config directory (not created)
    """
    return Path(platformdirs.user_config_dir(APP_NAME, APP_NAME))


def get_config_path() -> Path:
    """Get the configuration file path.

    The WPDOCK_CONFIG environment variable overrides the default location.

    Returns:
        Path to config file
    """
    override = os.getenv("WPDOCK_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.yaml"


def get_ledger_dir() -> Path:
    """Get the default directory holding one port record per project."""
    return get_config_dir() / "ports"


def get_projects_dir() -> Path:
    """Get the default directory containing provisioned projects."""
    return Path.home() / "wpdock-projects"


@dataclass
class Settings:
    """Explicit configuration handed to each component."""

    projects_dir: Path = field(default_factory=get_projects_dir)
    ledger_dir: Path = field(default_factory=get_ledger_dir)
    services: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_SERVICES))
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    active_days: int = DEFAULT_ACTIVE_DAYS
    runtime: str = "docker"

    def to_dict(self) -> dict[str, Any]:
        """Serialize settings for the YAML file."""
        return {
            "projects_dir": str(self.projects_dir),
            "ledger_dir": str(self.ledger_dir),
            "services": dict(self.services),
            "max_attempts": self.max_attempts,
            "active_days": self.active_days,
            "runtime": self.runtime,
        }


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults.

    Args:
        path: Config file to read. Defaults to get_config_path().

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file is not valid YAML or holds invalid values
    """
    path = path or get_config_path()
    settings = Settings()

    if not path.exists():
        return settings

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if data is None:
        return settings
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    if "projects_dir" in data:
        settings.projects_dir = Path(str(data["projects_dir"])).expanduser()
    if "ledger_dir" in data:
        settings.ledger_dir = Path(str(data["ledger_dir"])).expanduser()
    if "services" in data:
        settings.services = _parse_services(data["services"], path)
    if "max_attempts" in data:
        settings.max_attempts = _parse_positive_int(data["max_attempts"], "max_attempts", path)
    if "active_days" in data:
        settings.active_days = _parse_positive_int(data["active_days"], "active_days", path)
    if "runtime" in data:
        settings.runtime = str(data["runtime"])

    return settings


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings to a YAML file.

    Args:
        settings: Settings to write
        path: Destination. Defaults to get_config_path().

    Returns:
        Path that was written
    """
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    with open(path, "w") as f:
        yaml.safe_dump(settings.to_dict(), f, sort_keys=False)
    return path


def parse_service_port(value: str) -> tuple[str, int]:
    """Parse a "Service=PORT" or "Service:PORT" override.

    Raises:
        ValueError: If the value is malformed or the port out of range
    """
    for sep in ("=", ":"):
        if sep in value:
            name, _, port_str = value.partition(sep)
            break
    else:
        raise ValueError(f"Expected Service=PORT, got '{value}'")

    name = name.strip()
    if not name:
        raise ValueError(f"Missing service name in '{value}'")
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"Port must be an integer in '{value}'") from None
    if not 1 <= port <= 65535:
        raise ValueError(f"Port {port} out of range 1-65535")
    return name, port


def _parse_services(raw: Any, path: Path) -> dict[str, int]:
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"{path}: 'services' must be a non-empty mapping")
    services: dict[str, int] = {}
    for name, port in raw.items():
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise ConfigError(f"{path}: invalid port for service '{name}': {port!r}")
        services[str(name)] = port
    return services


def _parse_positive_int(raw: Any, key: str, path: Path) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 1:
        raise ConfigError(f"{path}: '{key}' must be a positive integer")
    return raw
