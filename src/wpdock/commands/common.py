"""Common utilities for CLI commands."""

import typer

from ..config import ConfigError, Settings, load_settings
from ..console import console, debug, error, error_console, info, success, warning
from ..ledger import Ledger
from ..project import validate_project_id

# Re-export console utilities
__all__ = [
    "console",
    "error_console",
    "debug",
    "info",
    "success",
    "warning",
    "error",
    "get_settings",
    "get_ledger",
    "require_project",
]


def get_settings() -> Settings:
    """Load settings, exiting on a broken config file."""
    try:
        return load_settings()
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1)


def get_ledger(settings: Settings) -> Ledger:
    """Get ledger instance."""
    return Ledger(settings.ledger_dir)


def require_project(name: str) -> str:
    """Validate a project name argument, exiting if invalid."""
    try:
        return validate_project_id(name)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(1)
