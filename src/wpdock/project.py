"""Project identity and on-disk footprint for wpdock."""

import re
from pathlib import Path

from .config import Settings


def validate_project_id(name: str) -> str:
    """Validate a project name used as ledger key and container prefix.

    Args:
        name: Project name as typed by the user

    Returns:
        The stripped project name

    Raises:
        ValueError: If the name is empty or could escape the projects directory
    """
    name = name.strip()
    if not name:
        raise ValueError("Project name must not be empty")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid project name: '{name}'")
    return name


def compose_project_name(project_id: str) -> str:
    """Return the name the container runtime prefixes project containers with.

    Compose lowercases the project name and drops characters outside
    [a-z0-9_-].

    Examples:
        Demo -> demo
        My Site.dev -> mysitedev
    """
    return re.sub(r"[^a-z0-9_-]", "", project_id.lower())


def get_project_dir(project_id: str, settings: Settings) -> Path:
    """Get the directory a project is provisioned into."""
    return settings.projects_dir / project_id


def project_exists(project_id: str, settings: Settings) -> bool:
    """Check whether a project's directory is still on disk."""
    return get_project_dir(project_id, settings).is_dir()
