"""Export command - output a project's ports as environment variables."""

import json
import re

import typer

from ..project import compose_project_name
from .common import error_console, get_ledger, get_settings, require_project


def env_var_name(service: str) -> str:
    """Get the environment variable name for a service port.

    Examples:
        WordPress -> WORDPRESS_PORT
        PHPMyAdmin -> PHPMYADMIN_PORT
    """
    return re.sub(r"[^A-Z0-9]", "_", service.upper()) + "_PORT"


def export_cmd(
    project: str = typer.Argument(..., help="Project name"),
    format: str = typer.Option("shell", "--format", help="Output format: shell, json, env"),
) -> None:
    """Export a project's ports as environment variables.

    Examples:
        eval "$(wpdock export demo)"
        wpdock export demo --format env > .env
        wpdock export demo --format json
    """
    project = require_project(project)
    ledger = get_ledger(get_settings())

    entry = ledger.get_entry(project)
    if entry is None:
        error_console.print(f"[yellow]No ports recorded for '{project}'[/yellow]")
        raise typer.Exit(1)

    if format == "json":
        output = {env_var_name(service): port for service, port in entry.ports.items()}
        print(json.dumps(output, indent=2))
    elif format == "env":
        for service, port in entry.ports.items():
            print(f"{env_var_name(service)}={port}")
    else:  # shell
        for service, port in entry.ports.items():
            print(f"export {env_var_name(service)}={port}")
        # Also export compose project name for isolation
        print(f"export COMPOSE_PROJECT_NAME={compose_project_name(project)}")
