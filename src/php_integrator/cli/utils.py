"""CLI utilities."""

from pathlib import Path

import click

from php_integrator.config.loader import load_config
from php_integrator.config.models import IntegratorConfig
from php_integrator.core.errors import ConfigError
from php_integrator.host.project import Project, load_project


def open_project(project_file: Path) -> Project:
    """Load a project file, turning config errors into click errors."""
    try:
        return load_project(project_file)
    except ConfigError as e:
        raise click.ClickException(e.message) from e


def open_config(project: Project) -> IntegratorConfig:
    """Load application config for the project's first root path."""
    try:
        return load_config(Path(project.root_paths[0]))
    except ConfigError as e:
        raise click.ClickException(e.message) from e
