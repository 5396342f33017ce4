"""php-integrator init command - print a project's set-up settings payload."""

from pathlib import Path

import click
import yaml

from php_integrator.cli.utils import open_project
from php_integrator.core.errors import ConfigError
from php_integrator.project import settings as project_settings


@click.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def init_command(project_file: Path) -> None:
    """Enable php-integrator for a project and print the resulting settings.

    The project file is not modified; copy the printed YAML into it.
    """
    project = open_project(project_file)
    try:
        payload = project_settings.set_up(project)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    click.echo(yaml.safe_dump(payload, sort_keys=False), nl=False)
