"""php-integrator check command - validate a project's settings."""

from pathlib import Path

import click
from rich.table import Table

from php_integrator.cli.utils import open_project
from php_integrator.core.progress import get_console, status
from php_integrator.project import settings as project_settings
from php_integrator.project.excludes import resolve_excluded_paths


@click.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check_command(project_file: Path) -> None:
    """Validate PROJECT_FILE's settings and show what indexing would use."""
    project = open_project(project_file)

    if not project_settings.is_enabled(project):
        status(f"php-integrator is not enabled for '{project.title}'", style="warning")
        return

    error = project_settings.check(project)
    if error is not None:
        status(error.message, style="error")
        raise SystemExit(1)

    settings = project_settings.validate(project)
    excluded = resolve_excluded_paths(project.root_paths, settings.excluded_paths)

    table = Table(title=project.title, show_header=False)
    table.add_row("PHP version", str(settings.php_version))
    table.add_row("Root paths", "\n".join(project.root_paths))
    table.add_row("File extensions", ", ".join(settings.file_extensions) or "-")
    table.add_row("Excluded paths", "\n".join(excluded) or "-")
    get_console().print(table)
    status("settings are valid", style="success")
