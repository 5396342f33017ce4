"""php-integrator index and watch commands."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from php_integrator.cli.utils import open_config, open_project
from php_integrator.config.models import IntegratorConfig
from php_integrator.core.errors import IndexingError, IntegratorError
from php_integrator.core.logging import configure_logging, get_log_file_path
from php_integrator.core.progress import get_console, status
from php_integrator.host.project import Project
from php_integrator.host.repository import RepositoryWatcher
from php_integrator.index.coordinator import IndexOutcome
from php_integrator.index.engine import CoreProcessEngine
from php_integrator.project.manager import ProjectManager


def _report_error(error: IntegratorError) -> None:
    """Print an error line, pointing at the log file when one is configured."""
    status(error.message, style="error")
    if log_file := get_log_file_path():
        status(f"See {log_file} for details", indent=2)


def _build_manager(config: IntegratorConfig, *, watch: bool) -> ProjectManager:
    return ProjectManager(
        engine=CoreProcessEngine(config.engine),
        repositories=RepositoryWatcher(config.watcher) if watch else None,
    )


async def _run_index(
    project: Project, config: IntegratorConfig, initialize: bool
) -> IndexOutcome | None:
    manager = _build_manager(config, watch=False)
    await manager.load(project)
    if not manager.has_active_project:
        return None
    if initialize:
        return await manager.initialize_active_project()
    return await manager.attempt_active_project_index()


async def _run_watch(project: Project, config: IntegratorConfig) -> None:
    manager = _build_manager(config, watch=True)
    await manager.load(project)
    if not manager.has_active_project:
        status(f"php-integrator is not enabled for '{project.title}'", style="warning")
        return
    try:
        try:
            await manager.attempt_active_project_index()
        except IndexingError as e:
            _report_error(e)
        status(f"watching {len(project.root_paths)} root path(s), Ctrl-C to stop")
        await asyncio.Event().wait()
    finally:
        await manager.close()


def _configure_from(ctx: click.Context, config: IntegratorConfig) -> None:
    if not ctx.obj or not ctx.obj.get("verbose"):
        configure_logging(config=config.logging)


@click.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--initialize", is_flag=True, help="Recreate the index database first")
@click.pass_context
def index_command(ctx: click.Context, project_file: Path, initialize: bool) -> None:
    """Run one full index of PROJECT_FILE's root paths."""
    project = open_project(project_file)
    config = open_config(project)
    _configure_from(ctx, config)

    console = get_console()
    try:
        with console.status(f"[cyan]Indexing {project.title}...[/cyan]", spinner="dots"):
            outcome = asyncio.run(_run_index(project, config, initialize))
    except IntegratorError as e:
        _report_error(e)
        raise SystemExit(1) from e

    if outcome is None:
        status(f"php-integrator is not enabled for '{project.title}'", style="warning")
    elif outcome is IndexOutcome.SKIPPED:
        status("an index pass is already running", style="warning")
    else:
        status(f"indexed {project.title}", style="success")


@click.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def watch_command(ctx: click.Context, project_file: Path) -> None:
    """Index PROJECT_FILE, then reindex whenever repository status changes."""
    project = open_project(project_file)
    config = open_config(project)
    _configure_from(ctx, config)

    try:
        asyncio.run(_run_watch(project, config))
    except KeyboardInterrupt:
        status("stopped")
    except IntegratorError as e:
        _report_error(e)
        raise SystemExit(1) from e
