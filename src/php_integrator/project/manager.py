"""Project manager: binds the active project to the index coordinator."""

from __future__ import annotations

import asyncio
import os
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from php_integrator.core.errors import HostError
from php_integrator.index.coordinator import IndexCoordinator, IndexOutcome
from php_integrator.project import settings as project_settings
from php_integrator.project.excludes import is_excluded, resolve_excluded_paths

if TYPE_CHECKING:
    from php_integrator.config.models import ProjectSettings
    from php_integrator.host.project import HostProject
    from php_integrator.host.repository import RepositorySubscriber, Subscription
    from php_integrator.index.engine import IndexingEngine

logger = structlog.get_logger()


@dataclass
class ProjectManager:
    """
    Owns the active project and forwards indexing requests for it.

    Components:
    - IndexCoordinator: single-flight gating of project and file indexing
    - IndexingEngine: told which index database the active project uses
    - RepositorySubscriber: triggers a full index on repository status changes
    """

    engine: IndexingEngine
    repositories: RepositorySubscriber | None = None
    coordinator: IndexCoordinator = field(init=False)

    _active: weakref.ref[HostProject] | None = field(default=None, init=False)
    _subscriptions: list[Subscription] = field(default_factory=list, init=False)
    _subscribe_tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self.coordinator = IndexCoordinator(engine=self.engine)

    @property
    def active_project(self) -> HostProject | None:
        return self._active() if self._active is not None else None

    @property
    def has_active_project(self) -> bool:
        return self.active_project is not None

    async def load(self, project: HostProject) -> None:
        """Make project the active project if it is enabled and valid.

        Raises:
            ConfigError: If the project's settings fail validation. The
                project does not become active.
        """
        self._active = None
        self._dispose_subscriptions()

        if not project_settings.is_enabled(project):
            logger.info("project_disabled", project=project.title)
            return

        project_settings.validate(project)

        self._active = weakref.ref(project)
        self.engine.set_index_database_name(project.title)
        logger.info("project_loaded", project=project.title, roots=len(project.root_paths))

        if self.repositories is not None:
            for root in project.root_paths:
                task = asyncio.create_task(self._subscribe(self.repositories, root))
                self._subscribe_tasks.add(task)
                task.add_done_callback(self._subscribe_tasks.discard)

    async def _subscribe(self, repositories: RepositorySubscriber, root: str) -> None:
        try:
            subscription = await repositories.subscribe(
                root, self._on_repository_status_changed
            )
        except HostError as e:
            # No repository at this root is expected
            logger.debug("repository_subscription_skipped", root=root, reason=str(e))
            return
        self._subscriptions.append(subscription)

    async def _on_repository_status_changed(self) -> None:
        await self.attempt_active_project_index()

    def _dispose_subscriptions(self) -> None:
        for task in list(self._subscribe_tasks):
            task.cancel()
        self._subscribe_tasks.clear()
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    async def close(self) -> None:
        """Drop the active project and stop all repository subscriptions."""
        self._active = None
        self._dispose_subscriptions()

    def set_up(self, project: HostProject) -> dict[str, Any]:
        return project_settings.set_up(project)

    def default_settings(self) -> dict[str, Any]:
        return project_settings.default_settings()

    def is_file_part_of(self, project: HostProject, path: str) -> bool:
        return project.contains(path)

    def is_file_part_of_active_project(self, path: str) -> bool | None:
        project = self.active_project
        if project is None:
            return None
        return self.is_file_part_of(project, path)

    def get_active_settings(self) -> ProjectSettings | None:
        project = self.active_project
        if project is None:
            return None
        return project_settings.resolve(project)

    def get_active_excluded_paths(self) -> list[str] | None:
        project = self.active_project
        if project is None:
            return None
        settings = project_settings.validate(project)
        return resolve_excluded_paths(project.root_paths, settings.excluded_paths)

    async def attempt_active_project_index(self) -> IndexOutcome | None:
        project = self.active_project
        if project is None:
            return None
        return await self.coordinator.attempt_project_index(project)

    async def attempt_active_file_index(
        self, path: str, source: str | None = None
    ) -> IndexOutcome | None:
        project = self.active_project
        if project is None:
            return None
        return await self.coordinator.attempt_file_index(project, path, source)

    async def initialize_active_project(self) -> IndexOutcome | None:
        """Create a fresh index for the active project, then fully index it."""
        if self.active_project is None:
            return None
        await self.engine.initialize()
        return await self.attempt_active_project_index()

    async def handle_file_saved(self, path: str, source: str | None = None) -> IndexOutcome | None:
        """Host hook for edits: index path if the active project covers it."""
        project = self.active_project
        if project is None or not project.contains(path):
            return None

        settings = project_settings.validate(project)
        extension = os.path.splitext(path)[1].lstrip(".")
        if extension not in settings.file_extensions:
            return None
        excluded = resolve_excluded_paths(project.root_paths, settings.excluded_paths)
        if is_excluded(os.path.abspath(path), excluded):
            return None

        return await self.coordinator.attempt_file_index(project, path, source)
