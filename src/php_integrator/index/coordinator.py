"""Single-flight indexing coordination.

The IndexCoordinator decides whether an indexing request starts, is
coalesced, or is dropped:

- Project scope: at most one full index at a time. A request arriving while
  one runs is skipped, not remembered.
- File scope: at most one engine call per file at a time. Requests arriving
  while a file is in flight overwrite a single pending slot, so only the most
  recent source is indexed once the in-flight call settles.
- File requests are suppressed entirely while a full index runs.

Everything runs on one asyncio loop. State is only touched between awaits,
so no locks are needed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from php_integrator.core.logging import clear_pass_id, set_pass_id
from php_integrator.project import settings as project_settings
from php_integrator.project.excludes import resolve_excluded_paths

if TYPE_CHECKING:
    from php_integrator.config.models import ProjectSettings
    from php_integrator.host.project import HostProject
    from php_integrator.index.engine import IndexingEngine

logger = structlog.get_logger()


class CoordinatorState(Enum):
    """Project-wide indexing state."""

    IDLE = "idle"
    INDEXING = "indexing"


class IndexOutcome(Enum):
    """What became of an indexing request."""

    INDEXED = "indexed"
    SKIPPED = "skipped"  # project index already running
    SUPPRESSED = "suppressed"  # file request during a project index
    COALESCED = "coalesced"  # folded into the file's pending slot


@dataclass(frozen=True, slots=True)
class PendingSource:
    """Latest source queued behind an in-flight file index; None reads from disk."""

    source: str | None


@dataclass
class FileIndexEntry:
    """Per-file single-flight state. ``pending`` is only set while in flight."""

    in_flight: bool = False
    pending: PendingSource | None = None


@dataclass
class CoordinatorStatus:
    """Snapshot of coordinator state."""

    state: CoordinatorState
    files_in_flight: int
    files_pending: int
    last_error: str | None = None


@dataclass
class IndexCoordinator:
    """Gates project and file indexing requests onto the engine."""

    engine: IndexingEngine

    _state: CoordinatorState = field(default=CoordinatorState.IDLE, init=False)
    # Entries live for the process lifetime; keyed by file path as given
    _files: dict[str, FileIndexEntry] = field(default_factory=dict, init=False)
    _last_error: str | None = field(default=None, init=False)

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def is_project_indexing(self) -> bool:
        return self._state is CoordinatorState.INDEXING

    def is_file_in_flight(self, path: str) -> bool:
        entry = self._files.get(path)
        return entry is not None and entry.in_flight

    @property
    def status(self) -> CoordinatorStatus:
        return CoordinatorStatus(
            state=self._state,
            files_in_flight=sum(1 for e in self._files.values() if e.in_flight),
            files_pending=sum(1 for e in self._files.values() if e.pending is not None),
            last_error=self._last_error,
        )

    def resolve_parameters(self, project: HostProject) -> tuple[list[str], list[str]]:
        """Resolved excluded paths and file extensions for a project."""
        settings: ProjectSettings = project_settings.validate(project)
        excluded = resolve_excluded_paths(project.root_paths, settings.excluded_paths)
        return excluded, list(settings.file_extensions)

    async def attempt_project_index(self, project: HostProject) -> IndexOutcome:
        """Vacuum then reindex every root path, unless a full index is running.

        Engine errors propagate after the project flag is cleared.
        """
        if self.is_project_indexing:
            logger.info("project_index_skipped", project=project.title)
            return IndexOutcome.SKIPPED

        self._state = CoordinatorState.INDEXING
        set_pass_id()
        logger.info("project_index_started", project=project.title, roots=len(project.root_paths))
        try:
            excluded, extensions = self.resolve_parameters(project)
            # Vacuum first so entries for vanished paths don't survive the pass
            await self.engine.vacuum()
            await self.engine.reindex(list(project.root_paths), None, excluded, extensions)
        except Exception as e:
            self._last_error = str(e)
            logger.error("project_index_failed", project=project.title, error=str(e))
            raise
        else:
            self._last_error = None
            logger.info("project_index_completed", project=project.title)
        finally:
            self._state = CoordinatorState.IDLE
            clear_pass_id()

        return IndexOutcome.INDEXED

    async def attempt_file_index(
        self,
        project: HostProject,
        path: str,
        source: str | None = None,
    ) -> IndexOutcome:
        """Index one file, coalescing requests that arrive while it is in flight.

        The caller whose request starts the pass also drains the pending slot:
        each settled round checks for a newer source and indexes it, until no
        source is pending. Failed rounds do not stop the drain; the outcome of
        the last round is what the caller observes.
        """
        if self.is_project_indexing:
            logger.debug("file_index_suppressed", path=path)
            return IndexOutcome.SUPPRESSED

        entry = self._files.get(path)
        if entry is None:
            entry = self._files[path] = FileIndexEntry()
        elif entry.in_flight:
            entry.pending = PendingSource(source)
            logger.debug("file_index_coalesced", path=path)
            return IndexOutcome.COALESCED

        last_error: Exception | None = None
        round_source: str | None = source
        rounds = 0

        while True:
            rounds += 1
            last_error = None
            entry.in_flight = True
            try:
                excluded, extensions = self.resolve_parameters(project)
                await self.engine.reindex(path, round_source, excluded, extensions)
            except Exception as e:
                last_error = e
                self._last_error = str(e)
                logger.warning("file_index_failed", path=path, round=rounds, error=str(e))
            except asyncio.CancelledError:
                # Nobody is left to drain the slot; a later request starts fresh
                entry.pending = None
                logger.debug("file_index_cancelled", path=path, round=rounds)
                raise
            finally:
                entry.in_flight = False

            pending, entry.pending = entry.pending, None
            if pending is None:
                break
            if self.is_project_indexing:
                logger.debug("file_index_suppressed", path=path, pending=True)
                break
            round_source = pending.source

        if last_error is not None:
            raise last_error
        logger.debug("file_index_completed", path=path, rounds=rounds)
        return IndexOutcome.INDEXED
