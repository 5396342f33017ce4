"""Repository status change subscriptions using pygit2 and watchfiles.

A subscription discovers the git repository containing a project root and
watches its git directory (not the work tree) for the files a status change
touches: the index, HEAD and refs. Checkouts, commits, stashes and merges
all land there, and a burst of them is debounced into one callback.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import pygit2
import structlog
from watchfiles import awatch

from php_integrator.config.models import WatcherConfig
from php_integrator.core.errors import NoRepositoryError

logger = structlog.get_logger()

StatusCallback = Callable[[], Awaitable[object] | None]

# Paths inside the git directory whose changes mean "status changed"
STATUS_FILES: frozenset[str] = frozenset(
    {"index", "HEAD", "ORIG_HEAD", "MERGE_HEAD", "packed-refs"}
)
STATUS_DIRS: frozenset[str] = frozenset({"refs"})


def discover_git_dir(path: str | Path) -> Path:
    """Git directory of the repository containing path.

    Raises:
        NoRepositoryError: If path is not inside a repository.
    """
    found = pygit2.discover_repository(str(path))
    if not found:
        raise NoRepositoryError.at_path(str(path))
    return Path(found).resolve()


def is_status_change(git_dir: Path, changed: Path) -> bool:
    """True if a changed path inside git_dir affects repository status."""
    try:
        rel = changed.relative_to(git_dir)
    except ValueError:
        return False
    if not rel.parts:
        return False
    if rel.name.endswith(".lock"):
        return False
    return rel.parts[0] in STATUS_DIRS or (len(rel.parts) == 1 and rel.name in STATUS_FILES)


class Subscription(Protocol):
    def dispose(self) -> None: ...


class RepositorySubscriber(Protocol):
    async def subscribe(self, path: str, callback: StatusCallback) -> Subscription: ...


@dataclass
class RepositorySubscription:
    """Watches one git directory until disposed."""

    git_dir: Path
    callback: StatusCallback
    debounce_ms: int = 1600

    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    def start(self) -> None:
        if self._task is not None:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._watch_loop())
        logger.info("repository_watch_started", git_dir=str(self.git_dir))

    def dispose(self) -> None:
        """Stop watching. Safe to call more than once."""
        self._stop_event.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait_closed(self) -> None:
        task = self._task
        self.dispose()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _watch_loop(self) -> None:
        try:
            async for changes in awatch(
                self.git_dir,
                watch_filter=None,
                stop_event=self._stop_event,
                debounce=self.debounce_ms,
                recursive=True,
            ):
                paths = [Path(p) for _change, p in changes]
                if any(is_status_change(self.git_dir, p) for p in paths):
                    logger.debug("repository_status_changed", git_dir=str(self.git_dir))
                    await self._notify()
        except asyncio.CancelledError:
            pass

    async def _notify(self) -> None:
        try:
            result = self.callback()
            if result is not None:
                await result
        except Exception as e:
            # The subscriber owns error reporting for its own work
            logger.error("repository_callback_failed", git_dir=str(self.git_dir), error=str(e))


@dataclass
class RepositoryWatcher:
    """Creates repository status subscriptions for project root paths."""

    config: WatcherConfig = field(default_factory=WatcherConfig)

    async def subscribe(self, path: str, callback: StatusCallback) -> RepositorySubscription:
        """Watch the repository containing path.

        Raises:
            NoRepositoryError: If path is not inside a repository.
        """
        git_dir = await asyncio.to_thread(discover_git_dir, path)
        subscription = RepositorySubscription(
            git_dir=git_dir,
            callback=callback,
            debounce_ms=self.config.debounce_ms,
        )
        subscription.start()
        return subscription
