"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a controllable in-memory indexing engine.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from php_integrator.host.project import Project  # noqa: E402


class GatedEngine:
    """In-memory engine whose calls can be held open until released.

    While blocked, every call suspends until ``unblock()``; this lets tests
    issue requests while an earlier one is still in flight.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, str | None]] = []
        self.database_name: str | None = None
        self.last_excluded: list[str] = []
        self.last_extensions: list[str] = []
        self.reindex_failures: list[Exception] = []
        self.vacuum_failures: list[Exception] = []
        self.max_concurrent: dict[Any, int] = {}
        self._running: dict[Any, int] = {}
        self._blocked = False
        self._gate = asyncio.Event()

    def block(self) -> None:
        self._blocked = True
        self._gate.clear()

    def unblock(self) -> None:
        self._blocked = False
        self._gate.set()

    async def _settle(self) -> None:
        if self._blocked:
            await self._gate.wait()
        else:
            await asyncio.sleep(0)

    def set_index_database_name(self, name: str) -> None:
        self.database_name = name

    async def initialize(self) -> None:
        self.calls.append(("initialize", None, None))
        await self._settle()

    async def vacuum(self) -> None:
        self.calls.append(("vacuum", None, None))
        await self._settle()
        if self.vacuum_failures:
            raise self.vacuum_failures.pop(0)

    async def reindex(
        self,
        paths: str | Sequence[str],
        source: str | None,
        excluded_paths: Sequence[str],
        file_extensions: Sequence[str],
    ) -> None:
        key = paths if isinstance(paths, str) else tuple(paths)
        self.calls.append(("reindex", key, source))
        self.last_excluded = list(excluded_paths)
        self.last_extensions = list(file_extensions)
        self._running[key] = self._running.get(key, 0) + 1
        self.max_concurrent[key] = max(self.max_concurrent.get(key, 0), self._running[key])
        try:
            await self._settle()
            if self.reindex_failures:
                raise self.reindex_failures.pop(0)
        finally:
            self._running[key] -= 1

    def reindex_calls(self, key: Any) -> list[str | None]:
        """Sources delivered for key, in order."""
        return [source for op, k, source in self.calls if op == "reindex" and k == key]


@pytest.fixture
def engine() -> GatedEngine:
    return GatedEngine()


def php_settings(**overrides: Any) -> dict[str, Any]:
    subtree: dict[str, Any] = {
        "enabled": True,
        "phpVersion": 7.4,
        "excludedPaths": [],
        "fileExtensions": ["php"],
    }
    subtree.update(overrides)
    return {"php": {"enabled": True, "php_integrator": subtree}}


@pytest.fixture
def make_project() -> Callable[..., Project]:
    """Build an enabled project; keyword args override php_integrator settings."""

    def _make(
        title: str = "demo",
        root_paths: list[str] | None = None,
        settings: dict[str, Any] | None = None,
        **overrides: Any,
    ) -> Project:
        return Project(
            title=title,
            root_paths=root_paths or ["/proj/app", "/proj/lib"],
            settings=settings if settings is not None else php_settings(**overrides),
        )

    return _make
