"""Indexing engine interface and the PHP core subprocess adapter.

The engine does the expensive parse-and-store work. Every call settles
exactly once: it returns on success and raises on failure.
"""

from __future__ import annotations

import asyncio
import re
import shutil
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import structlog

from php_integrator.config.models import EngineConfig
from php_integrator.core.errors import IndexingError

logger = structlog.get_logger()

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class IndexingEngine(Protocol):
    """Operations the coordinator drives on the external engine."""

    async def initialize(self) -> None: ...

    async def vacuum(self) -> None: ...

    async def reindex(
        self,
        paths: str | Sequence[str],
        source: str | None,
        excluded_paths: Sequence[str],
        file_extensions: Sequence[str],
    ) -> None: ...

    def set_index_database_name(self, name: str) -> None: ...


def database_file_name(name: str) -> str:
    """Filesystem-safe database file name for an index namespace."""
    safe = _UNSAFE_NAME_CHARS.sub("_", name).strip("._") or "default"
    return f"{safe}.sqlite"


class CoreProcessEngine:
    """Runs the PHP indexing core as one subprocess per operation."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()
        self._database_name = "default"

    @property
    def database_path(self) -> Path:
        return Path(self._config.database_dir).expanduser() / database_file_name(
            self._database_name
        )

    def set_index_database_name(self, name: str) -> None:
        self._database_name = name
        logger.debug("index_database_selected", name=name, path=str(self.database_path))

    async def initialize(self) -> None:
        await self._run("initialize", ["--initialize"])

    async def vacuum(self) -> None:
        await self._run("vacuum", ["--vacuum"])

    async def reindex(
        self,
        paths: str | Sequence[str],
        source: str | None,
        excluded_paths: Sequence[str],
        file_extensions: Sequence[str],
    ) -> None:
        if isinstance(paths, str):
            paths = [paths]

        args = ["--reindex"]
        args.extend(f"--source={p}" for p in paths)
        args.extend(f"--exclude={p}" for p in excluded_paths)
        args.extend(f"--extension={ext}" for ext in file_extensions)
        if source is not None:
            args.append("--stdin")

        await self._run("reindex", args, stdin=source)

    def build_command(self, args: Sequence[str]) -> list[str]:
        """Full command line for an engine invocation."""
        return [
            self._config.php_binary,
            "-d",
            f"memory_limit={self._config.memory_limit}",
            str(Path(self._config.core_path).expanduser()),
            f"--database={self.database_path}",
            *args,
        ]

    async def _run(self, operation: str, args: Sequence[str], stdin: str | None = None) -> None:
        if shutil.which(self._config.php_binary) is None:
            raise IndexingError.engine_not_found(self._config.php_binary)

        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(args)
        start_time = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise IndexingError.engine_failed(operation, -1, str(e)) from e

        try:
            _stdout, stderr_bytes = await asyncio.wait_for(
                proc.communicate(stdin.encode() if stdin is not None else None),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise IndexingError.timeout(operation, self._config.timeout_sec) from None

        duration = time.monotonic() - start_time
        if proc.returncode != 0:
            stderr = stderr_bytes.decode(errors="replace")
            logger.warning(
                "engine_call_failed",
                operation=operation,
                returncode=proc.returncode,
                duration_seconds=round(duration, 3),
            )
            raise IndexingError.engine_failed(operation, proc.returncode or -1, stderr)

        logger.debug(
            "engine_call_completed", operation=operation, duration_seconds=round(duration, 3)
        )
