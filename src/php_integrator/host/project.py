"""Host project model.

The host owns projects; the core only reads their title, root paths and
settings payload. ``Project`` is the concrete model used by the CLI and
tests, loaded from a project YAML file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from php_integrator.core.errors import ConfigError


@runtime_checkable
class HostProject(Protocol):
    """What the core needs from a host project."""

    @property
    def title(self) -> str: ...

    @property
    def root_paths(self) -> Sequence[str]: ...

    @property
    def settings(self) -> Mapping[str, Any]: ...

    def contains(self, path: str | Path) -> bool: ...


@dataclass(eq=False)
class Project:
    """A host project: a title, ordered absolute root paths and a settings payload."""

    title: str
    root_paths: list[str]
    settings: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.root_paths = [os.path.normpath(os.path.abspath(p)) for p in self.root_paths]

    def contains(self, path: str | Path) -> bool:
        """True if path lies within any of the project's root paths."""
        candidate = Path(os.path.normpath(os.path.abspath(path)))
        return any(candidate.is_relative_to(root) for root in self.root_paths)


def load_project(path: Path) -> Project:
    """Load a project from a YAML file.

    The file holds ``title``, ``paths`` (absolute, or relative to the file's
    directory) and any number of namespaced settings keys, which become the
    project's settings payload.

    Raises:
        ConfigError: If the file is missing, unparsable or lacks paths.
    """
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")

    raw_paths = data.pop("paths", None)
    if not raw_paths:
        raise ConfigError.missing_required("paths")
    if isinstance(raw_paths, str):
        raw_paths = [raw_paths]

    base = path.resolve().parent
    root_paths = [str(base / p) if not os.path.isabs(p) else p for p in raw_paths]
    title = str(data.pop("title", None) or Path(root_paths[0]).name)

    return Project(title=title, root_paths=root_paths, settings=data)
