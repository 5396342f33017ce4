"""Project settings resolution.

A project's settings payload is a namespaced mapping. php-integrator owns
the ``php`` namespace::

    php:
      enabled: true
      php_integrator:
        phpVersion: 7.4
        excludedPaths: ["{0}/vendor"]
        fileExtensions: [php]

``resolve`` is the single deserialization boundary between that loosely
typed payload and ``ProjectSettings``.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from php_integrator.config.models import DEFAULT_PROJECT_SETTINGS, ProjectSettings
from php_integrator.core.errors import (
    AlreadyInitializedError,
    ConfigError,
    InvalidSettingsError,
    InvalidVersionError,
    MissingSettingsError,
)
from php_integrator.host.project import HostProject
from php_integrator.project.excludes import resolve_excluded_paths

NAMESPACE = "php"
SUBTREE = "php_integrator"

_VERSION_FIELDS = ("phpVersion", "php_version")


def _namespace(project: HostProject) -> Mapping[str, Any]:
    ns = project.settings.get(NAMESPACE)
    return ns if isinstance(ns, Mapping) else {}


def default_settings() -> dict[str, Any]:
    """Fresh copy of the default settings subtree."""
    return DEFAULT_PROJECT_SETTINGS.to_payload()


def is_enabled(project: HostProject) -> bool:
    return bool(_namespace(project).get("enabled", False))


def set_up(project: HostProject) -> dict[str, Any]:
    """Return the project's payload with php-integrator enabled and defaulted.

    The project itself is left untouched; persisting the result is the
    caller's job.

    Raises:
        AlreadyInitializedError: If the settings subtree already exists.
    """
    if _namespace(project).get(SUBTREE) is not None:
        raise AlreadyInitializedError.for_project(project.title)

    payload = copy.deepcopy(dict(project.settings))
    namespace = payload.get(NAMESPACE)
    if not isinstance(namespace, dict):
        namespace = {}
    namespace["enabled"] = True
    namespace[SUBTREE] = default_settings()
    payload[NAMESPACE] = namespace
    return payload


def resolve(project: HostProject) -> ProjectSettings | None:
    """Parse the settings subtree, or None if the project has none.

    Raises:
        InvalidVersionError: phpVersion is missing or not a finite number.
        InvalidSettingsError: Any other invalid shape.
    """
    raw = _namespace(project).get(SUBTREE)
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidSettingsError.for_field(SUBTREE, raw, "must be a mapping")

    try:
        return ProjectSettings.model_validate(dict(raw))
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        if err["loc"] and err["loc"][0] in _VERSION_FIELDS:
            value = None if err["type"] == "missing" else err.get("input")
            raise InvalidVersionError.for_value(value) from e
        raise InvalidSettingsError.for_field(field, err.get("input"), err["msg"]) from e


def validate(project: HostProject) -> ProjectSettings:
    """Validate and return the project's settings.

    Raises:
        MissingSettingsError: The settings subtree is absent.
        InvalidVersionError: phpVersion is missing or not a finite number.
        InvalidSettingsError: Any other invalid shape.
    """
    settings = resolve(project)
    if settings is None:
        raise MissingSettingsError.for_project(project.title)
    return settings


def check(project: HostProject) -> ConfigError | None:
    """Validate without raising; returns the validation failure, if any.

    Unlike ``validate``, excluded path placeholders are resolved too, so a
    rule pointing at a missing root comes back as InvalidPathIndexError.
    """
    try:
        settings = validate(project)
        resolve_excluded_paths(project.root_paths, settings.excluded_paths)
    except ConfigError as e:
        return e
    return None
