"""php-integrator error types with typed error codes.

Error code ranges:
- 2xxx: Config (application config and project settings)
- 3xxx: Index (engine failures)
- 4xxx: Host (project model, repository subscriptions)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004
    PROJECT_ALREADY_INITIALIZED = 2005
    PROJECT_SETTINGS_MISSING = 2006
    PROJECT_INVALID_VERSION = 2007
    PROJECT_INVALID_PATH_INDEX = 2008

    # Index (3xxx)
    INDEX_ENGINE_FAILED = 3001
    INDEX_ENGINE_NOT_FOUND = 3002
    INDEX_ENGINE_TIMEOUT = 3003

    # Host (4xxx)
    HOST_NO_REPOSITORY = 4001


@dataclass(frozen=True, slots=True)
class IntegratorError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(IntegratorError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class AlreadyInitializedError(ConfigError):
    """Project already carries php-integrator settings."""

    @classmethod
    def for_project(cls, title: str) -> "AlreadyInitializedError":
        return cls(
            code=ErrorCode.PROJECT_ALREADY_INITIALIZED,
            message=f"Project '{title}' is already set up for php-integrator",
            details={"project": title},
        )


class MissingSettingsError(ConfigError):
    """Project is enabled but has no php-integrator settings subtree."""

    @classmethod
    def for_project(cls, title: str) -> "MissingSettingsError":
        return cls(
            code=ErrorCode.PROJECT_SETTINGS_MISSING,
            message=f"Project '{title}' has no php-integrator settings",
            details={"project": title},
        )


class InvalidVersionError(ConfigError):
    """phpVersion does not parse as a finite number."""

    @classmethod
    def for_value(cls, value: Any) -> "InvalidVersionError":
        return cls(
            code=ErrorCode.PROJECT_INVALID_VERSION,
            message=f"phpVersion must be a finite number, got {value!r}",
            details={"value": str(value)},
        )


class InvalidSettingsError(ConfigError):
    """Project settings subtree has an invalid shape."""

    @classmethod
    def for_field(cls, field: str, value: Any, reason: str) -> "InvalidSettingsError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid project setting '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class InvalidPathIndexError(ConfigError):
    """Exclusion rule references a project root that does not exist."""

    @classmethod
    def for_rule(cls, rule: str, index: int, root_count: int) -> "InvalidPathIndexError":
        return cls(
            code=ErrorCode.PROJECT_INVALID_PATH_INDEX,
            message=(
                f"Excluded path '{rule}' references root {{{index}}} "
                f"but the project has {root_count} root path(s)"
            ),
            details={"rule": rule, "index": index, "root_count": root_count},
        )


class IndexingError(IntegratorError):
    """Indexing engine failures."""

    @classmethod
    def engine_failed(cls, operation: str, returncode: int, stderr: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ENGINE_FAILED,
            message=f"Indexing engine failed during {operation} (exit {returncode})",
            details={"operation": operation, "returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def engine_not_found(cls, executable: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ENGINE_NOT_FOUND,
            message=f"Indexing engine executable not found: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def timeout(cls, operation: str, timeout_sec: float) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ENGINE_TIMEOUT,
            message=f"Indexing engine timed out during {operation} after {timeout_sec}s",
            retryable=True,
            details={"operation": operation, "timeout_sec": timeout_sec},
        )


class HostError(IntegratorError):
    """Host environment errors."""


class NoRepositoryError(HostError):
    """No version-control repository at the given path."""

    @classmethod
    def at_path(cls, path: str) -> "NoRepositoryError":
        return cls(
            code=ErrorCode.HOST_NO_REPOSITORY,
            message=f"No repository found at {path}",
            details={"path": path},
        )
