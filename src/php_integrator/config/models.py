"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PHP_INTEGRATOR__SECTION__KEY)
3. Project YAML (<root>/.php-integrator/config.yaml)
4. Global YAML (~/.config/php-integrator/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PHP_INTEGRATOR__<SECTION>__<KEY>=<VALUE>

Examples:
    PHP_INTEGRATOR__LOGGING__LEVEL=DEBUG
    PHP_INTEGRATOR__ENGINE__PHP_BINARY=/usr/bin/php8.2
    PHP_INTEGRATOR__ENGINE__TIMEOUT_SEC=600

Per-project indexing settings (ProjectSettings) are not part of this
hierarchy: they live in the project's own settings payload.
"""

import math
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PHP_INTEGRATOR__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every coalesced file request.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class EngineConfig(BaseModel):
    """External indexing engine (PHP core) configuration.

    Env vars:
        PHP_INTEGRATOR__ENGINE__PHP_BINARY: PHP interpreter used to run the core
        PHP_INTEGRATOR__ENGINE__CORE_PATH: Entry script of the indexing core
        PHP_INTEGRATOR__ENGINE__DATABASE_DIR: Where index databases are stored
        PHP_INTEGRATOR__ENGINE__MEMORY_LIMIT: PHP memory_limit for the core
        PHP_INTEGRATOR__ENGINE__TIMEOUT_SEC: Max seconds per engine call
    """

    php_binary: str = Field(
        default="php",
        description="PHP interpreter executable, resolved through PATH if not absolute.",
    )
    core_path: str = Field(
        default="~/.local/share/php-integrator/core/src/Main.php",
        description="Entry script of the PHP indexing core.",
    )
    database_dir: str = Field(
        default="~/.cache/php-integrator/indexes",
        description="Directory holding one index database per project title.",
    )
    memory_limit: str = Field(
        default="1024M",
        description="PHP memory_limit passed to the core. Full reindexes of large "
        "projects need more than the PHP default.",
    )
    timeout_sec: float = Field(
        default=900.0,
        description="Max seconds for a single engine call before it is killed.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class WatcherConfig(BaseModel):
    """Repository status watcher configuration.

    Env vars:
        PHP_INTEGRATOR__WATCHER__DEBOUNCE_MS: Quiet window before a status change fires
    """

    debounce_ms: int = Field(
        default=1600,
        description="watchfiles debounce window. Branch switches touch many refs "
        "at once and should produce a single reindex.",
    )


class IntegratorConfig(BaseModel):
    """Root configuration for php-integrator."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)


class ProjectSettings(BaseModel):
    """Per-project indexing settings, stored under ``php.php_integrator``.

    Keys are camelCase in the project payload. ``phpVersion`` is required;
    omitted sequences resolve to empty. Instances are immutable so the
    module-level defaults can never be mutated through a resolved project.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: bool = True
    php_version: float = Field(alias="phpVersion")
    excluded_paths: tuple[str, ...] = Field(default=(), alias="excludedPaths")
    file_extensions: tuple[str, ...] = Field(default=(), alias="fileExtensions")

    @field_validator("php_version", mode="before")
    @classmethod
    def validate_php_version(cls, v: Any) -> float:
        if isinstance(v, bool):
            raise ValueError("phpVersion must be a number")
        try:
            version = float(v)
        except (TypeError, ValueError):
            raise ValueError("phpVersion must be a number") from None
        if not math.isfinite(version):
            raise ValueError("phpVersion must be finite")
        return version

    @field_validator("excluded_paths", "file_extensions", mode="before")
    @classmethod
    def default_missing_sequence(cls, v: Any) -> Any:
        return () if v is None else v

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a fresh camelCase dict for a project payload."""
        data = self.model_dump(by_alias=True)
        data["excludedPaths"] = list(data["excludedPaths"])
        data["fileExtensions"] = list(data["fileExtensions"])
        return data


# Written into a project payload by set_up; never used to fill gaps in a resolved one
DEFAULT_PROJECT_SETTINGS = ProjectSettings(php_version=7.1, file_extensions=("php",))
