"""Core module exports."""

from php_integrator.core.errors import (
    AlreadyInitializedError,
    ConfigError,
    ErrorCode,
    HostError,
    IndexingError,
    IntegratorError,
    InvalidPathIndexError,
    InvalidSettingsError,
    InvalidVersionError,
    MissingSettingsError,
    NoRepositoryError,
)
from php_integrator.core.logging import (
    clear_pass_id,
    configure_logging,
    get_logger,
    get_pass_id,
    set_pass_id,
)

__all__ = [
    # Errors
    "AlreadyInitializedError",
    "ConfigError",
    "ErrorCode",
    "HostError",
    "IndexingError",
    "IntegratorError",
    "InvalidPathIndexError",
    "InvalidSettingsError",
    "InvalidVersionError",
    "MissingSettingsError",
    "NoRepositoryError",
    # Logging
    "clear_pass_id",
    "configure_logging",
    "get_logger",
    "get_pass_id",
    "set_pass_id",
]
