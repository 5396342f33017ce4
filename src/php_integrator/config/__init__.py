"""Config module exports."""

from php_integrator.config.loader import load_config
from php_integrator.config.models import (
    DEFAULT_PROJECT_SETTINGS,
    EngineConfig,
    IntegratorConfig,
    LoggingConfig,
    ProjectSettings,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "DEFAULT_PROJECT_SETTINGS",
    "EngineConfig",
    "IntegratorConfig",
    "LoggingConfig",
    "ProjectSettings",
    "WatcherConfig",
]
