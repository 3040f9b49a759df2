"""Configuration package."""

from mlframe.config.settings import (
    Environment,
    LogFormat,
    LogLevel,
    Settings,
    StorageBackend,
    get_settings,
    reload_settings,
)

__all__ = [
    "Environment",
    "LogFormat",
    "LogLevel",
    "Settings",
    "StorageBackend",
    "get_settings",
    "reload_settings",
]
