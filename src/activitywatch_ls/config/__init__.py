"""Configuration module for the ActivityWatch language server."""

from .logger_config import setup_logging
from .settings import ActivityWatchLSConfig, ConfigManager, DebounceConfig, LoggingConfig, WatcherConfig, get_config_manager, get_current_config

__all__ = [
    "ActivityWatchLSConfig",
    "WatcherConfig",
    "DebounceConfig",
    "LoggingConfig",
    "ConfigManager",
    "get_config_manager",
    "get_current_config",
    "setup_logging",
]
