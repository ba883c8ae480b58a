"""Configuration management for the ActivityWatch language server.

Configuration is assembled from dataclass defaults, then environment
variable overrides, then explicit overrides from the command line.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

ENV_PREFIX = "AW_LS_"

DEFAULT_PORT = 5600
DEFAULT_TESTING_PORT = 5666


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass
class WatcherConfig:
    """Connection settings for the ActivityWatch server."""

    host: str = "localhost"
    # None selects the regular or testing server port
    port: Optional[int] = None
    testing: bool = False

    # Bucket identity
    client_name: str = "aw-watcher-lsp"
    event_type: str = "app.editor.activity"

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return DEFAULT_TESTING_PORT if self.testing else DEFAULT_PORT

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.effective_port}"


@dataclass
class DebounceConfig:
    """Settings for the event-to-heartbeat pipeline."""

    # Save events for the current file are dropped inside this window (seconds)
    interval: float = 120.0
    # Merge window handed to the server with every heartbeat (seconds)
    pulsetime: float = 110.0

    heartbeat_on_open: bool = True
    language_cache_size: int = 512
    workspace_folders_timeout: float = 5.0


@dataclass
class LoggingConfig:
    """Settings for loguru sinks."""

    level: str = "INFO"
    to_console: bool = True
    file_path: Optional[Path] = None
    rotation: str = "10 MB"
    retention: str = "7 days"


@dataclass
class ActivityWatchLSConfig:
    """Complete language server configuration."""

    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    debounce: DebounceConfig = field(default_factory=DebounceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply configuration overrides from environment variables."""
        if host := os.getenv(f"{ENV_PREFIX}HOST"):
            self.watcher.host = host

        if port := os.getenv(f"{ENV_PREFIX}PORT"):
            try:
                self.watcher.port = int(port)
            except ValueError:
                logger.warning(f"Invalid port: {port}")

        if testing := os.getenv(f"{ENV_PREFIX}TESTING"):
            self.watcher.testing = _env_bool(testing)

        if client_name := os.getenv(f"{ENV_PREFIX}CLIENT_NAME"):
            self.watcher.client_name = client_name

        if interval := os.getenv(f"{ENV_PREFIX}INTERVAL"):
            try:
                self.debounce.interval = float(interval)
            except ValueError:
                logger.warning(f"Invalid debounce interval: {interval}")

        if pulsetime := os.getenv(f"{ENV_PREFIX}PULSETIME"):
            try:
                self.debounce.pulsetime = float(pulsetime)
            except ValueError:
                logger.warning(f"Invalid pulsetime: {pulsetime}")

        if heartbeat_on_open := os.getenv(f"{ENV_PREFIX}HEARTBEAT_ON_OPEN"):
            self.debounce.heartbeat_on_open = _env_bool(heartbeat_on_open)

        if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            self.logging.level = log_level.upper()

        if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            self.logging.file_path = Path(log_file)

    def validate(self) -> tuple[bool, list[str]]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.watcher.host:
            errors.append("Host is required")

        if self.watcher.port is not None and not 0 < self.watcher.port < 65536:
            errors.append("Port must be between 1 and 65535")

        if not self.watcher.client_name:
            errors.append("Client name is required")

        if self.debounce.interval <= 0:
            errors.append("Debounce interval must be positive")

        if self.debounce.pulsetime <= 0:
            errors.append("Pulsetime must be positive")

        if self.debounce.language_cache_size <= 0:
            errors.append("Language cache size must be positive")

        if self.debounce.workspace_folders_timeout <= 0:
            errors.append("Workspace folders timeout must be positive")

        return len(errors) == 0, errors


class ConfigManager:
    """Manages language server configuration."""

    def __init__(self):
        """Initialize configuration manager."""
        self._config: Optional[ActivityWatchLSConfig] = None

    def load_config(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        testing: Optional[bool] = None,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
    ) -> ActivityWatchLSConfig:
        """Load configuration with optional overrides.

        Args:
            host: ActivityWatch server host override
            port: ActivityWatch server port override
            testing: Use the ActivityWatch testing server
            log_level: Log level override
            log_file: Log file path override

        Returns:
            Configured ActivityWatchLSConfig instance
        """
        config = ActivityWatchLSConfig()

        if host:
            config.watcher.host = host

        if port is not None:
            config.watcher.port = port

        if testing is not None:
            config.watcher.testing = testing

        if log_level:
            config.logging.level = log_level.upper()

        if log_file:
            config.logging.file_path = Path(log_file)

        self._config = config
        return config

    def get_config(self) -> Optional[ActivityWatchLSConfig]:
        """Get current configuration."""
        return self._config

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        if not self._config:
            return False, ["No configuration loaded"]

        return self._config.validate()


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    return _config_manager


def get_current_config() -> Optional[ActivityWatchLSConfig]:
    """Get the current configuration."""
    return _config_manager.get_config()
