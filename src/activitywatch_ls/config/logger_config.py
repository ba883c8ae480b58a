"""Logger configuration for the language server."""

import sys

from loguru import logger

from .settings import LoggingConfig


def setup_logging(settings: LoggingConfig) -> None:
    """Configure loguru logger for console and file output.

    Sets up structured logging with:
    - Console output on stderr, since stdout carries the LSP stream
    - Optional file output with rotation and retention
    - Configurable log level
    """

    # Remove default loguru handler
    logger.remove()

    if settings.to_console:
        logger.add(
            sink=sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=settings.level,
            colorize=False,
        )

    if settings.file_path:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(settings.file_path),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=settings.level,
            rotation=settings.rotation,
            retention=settings.retention,
            compression="gz",  # Compress rotated logs
            enqueue=True,  # Thread-safe logging
        )

        logger.info(f"File logging enabled: {settings.file_path}")
        logger.info(f"Log level: {settings.level}")
