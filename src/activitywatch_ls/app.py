"""Process bootstrap for the ActivityWatch language server."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from loguru import logger

from . import __version__
from .config import ActivityWatchLSConfig, get_config_manager, setup_logging
from .core import SignalHandler
from .sender import HeartbeatEmitter, StartupError, connect_backend
from .server import SERVER_NAME, create_server

EXIT_OK = 0
EXIT_STARTUP_FAILED = 1
EXIT_INVALID_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=SERVER_NAME, description="A simple ActivityWatch language server watcher")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-a", "--host", help="The host of the ActivityWatch server to connect to")
    parser.add_argument("-p", "--port", type=int, help="The ActivityWatch server port to connect to on the host")
    parser.add_argument("--testing", action="store_true", default=None, help="Connect to the ActivityWatch testing server")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


class ActivityWatchLSApp:
    """Main application class for the language server."""

    def __init__(self, config: ActivityWatchLSConfig, install_signals: bool = True) -> None:
        self.config = config
        self.emitter: Optional[HeartbeatEmitter] = None
        self.pipeline = None

        self.signal_handler = SignalHandler(install=install_signals)
        self.signal_handler.register_cleanup(self._report_stats)

    def _report_stats(self) -> None:
        if self.pipeline is not None:
            logger.info(f"Pipeline stats: {self.pipeline.get_stats()}")
        if self.emitter is not None:
            logger.info(f"Emitter stats: {self.emitter.get_stats()}")

    def run(self) -> int:
        """Connect to ActivityWatch, then serve the editor over stdio."""
        logger.info(f"Starting {SERVER_NAME} {__version__}")
        watcher = self.config.watcher
        logger.info(f"Using ActivityWatch {'testing ' if watcher.testing else ''}server at {watcher.endpoint}")

        try:
            self.emitter = connect_backend(watcher, self.config.debounce.pulsetime)
        except StartupError as e:
            logger.error(f"{e}. Exiting without serving the editor.")
            return EXIT_STARTUP_FAILED

        server, self.pipeline = create_server(self.emitter, self.config.debounce)

        try:
            server.start_io()
        finally:
            logger.info("Language server stopped")
            self.signal_handler.run_cleanup()
        return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_manager = get_config_manager()
    config = config_manager.load_config(
        host=args.host,
        port=args.port,
        testing=args.testing,
        log_level=args.log_level,
        log_file=args.log_file,
    )
    setup_logging(config.logging)

    is_valid, errors = config_manager.validate_config()
    if not is_valid:
        for error in errors:
            logger.error(f"Invalid configuration: {error}")
        return EXIT_INVALID_CONFIG

    return ActivityWatchLSApp(config).run()
