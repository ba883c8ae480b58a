"""Signal handling for graceful shutdown."""

from .signal_handler import SignalHandler

__all__ = ["SignalHandler"]
