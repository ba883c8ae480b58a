"""ActivityWatch language server - editor activity heartbeats over LSP."""

__version__ = "0.1.0"

from .config import get_config_manager  # noqa: E402
from .core import DocumentEvent, HeartbeatPipeline  # noqa: E402

__all__ = ["DocumentEvent", "HeartbeatPipeline", "get_config_manager", "__version__"]
