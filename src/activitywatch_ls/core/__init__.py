"""Core language server components: the event-to-heartbeat pipeline."""

from .enrichment import MetadataEnricher
from .event_normalizer import EventNormalizer
from .events import DocumentEvent, DocumentEventKind, HeartbeatData, HeartbeatPayload
from .language_cache import LanguageCache
from .pipeline import HeartbeatPipeline, PayloadEmitter
from .project import ProjectContext
from .signal_handler import SignalHandler
from .state import ActivityState, DebounceFilter

__all__ = [
    # Event models
    "DocumentEvent",
    "DocumentEventKind",
    "HeartbeatData",
    "HeartbeatPayload",
    "EventNormalizer",
    # Pipeline state
    "ActivityState",
    "DebounceFilter",
    "LanguageCache",
    "ProjectContext",
    "MetadataEnricher",
    # Pipeline
    "HeartbeatPipeline",
    "PayloadEmitter",
    "SignalHandler",
]
