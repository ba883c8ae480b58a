"""Event-to-heartbeat pipeline.

Coordinates the flow of a single editor notification:
DocumentEvent → LanguageCache → DebounceFilter → MetadataEnricher → HeartbeatEmitter
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any, Dict, Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from ..config.settings import DebounceConfig
from .enrichment import MetadataEnricher
from .events import DocumentEvent, DocumentEventKind, HeartbeatPayload
from .language_cache import LanguageCache
from .project import ProjectContext
from .state import Clock, DebounceFilter, utc_now


class PayloadEmitter(Protocol):
    """Protocol for sending heartbeats to the time-tracking backend."""

    def emit(self, payload: HeartbeatPayload) -> bool:
        """Send a heartbeat. Must not raise."""
        ...


class HeartbeatPipeline:
    """Turns document events into heartbeats.

    All shared state is owned by the pipeline instance and passed in, so the
    pipeline can run without an editor connection or a live server.
    """

    def __init__(
        self,
        emitter: PayloadEmitter,
        settings: Optional[DebounceConfig] = None,
        project: Optional[ProjectContext] = None,
        languages: Optional[LanguageCache] = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or DebounceConfig()
        self.emitter = emitter
        self.project = project or ProjectContext(timeout=self.settings.workspace_folders_timeout)
        self.languages = languages or LanguageCache(self.settings.language_cache_size)
        self.debounce = DebounceFilter(timedelta(seconds=self.settings.interval), clock=clock)
        self.enricher = MetadataEnricher(self.languages)

        self._events_received = 0
        self._events_suppressed = 0
        self._events_invalid = 0
        self._heartbeats_attempted = 0

    async def handle(self, event: DocumentEvent) -> bool:
        """Process one document event.

        Returns:
            True if a heartbeat was attempted, False if the event was dropped
        """
        self._events_received += 1

        if event.kind is DocumentEventKind.OPEN:
            self.languages.remember(event.uri, event.language)
            if not self.settings.heartbeat_on_open:
                return False

        timestamp = self.debounce.admit(event)
        if timestamp is None:
            self._events_suppressed += 1
            return False

        project = await self.project.resolve()
        try:
            payload = self.enricher.build(event, timestamp, project)
        except ValidationError as e:
            self._events_invalid += 1
            logger.warning(f"Dropping {event.kind.value} event for {event.uri!r}: {e}")
            return False

        self._heartbeats_attempted += 1
        await asyncio.to_thread(self.emitter.emit, payload)
        return True

    def close_document(self, uri: str) -> None:
        """Drop cached metadata for a document the editor closed."""
        self.languages.forget(uri)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "events_received": self._events_received,
            "events_suppressed": self._events_suppressed,
            "events_invalid": self._events_invalid,
            "heartbeats_attempted": self._heartbeats_attempted,
            "cached_languages": len(self.languages),
            "project": self.project.project,
        }
