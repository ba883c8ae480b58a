"""Builds heartbeat payloads from document events."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .events import DocumentEvent, HeartbeatData, HeartbeatPayload
from .language_cache import LanguageCache


class MetadataEnricher:
    """Attaches language and project to a document event."""

    def __init__(self, languages: LanguageCache):
        self.languages = languages

    def resolve_language(self, event: DocumentEvent) -> Optional[str]:
        # Only open events carry a language; everything else relies on the cache
        if event.language:
            return event.language
        return self.languages.lookup(event.uri)

    def build(self, event: DocumentEvent, timestamp: datetime, project: Optional[str] = None) -> HeartbeatPayload:
        data = HeartbeatData(
            file=event.uri,
            project=project or None,
            language=self.resolve_language(event),
        )
        return HeartbeatPayload(data=data, timestamp=timestamp)
