"""Event models for the language server pipeline.

Editor notifications flow through the pipeline as:
Editor notification → DocumentEvent → Debounce → Enrichment → Heartbeat
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from aw_core.models import Event
from pydantic import BaseModel, ConfigDict, Field


class DocumentEventKind(str, Enum):
    """Document lifecycle notifications that can produce a heartbeat."""

    OPEN = "open"
    CHANGE = "change"
    SAVE = "save"


@dataclass(frozen=True)
class DocumentEvent:
    """A single normalized editor notification."""

    uri: str
    kind: DocumentEventKind
    language: Optional[str] = None

    @property
    def is_write(self) -> bool:
        return self.kind is DocumentEventKind.SAVE

    @classmethod
    def opened(cls, uri: str, language: Optional[str]) -> DocumentEvent:
        language = language.strip() if language else None
        return cls(uri=uri, kind=DocumentEventKind.OPEN, language=language or None)

    @classmethod
    def changed(cls, uri: str) -> DocumentEvent:
        return cls(uri=uri, kind=DocumentEventKind.CHANGE)

    @classmethod
    def saved(cls, uri: str) -> DocumentEvent:
        return cls(uri=uri, kind=DocumentEventKind.SAVE)


class HeartbeatData(BaseModel):
    """Data map attached to every heartbeat."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    file: str = Field(..., min_length=1, description="Document identity")
    project: Optional[str] = Field(None, min_length=1, description="First workspace folder")
    language: Optional[str] = Field(None, min_length=1, description="Language identifier")


@dataclass
class HeartbeatPayload:
    """A zero-duration activity record ready to be sent."""

    data: HeartbeatData
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration: timedelta = field(default_factory=timedelta)

    def to_dict(self) -> Dict[str, Any]:
        """Convert payload to dictionary, omitting unresolved fields."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "duration": self.duration.total_seconds(),
            "data": self.data.model_dump(exclude_none=True),
        }

    def to_aw_event(self) -> Event:
        """Convert payload to an ActivityWatch event."""
        # Duration 0: the server's pulsetime merge accumulates time between heartbeats
        return Event(
            timestamp=self.timestamp.astimezone(timezone.utc),
            duration=self.duration,
            data=self.data.model_dump(exclude_none=True),
        )
