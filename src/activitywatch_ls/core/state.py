"""Activity state and the save-debounce decision."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from loguru import logger

from .events import DocumentEvent

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActivityState:
    """Last reported document and when it was reported.

    ``last_uri`` starts empty so the first event of a session can never match it.
    """

    last_uri: str = ""
    last_timestamp: datetime = field(default_factory=utc_now)


class DebounceFilter:
    """Drops repeated save notifications for the file that was just reported.

    Only save events are subject to suppression. Open and change events
    always proceed.
    """

    def __init__(self, interval: timedelta, clock: Clock = utc_now, state: ActivityState | None = None):
        self.interval = interval
        self._clock = clock
        self._state = state if state is not None else ActivityState(last_timestamp=clock())
        self._lock = threading.Lock()

    @property
    def state(self) -> ActivityState:
        with self._lock:
            return ActivityState(self._state.last_uri, self._state.last_timestamp)

    def admit(self, event: DocumentEvent) -> datetime | None:
        """Decide whether ``event`` should produce a heartbeat.

        On proceed the state is updated to the event and the returned instant,
        before any send is attempted. The update is never rolled back.

        Returns:
            The instant to stamp the heartbeat with, or None if suppressed
        """
        with self._lock:
            now = self._clock()
            elapsed = now - self._state.last_timestamp

            if event.is_write and event.uri == self._state.last_uri and elapsed < self.interval:
                logger.debug(f"Suppressing save for {event.uri} ({elapsed.total_seconds():.2f}s since last heartbeat)")
                return None

            # Clock is assumed non-decreasing; keep the state monotonic regardless
            self._state.last_uri = event.uri
            self._state.last_timestamp = max(now, self._state.last_timestamp)
            return now
