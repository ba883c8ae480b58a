"""Per-document language cache."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional


class LanguageCache:
    """Maps document identity to the language reported when it was opened.

    Entries are evicted when the document is closed, and the least recently
    used entry is dropped once ``max_entries`` is exceeded.
    """

    def __init__(self, max_entries: int = 512):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def remember(self, uri: str, language: Optional[str]) -> None:
        language = language.strip() if language else None
        if not language:
            return
        with self._lock:
            self._entries[uri] = language
            self._entries.move_to_end(uri)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def lookup(self, uri: str) -> Optional[str]:
        with self._lock:
            language = self._entries.get(uri)
            if language is not None:
                self._entries.move_to_end(uri)
            return language

    def forget(self, uri: str) -> None:
        with self._lock:
            self._entries.pop(uri, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._entries
