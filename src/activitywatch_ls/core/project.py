"""Active project, taken from the editor's workspace folders."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from loguru import logger

FolderFetcher = Callable[[], Awaitable[Optional[Sequence[str]]]]


class ProjectContext:
    """Holds the first workspace folder reported by the editor.

    The folder list is fetched lazily and at most once successfully per
    session. ActivityWatch events carry a single project, so any further
    folders are ignored.
    """

    def __init__(self, fetch_folders: Optional[FolderFetcher] = None, timeout: float = 5.0):
        self._fetch_folders = fetch_folders
        self.timeout = timeout
        self._project: Optional[str] = None
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def project(self) -> Optional[str]:
        return self._project

    @property
    def loaded(self) -> bool:
        return self._loaded

    def set_folders(self, folders: Optional[Sequence[str]]) -> None:
        self._project = folders[0] if folders else None
        self._loaded = True

    async def resolve(self) -> Optional[str]:
        """Return the project, fetching it from the editor on first use.

        A failed or timed out fetch is logged and leaves the project unset;
        the next call tries again.
        """
        if self._loaded or self._fetch_folders is None:
            return self._project

        async with self._lock:
            if self._loaded:
                return self._project
            try:
                folders = await asyncio.wait_for(self._fetch_folders(), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Timed out after {self.timeout}s fetching workspace folders")
                return None
            except Exception as e:
                logger.warning(f"Failed to fetch workspace folders: {e}")
                return None

            self.set_folders(folders)
            logger.info(f"Project set to {self._project}")
            return self._project
