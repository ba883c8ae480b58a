"""Event normalizer for converting editor notifications to document events."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .events import DocumentEvent


class EventNormalizer:
    """Converts LSP notification parameters to standardized events."""

    @staticmethod
    def normalize_uri(uri: str) -> str:
        """Strip the scheme from a document URI.

        ``file:///home/me/main.rs`` becomes ``/home/me/main.rs``. URIs without
        a scheme are returned unchanged.
        """
        scheme, sep, rest = uri.partition("://")
        if not sep or not scheme:
            return uri
        return rest

    @classmethod
    def normalize_open(cls, uri: str, language_id: Optional[str]) -> DocumentEvent:
        return DocumentEvent.opened(cls.normalize_uri(uri), language_id)

    @classmethod
    def normalize_change(cls, uri: str) -> DocumentEvent:
        return DocumentEvent.changed(cls.normalize_uri(uri))

    @classmethod
    def normalize_save(cls, uri: str) -> DocumentEvent:
        return DocumentEvent.saved(cls.normalize_uri(uri))

    @staticmethod
    def normalize_folders(folders: Optional[Iterable[Any]]) -> List[str]:
        """Extract folder URIs from a workspace/workspaceFolders response.

        Folders may arrive as ``WorkspaceFolder`` objects or plain mappings.
        """
        if not folders:
            return []

        uris = []
        for folder in folders:
            uri = folder.get("uri") if isinstance(folder, dict) else getattr(folder, "uri", None)
            if uri:
                uris.append(uri)
        return uris
