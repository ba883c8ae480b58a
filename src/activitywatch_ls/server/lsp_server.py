"""Language server wiring.

The server only listens: every document notification is handed to the
heartbeat pipeline and nothing is ever reported back to the editor except a
log message on startup.
"""

from __future__ import annotations

from typing import List, Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..config.settings import DebounceConfig
from ..core.event_normalizer import EventNormalizer
from ..core.pipeline import HeartbeatPipeline, PayloadEmitter
from ..core.project import ProjectContext

SERVER_NAME = "activitywatch-ls"


async def fetch_workspace_folders(ls: LanguageServer) -> Optional[List[str]]:
    """Ask the editor for its workspace folders.

    Falls back to the root announced at initialize when the editor does not
    support the workspace/workspaceFolders request.
    """
    capabilities = ls.client_capabilities
    workspace = capabilities.workspace if capabilities else None
    if workspace is None or not workspace.workspace_folders:
        root_uri = ls.workspace.root_uri
        return [root_uri] if root_uri else []

    folders = await ls.protocol.send_request_async(types.WORKSPACE_WORKSPACE_FOLDERS, None)
    return EventNormalizer.normalize_folders(folders)


async def on_did_open(pipeline: HeartbeatPipeline, params: types.DidOpenTextDocumentParams) -> None:
    document = params.text_document
    await pipeline.handle(EventNormalizer.normalize_open(document.uri, document.language_id))


async def on_did_change(pipeline: HeartbeatPipeline, params: types.DidChangeTextDocumentParams) -> None:
    await pipeline.handle(EventNormalizer.normalize_change(params.text_document.uri))


async def on_did_save(pipeline: HeartbeatPipeline, params: types.DidSaveTextDocumentParams) -> None:
    await pipeline.handle(EventNormalizer.normalize_save(params.text_document.uri))


def on_did_close(pipeline: HeartbeatPipeline, params: types.DidCloseTextDocumentParams) -> None:
    pipeline.close_document(EventNormalizer.normalize_uri(params.text_document.uri))


def register_features(server: LanguageServer, pipeline: HeartbeatPipeline) -> None:
    """Route document lifecycle notifications into ``pipeline``."""

    @server.feature(types.INITIALIZED)
    async def initialized(ls: LanguageServer, params: types.InitializedParams) -> None:
        ls.window_log_message(types.LogMessageParams(type=types.MessageType.Info, message="ActivityWatch language server initialized"))
        await pipeline.project.resolve()

    @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
    async def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams) -> None:
        await on_did_open(pipeline, params)

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    async def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams) -> None:
        await on_did_change(pipeline, params)

    @server.feature(types.TEXT_DOCUMENT_DID_SAVE, types.SaveOptions(include_text=False))
    async def did_save(ls: LanguageServer, params: types.DidSaveTextDocumentParams) -> None:
        await on_did_save(pipeline, params)

    @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams) -> None:
        on_did_close(pipeline, params)


def create_server(emitter: PayloadEmitter, settings: Optional[DebounceConfig] = None) -> tuple[LanguageServer, HeartbeatPipeline]:
    """Build a language server feeding heartbeats to ``emitter``.

    Returns:
        Tuple of (server, pipeline)
    """
    settings = settings or DebounceConfig()
    server = LanguageServer(SERVER_NAME, __version__, text_document_sync_kind=types.TextDocumentSyncKind.Incremental)

    project = ProjectContext(
        fetch_folders=lambda: fetch_workspace_folders(server),
        timeout=settings.workspace_folders_timeout,
    )
    pipeline = HeartbeatPipeline(emitter, settings, project=project)

    register_features(server, pipeline)
    return server, pipeline
