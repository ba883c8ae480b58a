"""Language server transport for the heartbeat pipeline."""

from .lsp_server import SERVER_NAME, create_server, fetch_workspace_folders, register_features

__all__ = ["SERVER_NAME", "create_server", "fetch_workspace_folders", "register_features"]
