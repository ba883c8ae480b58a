"""ActivityWatch transport module for sending heartbeats."""

from .aw_sender import BucketIdentity, HeartbeatEmitter, StartupError, connect_backend, create_client

__all__ = ["BucketIdentity", "HeartbeatEmitter", "StartupError", "connect_backend", "create_client"]
