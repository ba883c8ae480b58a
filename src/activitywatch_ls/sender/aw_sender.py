"""ActivityWatch sender for transmitting heartbeats.

This module owns the connection to the ActivityWatch server: it ensures the
editor bucket exists at startup and sends one heartbeat per admitted event
without retrying.
"""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from aw_client import ActivityWatchClient
from loguru import logger

from ..config.settings import WatcherConfig
from ..core.events import HeartbeatPayload


class StartupError(RuntimeError):
    """The ActivityWatch server could not be reached or prepared."""


@dataclass(frozen=True)
class BucketIdentity:
    """Stable destination for all heartbeats of one session."""

    client_name: str
    hostname: str
    event_type: str

    @property
    def bucket_id(self) -> str:
        return f"{self.client_name}_{self.hostname}"


class HeartbeatEmitter:
    """Sends heartbeats to a single ActivityWatch bucket."""

    def __init__(self, client: ActivityWatchClient, bucket: BucketIdentity, pulsetime: float):
        """Initialize the emitter.

        Args:
            client: Connected ActivityWatch client
            bucket: Destination bucket
            pulsetime: Merge window passed to the server, in seconds
        """
        self.client = client
        self.bucket = bucket
        self.pulsetime = pulsetime

        # Statistics
        self._stats_lock = threading.Lock()
        self._total_sent = 0
        self._total_failed = 0
        self._total_send_time = 0.0
        self._last_successful_send: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def bucket_id(self) -> str:
        return self.bucket.bucket_id

    def emit(self, payload: HeartbeatPayload) -> bool:
        """Send one heartbeat.

        Failures are logged and counted, never raised.

        Returns:
            True if the server accepted the heartbeat
        """
        start_time = time.time()

        try:
            self.client.heartbeat(self.bucket_id, payload.to_aw_event(), pulsetime=self.pulsetime)
        except Exception as e:
            with self._stats_lock:
                self._total_failed += 1
                self._last_error = str(e)
                self._total_send_time += time.time() - start_time
            logger.error(f"Heartbeat to bucket {self.bucket_id} failed for {payload.data.file}: {e}")
            return False

        with self._stats_lock:
            self._total_send_time += time.time() - start_time
            self._total_sent += 1
            self._last_successful_send = datetime.now()
            self._last_error = None
        logger.debug(f"Sent heartbeat to {self.bucket_id}: {payload.to_dict()}")
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get emitter statistics.

        Returns:
            Dictionary with emitter statistics
        """
        with self._stats_lock:
            attempts = self._total_sent + self._total_failed

            return {
                "bucket_id": self.bucket_id,
                "total_sent": self._total_sent,
                "total_failed": self._total_failed,
                "success_rate": self._total_sent / max(1, attempts),
                "average_send_time_seconds": self._total_send_time / max(1, attempts),
                "last_successful_send": self._last_successful_send.isoformat() if self._last_successful_send else None,
                "last_error": self._last_error,
            }


def create_client(config: WatcherConfig) -> ActivityWatchClient:
    """Build an ActivityWatch client for this process.

    aw-client holds a single-instance lock named after the client and the
    server address, and exits the process when it is already taken. Every
    editor session runs its own server, so the lock is made per process and
    the shared name is restored for bucket metadata afterwards.
    """
    client = ActivityWatchClient(
        f"{config.client_name}-{os.getpid()}",
        testing=config.testing,
        host=config.host,
        port=config.effective_port,
    )
    client.client_name = config.client_name
    return client


def connect_backend(config: WatcherConfig, pulsetime: float, client: Optional[ActivityWatchClient] = None) -> HeartbeatEmitter:
    """Connect to ActivityWatch and make sure the editor bucket exists.

    Args:
        config: Server connection settings
        pulsetime: Merge window for heartbeats, in seconds
        client: Pre-built client, mostly for tests

    Returns:
        Emitter bound to the session bucket

    Raises:
        StartupError: If the server is unreachable or rejects the bucket
    """
    try:
        client = client or create_client(config)
    except SystemExit as e:
        raise StartupError(f"ActivityWatch client for {config.endpoint} refused to start (another instance holds its lock)") from e
    except Exception as e:
        raise StartupError(f"Could not create ActivityWatch client for {config.endpoint}: {e}") from e

    bucket = BucketIdentity(
        client_name=config.client_name,
        hostname=client.client_hostname,
        event_type=config.event_type,
    )

    try:
        info = client.get_info()
    except Exception as e:
        raise StartupError(f"Could not connect to ActivityWatch at {config.endpoint}: {e}") from e

    version = info.get("version", "unknown") if isinstance(info, dict) else "unknown"
    logger.info(f"Connected to ActivityWatch {version} at {config.endpoint}")

    try:
        client.create_bucket(bucket.bucket_id, event_type=bucket.event_type)
    except Exception as e:
        raise StartupError(f"Could not create bucket {bucket.bucket_id}: {e}") from e

    logger.info(f"Using bucket {bucket.bucket_id} ({bucket.event_type})")
    return HeartbeatEmitter(client, bucket, pulsetime)
