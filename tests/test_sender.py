"""Tests for the ActivityWatch heartbeat emitter and startup connection."""

import os
import threading
from datetime import datetime, timedelta, timezone

import pytest

from activitywatch_ls.config import WatcherConfig
from activitywatch_ls.core import HeartbeatData, HeartbeatPayload
from activitywatch_ls.sender import BucketIdentity, HeartbeatEmitter, StartupError, aw_sender, connect_backend, create_client
from conftest import FakeAWClient

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_payload(**data):
    return HeartbeatPayload(data=HeartbeatData(file="/src/main.rs", **data), timestamp=NOW)


def test_bucket_id_combines_client_and_host():
    bucket = BucketIdentity("aw-watcher-lsp", "laptop", "app.editor.activity")

    assert bucket.bucket_id == "aw-watcher-lsp_laptop"


def test_connect_creates_bucket():
    client = FakeAWClient(hostname="laptop")

    emitter = connect_backend(WatcherConfig(), pulsetime=110.0, client=client)

    assert emitter.bucket_id == "aw-watcher-lsp_laptop"
    assert client.buckets == {"aw-watcher-lsp_laptop": "app.editor.activity"}
    assert emitter.pulsetime == 110.0


def test_connect_fails_when_server_unreachable():
    client = FakeAWClient(fail_info=True)

    with pytest.raises(StartupError, match="Could not connect"):
        connect_backend(WatcherConfig(), pulsetime=110.0, client=client)

    assert client.buckets == {}


def test_connect_fails_when_bucket_rejected():
    with pytest.raises(StartupError, match="Could not create bucket"):
        connect_backend(WatcherConfig(), pulsetime=110.0, client=FakeAWClient(fail_bucket=True))


def test_emit_sends_zero_duration_heartbeat():
    client = FakeAWClient()
    emitter = HeartbeatEmitter(client, BucketIdentity("aw-watcher-lsp", "testhost", "app.editor.activity"), pulsetime=110.0)

    assert emitter.emit(make_payload(language="rust", project="file:///src"))

    bucket_id, event, pulsetime = client.heartbeats[0]
    assert bucket_id == "aw-watcher-lsp_testhost"
    assert pulsetime == 110.0
    assert event.duration == timedelta(0)
    assert event.timestamp == NOW
    assert event.data == {"file": "/src/main.rs", "project": "file:///src", "language": "rust"}


def test_emit_omits_unresolved_fields():
    client = FakeAWClient()
    emitter = HeartbeatEmitter(client, BucketIdentity("aw-watcher-lsp", "testhost", "app.editor.activity"), pulsetime=110.0)

    emitter.emit(make_payload())

    assert client.heartbeats[0][1].data == {"file": "/src/main.rs"}


def test_emit_failure_is_logged_not_raised():
    emitter = HeartbeatEmitter(FakeAWClient(fail_heartbeat=True), BucketIdentity("aw-watcher-lsp", "testhost", "app.editor.activity"), pulsetime=110.0)

    assert not emitter.emit(make_payload())
    assert not emitter.emit(make_payload())

    stats = emitter.get_stats()
    assert stats["total_failed"] == 2
    assert stats["success_rate"] == 0
    assert "connection reset" in stats["last_error"]
    assert stats["last_successful_send"] is None


class RecordingClientClass:
    """Replaces the ActivityWatchClient class to capture constructor arguments."""

    def __init__(self, client_name, testing=False, host=None, port=None):
        self.client_name = client_name
        self.client_hostname = "testhost"
        self.lock_name = f"{client_name}at{host}on{port}"
        self.server_address = f"http://{host}:{port}"
        self.buckets = {}

    def get_info(self):
        return {"version": "v0.13.2"}

    def create_bucket(self, bucket_id, event_type, queued=False):
        self.buckets[bucket_id] = event_type


def test_testing_mode_targets_testing_server():
    client = create_client(WatcherConfig(testing=True))

    assert client.server_address == "http://localhost:5666"
    assert client.client_name == "aw-watcher-lsp"


def test_client_lock_is_per_process(monkeypatch):
    monkeypatch.setattr(aw_sender, "ActivityWatchClient", RecordingClientClass)

    client = create_client(WatcherConfig(port=5601))

    assert client.lock_name == f"aw-watcher-lsp-{os.getpid()}atlocalhoston5601"
    assert client.client_name == "aw-watcher-lsp"
    assert client.server_address == "http://localhost:5601"


def test_client_lock_exit_becomes_startup_error(monkeypatch):
    class LockedClient:
        def __init__(self, *args, **kwargs):
            raise SystemExit(-1)

    monkeypatch.setattr(aw_sender, "ActivityWatchClient", LockedClient)

    with pytest.raises(StartupError, match="another instance holds its lock"):
        connect_backend(WatcherConfig(), pulsetime=110.0)


def test_bucket_id_does_not_depend_on_lock_name(monkeypatch):
    monkeypatch.setattr(aw_sender, "ActivityWatchClient", RecordingClientClass)

    emitter = connect_backend(WatcherConfig(), pulsetime=110.0)

    assert emitter.bucket_id == "aw-watcher-lsp_testhost"
    assert emitter.client.buckets == {"aw-watcher-lsp_testhost": "app.editor.activity"}


def test_concurrent_emits_keep_exact_counts():
    client = FakeAWClient()
    emitter = HeartbeatEmitter(client, BucketIdentity("aw-watcher-lsp", "testhost", "app.editor.activity"), pulsetime=110.0)

    def send_many():
        for _ in range(200):
            emitter.emit(make_payload())

    threads = [threading.Thread(target=send_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = emitter.get_stats()
    assert stats["total_sent"] == 1600
    assert stats["total_failed"] == 0
    assert stats["success_rate"] == 1
