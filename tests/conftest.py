"""Shared fixtures: a controllable clock and fakes for the ActivityWatch side."""

from datetime import datetime, timedelta, timezone

import pytest

from activitywatch_ls.config import DebounceConfig
from activitywatch_ls.core import HeartbeatPipeline


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class RecordingEmitter:
    """Collects payloads instead of sending them."""

    def __init__(self, succeed=True):
        self.succeed = succeed
        self.payloads = []

    def emit(self, payload):
        self.payloads.append(payload)
        return self.succeed


class FakeAWClient:
    """Stands in for aw_client.ActivityWatchClient."""

    def __init__(self, hostname="testhost", fail_info=False, fail_bucket=False, fail_heartbeat=False):
        self.client_hostname = hostname
        self.fail_info = fail_info
        self.fail_bucket = fail_bucket
        self.fail_heartbeat = fail_heartbeat
        self.buckets = {}
        self.heartbeats = []

    def get_info(self):
        if self.fail_info:
            raise ConnectionError("connection refused")
        return {"hostname": self.client_hostname, "version": "v0.13.2", "testing": True}

    def create_bucket(self, bucket_id, event_type, queued=False):
        if self.fail_bucket:
            raise RuntimeError("500 Server Error")
        self.buckets[bucket_id] = event_type

    def heartbeat(self, bucket_id, event, pulsetime, queued=False, commit_interval=None):
        if self.fail_heartbeat:
            raise ConnectionError("connection reset by peer")
        self.heartbeats.append((bucket_id, event, pulsetime))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def make_pipeline(clock):
    def _make(emitter, interval=1.0, **kwargs):
        settings = DebounceConfig(interval=interval, pulsetime=max(interval - 0.5, 0.1), **kwargs)
        return HeartbeatPipeline(emitter, settings, clock=clock)

    return _make
