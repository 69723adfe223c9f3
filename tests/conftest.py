import asyncio
from datetime import datetime

import pytest

from core.proximity import (
    AlertDispatcher,
    Identity,
    JobCache,
    JobPosting,
    LocationTracker,
    Position,
    RadiusConfig,
    RefreshCoordinator,
)
from core.proximity.errors import SinkUnavailable
from core.proximity.notifications import reset_notification_handler

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0)


class MemoryStore:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value


class FakeProvider:
    def __init__(self, latitude=43.7, longitude=-79.4, granted=True):
        self.granted = granted
        self.position = Position(latitude=latitude, longitude=longitude, captured_at=FIXED_NOW)
        self.error = None
        self.gate = None
        self.permission_requests = 0
        self.position_calls = 0

    def move_to(self, latitude, longitude):
        self.position = Position(latitude=latitude, longitude=longitude, captured_at=FIXED_NOW)

    async def request_permission(self):
        self.permission_requests += 1
        return self.granted

    async def get_position(self):
        self.position_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.position


class FakeDirectory:
    def __init__(self, postings=None):
        self.postings = list(postings or [])
        self.error = None
        self.gate = None
        self.calls = 0

    async def list_postings(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.postings)


class FakeAccounts:
    def __init__(self, identity=None):
        self.identity = identity or Identity(user_id="u1", username="sam", email="sam@example.com")
        self.error = None
        self.tokens = []

    async def resolve_identity(self, token):
        self.tokens.append(token)
        if self.error is not None:
            raise self.error
        return self.identity


class RecordingSink:
    def __init__(self, fail_ids=()):
        self.intents = []
        self.fail_ids = set(fail_ids)

    def schedule(self, intent):
        if intent.job_id in self.fail_ids:
            raise SinkUnavailable(f"queue down for {intent.job_id}")
        self.intents.append(intent)

    @property
    def job_ids(self):
        return [i.job_id for i in self.intents]


def make_posting(job_id, latitude=None, longitude=None, **fields):
    return JobPosting(id=job_id, title=fields.pop("title", f"Job {job_id}"), latitude=latitude, longitude=longitude, **fields)


@pytest.fixture
def posting():
    return make_posting


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def accounts():
    return FakeAccounts()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_sink():
    return RecordingSink


@pytest.fixture
def coordinator(store, provider, directory, accounts, sink):
    return RefreshCoordinator(
        tracker=LocationTracker(provider),
        directory=directory,
        accounts=accounts,
        radius_config=RadiusConfig(store, default_km=5.0),
        sink_factory=lambda identity: sink,
        cache=JobCache(),
        dispatcher=AlertDispatcher(delay_seconds=2.0, clock=lambda: FIXED_NOW),
        timeout_seconds=1.0,
    )


@pytest.fixture
def run():
    """Run a coroutine to completion (tests stay sync, like the worker tests)."""
    return asyncio.run


@pytest.fixture(autouse=True)
def _clean_notification_handler():
    reset_notification_handler()
    yield
    reset_notification_handler()
