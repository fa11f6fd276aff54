from datetime import datetime

import pytest

from eventlog import reset_default_store
from eventlog.dispatch import CoordinatorThread, ImmediateDispatcher
from eventlog.levels import Level
from eventlog.models import Event, Metadata
from eventlog.store import EventStore


@pytest.fixture
def store():
    """Store whose coordinating context is the calling thread."""
    return EventStore(name="test", dispatcher=ImmediateDispatcher())


@pytest.fixture
def threaded_store():
    """Store that owns a dedicated coordinator thread."""
    s = EventStore(name="threaded", dispatcher=CoordinatorThread(name="test-coordinator"))
    yield s
    s.close()


@pytest.fixture
def fixed_time():
    return datetime(2024, 1, 15, 10, 30, 0)


@pytest.fixture
def make_event(fixed_time):
    def _make(level=Level.INFO, message="hello", error=None, tags=(), file="app.py", line=42):
        return Event(
            level=level,
            message=message,
            error=error,
            metadata=Metadata(file=file, line=line, tags=tuple(tags)),
            created_at=fixed_time,
        )
    return _make


@pytest.fixture
def clean_default(monkeypatch):
    for key in ("EVENTLOG_CONFIG", "EVENTLOG_NAME", "EVENTLOG_ENABLED",
                "EVENTLOG_MIRROR_TO_CONSOLE", "EVENTLOG_DISPATCHER"):
        monkeypatch.delenv(key, raising=False)
    reset_default_store()
    yield
    reset_default_store()
