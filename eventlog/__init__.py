"""In-memory, thread-safe event log store for embedding in interactive apps."""

from eventlog.default import default_store, reset_default_store
from eventlog.dispatch import CoordinatorThread, ImmediateDispatcher, LoopDispatcher
from eventlog.levels import Level
from eventlog.models import Event, Metadata
from eventlog.store import EventStore
from eventlog.tags import StrTag, Tag, Tagging, tag_value

__all__ = [
    "CoordinatorThread",
    "Event",
    "EventStore",
    "ImmediateDispatcher",
    "Level",
    "LoopDispatcher",
    "Metadata",
    "StrTag",
    "Tag",
    "Tagging",
    "default_store",
    "reset_default_store",
    "tag_value",
]
