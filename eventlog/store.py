"""Thread-safe in-memory event store with a tag-filtered view and text export."""

import logging
import threading
from typing import Callable, Iterable

from eventlog.dispatch import CoordinatorThread, Dispatcher
from eventlog.levels import Level
from eventlog.models import Event
from eventlog.source import resolve_location
from eventlog.tags import Tag, Tagging, unique_values

logger = logging.getLogger(__name__)

CONSOLE_LOGGER = "eventlog.console"

Sink = Callable[[Event, str], None]
Listener = Callable[["EventStore"], None]


def logger_sink(name: str) -> Sink:
    """Mirror sink writing to the stdlib logger called *name*."""
    target = logging.getLogger(name)

    def sink(event: Event, line: str):
        target.log(event.level.logging_level, line)

    return sink


class EventStore:
    """Append-only event log shared by any number of producer threads.

    Appends run on the store's coordinating context (its dispatcher); a
    ``log`` call made anywhere else is queued there and returns at once.
    One lock guards the event list and the filter tags. It is never held
    while mirroring to the console or notifying listeners.

    A store built without a dispatcher owns a coordinator thread; call
    ``close()`` or use the store as a context manager to stop it.
    """

    def __init__(self, name: str | None = None, events: Iterable[Event] | None = None,
                 mirror_to_console: bool = False, *, enabled: bool = True,
                 dispatcher: Dispatcher | None = None, sink: Sink | None = None):
        self._lock = threading.Lock()
        self._name = name
        self._events: list[Event] = list(events or [])
        self._filter_tags: dict[str, None] = {}
        self._enabled = enabled
        self._mirror_to_console = mirror_to_console
        if dispatcher is None:
            dispatcher = CoordinatorThread(name=f"eventlog-{name or 'store'}")
        self._dispatcher = dispatcher
        self._sink = sink or logger_sink(CONSOLE_LOGGER)
        self._listeners: list[Listener] = []

    def __enter__(self) -> "EventStore":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return f"EventStore(name={self._name!r}, events={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        self._enabled = bool(value)

    @property
    def mirror_to_console(self) -> bool:
        return self._mirror_to_console

    @mirror_to_console.setter
    def mirror_to_console(self, value: bool):
        self._mirror_to_console = bool(value)

    def set_enabled(self, value: bool):
        self.enabled = value

    def set_console_mirroring(self, value: bool):
        self.mirror_to_console = value

    # -- appending ---------------------------------------------------------

    def log(self, level: Level, message: str, error: BaseException | None = None,
            tags: Iterable[Tag] = (), *, source_file: str | None = None,
            source_line: int | None = None, stacklevel: int = 1):
        """Record an event. Never raises; a no-op while the store is disabled."""
        if not self._enabled:
            return
        # The call site must be captured here, before any re-dispatch.
        file, line = resolve_location(source_file, source_line, stacklevel)
        tags = tuple(tags)

        def append():
            self._append(level, message, error, tags, file, line)

        if self._dispatcher.is_current():
            append()
        else:
            self._dispatcher.submit(append)

    def _append(self, level, message, error, tags, file, line):
        if not self._enabled:
            return
        event = Event.create(level, message, error, tags, source_file=file, source_line=line)
        with self._lock:
            self._events.append(event)
        if self._mirror_to_console:
            try:
                self._sink(event, event.summary())
            except Exception:
                logger.exception("Console sink failed for store %s", self._name)
        self._notify()

    def success(self, message: str, tags: Iterable[Tag] = (), *,
                source_file: str | None = None, source_line: int | None = None,
                stacklevel: int = 1):
        self.log(Level.SUCCESS, message, None, tags, source_file=source_file,
                 source_line=source_line, stacklevel=stacklevel + 1)

    def info(self, message: str, tags: Iterable[Tag] = (), *,
             source_file: str | None = None, source_line: int | None = None,
             stacklevel: int = 1):
        self.log(Level.INFO, message, None, tags, source_file=source_file,
                 source_line=source_line, stacklevel=stacklevel + 1)

    def warning(self, message: str, tags: Iterable[Tag] = (), *,
                source_file: str | None = None, source_line: int | None = None,
                stacklevel: int = 1):
        self.log(Level.WARNING, message, None, tags, source_file=source_file,
                 source_line=source_line, stacklevel=stacklevel + 1)

    def error(self, message: str, error: BaseException | None, tags: Iterable[Tag] = (), *,
              source_file: str | None = None, source_line: int | None = None,
              stacklevel: int = 1):
        self.log(Level.ERROR, message, error, tags, source_file=source_file,
                 source_line=source_line, stacklevel=stacklevel + 1)

    def fatal(self, message: str, error: BaseException | None, tags: Iterable[Tag] = (), *,
              source_file: str | None = None, source_line: int | None = None,
              stacklevel: int = 1):
        self.log(Level.FATAL, message, error, tags, source_file=source_file,
                 source_line=source_line, stacklevel=stacklevel + 1)

    # -- reading -----------------------------------------------------------

    @property
    def events(self) -> list[Event]:
        """Every event in append order."""
        with self._lock:
            return list(self._events)

    @property
    def filter_tags(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._filter_tags)

    def set_filter_tags(self, tags: Iterable[Tag] | Tag):
        """Replace the active filter. An empty iterable shows every event.

        A lone string or tag object counts as a single tag.
        """
        if isinstance(tags, (str, Tagging)):
            tags = (tags,)
        values = dict.fromkeys(unique_values(tags))
        with self._lock:
            self._filter_tags = values
        logger.debug("Store %s filter set to %s", self._name, list(values))
        self._notify()

    def _displayed_locked(self) -> list[Event]:
        """Filtered view. Must be called with self._lock held."""
        if not self._filter_tags:
            return list(self._events)
        return [e for e in self._events if e.has_any_tag(self._filter_tags)]

    @property
    def displayed_events(self) -> list[Event]:
        """Events matching the active filter tags, in append order."""
        with self._lock:
            return self._displayed_locked()

    @property
    def export_text(self) -> str:
        """Displayed events, one ``describe()`` line each, newline-joined."""
        with self._lock:
            return "\n".join(e.describe() for e in self._displayed_locked())

    def tag_values(self) -> tuple[str, ...]:
        """Distinct tag values across all events, in first-seen order."""
        with self._lock:
            seen = dict.fromkeys(v for e in self._events for v in e.metadata.tag_values)
        return tuple(seen)

    # -- change notification -----------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every append or filter change.

        Returns a function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Listener %r failed for store %s", listener, self._name)

    # -- lifecycle ---------------------------------------------------------

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until appends already queued on the coordinating context have run."""
        return self._dispatcher.wait_idle(timeout)

    def close(self):
        """Drain and stop the coordinating context."""
        self._dispatcher.close()
