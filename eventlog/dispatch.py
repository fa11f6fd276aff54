"""Coordinating contexts: where store mutations are allowed to run.

A dispatcher answers two questions for the store: "is the current caller
already on the coordinating context?" and "run this there later". Work
submitted from one thread runs in submission order; there is no ordering
between different submitting threads, and submitters are never told when
their work has run.
"""

import asyncio
import logging
import queue
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Task = Callable[[], None]

_STOP = object()


class Dispatcher(Protocol):
    def is_current(self) -> bool: ...

    def submit(self, task: Task) -> None: ...

    def wait_idle(self, timeout: float | None = None) -> bool: ...

    def close(self) -> None: ...


class CoordinatorThread(threading.Thread):
    """Dedicated daemon thread that owns all store mutations.

    Started on the first ``submit``. Calls made on this thread itself are
    treated as already being on the coordinating context.
    """

    def __init__(self, name: str = "eventlog-coordinator"):
        super().__init__(name=name, daemon=True)
        self._queue: queue.Queue = queue.Queue()
        self._start_lock = threading.Lock()
        self._closed = False

    def is_current(self) -> bool:
        return threading.get_ident() == self.ident

    def submit(self, task: Task):
        if self._closed:
            logger.warning("Coordinator thread %s is closed, dropping task", self.name)
            return
        self._ensure_started()
        self._queue.put(task)

    def _ensure_started(self):
        with self._start_lock:
            if self.ident is None and not self._closed:
                self.start()
                logger.debug("Coordinator thread %s started", self.name)

    def run(self):
        while True:
            task = self._queue.get()
            try:
                if task is _STOP:
                    break
                self._execute(task)
            finally:
                self._queue.task_done()

    def _execute(self, task: Task):
        try:
            task()
        except Exception:
            logger.exception("Task failed on coordinator thread %s", self.name)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until everything submitted before this call has run."""
        if self.is_current() or not self.is_alive():
            return True
        if self._closed:
            self.join(timeout=timeout)
            return not self.is_alive()
        done = threading.Event()
        self.submit(done.set)
        return done.wait(timeout)

    def close(self, timeout: float = 5.0):
        """Run what is already queued, then stop the thread."""
        with self._start_lock:
            self._closed = True
        if self.ident is None:
            return
        self._queue.put(_STOP)
        if self.is_current():
            return
        self.join(timeout=timeout)
        logger.debug("Coordinator thread %s stopped", self.name)


class ImmediateDispatcher:
    """Every caller counts as the coordinating context; work runs inline."""

    def is_current(self) -> bool:
        return True

    def submit(self, task: Task):
        task()

    def wait_idle(self, timeout: float | None = None) -> bool:
        return True

    def close(self):
        pass


class LoopDispatcher:
    """Use a running asyncio event loop as the coordinating context."""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def is_current(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def submit(self, task: Task):
        try:
            self._loop.call_soon_threadsafe(task)
        except RuntimeError:
            logger.warning("Event loop is closed, dropping task")

    def wait_idle(self, timeout: float | None = None) -> bool:
        if self.is_current():
            return True
        done = threading.Event()
        try:
            self._loop.call_soon_threadsafe(done.set)
        except RuntimeError:
            return False
        return done.wait(timeout)

    def close(self):
        pass


DISPATCHER_KINDS = ("thread", "immediate")


def build_dispatcher(kind: str, name: str = "eventlog-coordinator") -> Dispatcher:
    """Create a dispatcher by config name; unknown kinds fall back to a thread."""
    if kind == "immediate":
        return ImmediateDispatcher()
    if kind != "thread":
        logger.warning("Unknown dispatcher kind %r, using 'thread'", kind)
    return CoordinatorThread(name=name)
