"""Tests for coordinating contexts."""

import asyncio
import logging
import threading

import pytest

from eventlog.dispatch import (
    CoordinatorThread,
    ImmediateDispatcher,
    LoopDispatcher,
    build_dispatcher,
)
from eventlog.store import EventStore


@pytest.fixture
def coordinator():
    c = CoordinatorThread(name="test-dispatch")
    yield c
    c.close()


@pytest.fixture
def loop_thread():
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()


class TestCoordinatorThread:
    def test_starts_lazily(self, coordinator):
        assert not coordinator.is_alive()
        coordinator.submit(lambda: None)
        assert coordinator.is_alive()

    def test_runs_tasks_in_submission_order(self, coordinator):
        seen = []
        for i in range(50):
            coordinator.submit(lambda i=i: seen.append(i))
        assert coordinator.wait_idle(timeout=5)
        assert seen == list(range(50))

    def test_is_current_only_on_its_thread(self, coordinator):
        results = []
        coordinator.submit(lambda: results.append(coordinator.is_current()))
        coordinator.wait_idle(timeout=5)
        assert results == [True]
        assert coordinator.is_current() is False

    def test_failing_task_is_logged_and_thread_survives(self, coordinator, caplog):
        seen = []

        def boom():
            raise RuntimeError("task exploded")

        coordinator.submit(boom)
        coordinator.submit(lambda: seen.append("after"))
        assert coordinator.wait_idle(timeout=5)
        assert seen == ["after"]
        assert "Task failed on coordinator thread" in caplog.text

    def test_close_drains_queue(self):
        c = CoordinatorThread(name="drain")
        seen = []
        for i in range(10):
            c.submit(lambda i=i: seen.append(i))
        c.close()
        assert seen == list(range(10))
        assert not c.is_alive()

    def test_submit_after_close_is_dropped(self, caplog):
        c = CoordinatorThread(name="closed")
        c.close()
        seen = []
        c.submit(lambda: seen.append(1))
        assert seen == []
        assert not c.is_alive()
        assert "is closed" in caplog.text

    def test_wait_idle_before_start(self, coordinator):
        assert coordinator.wait_idle(timeout=1) is True


class TestImmediateDispatcher:
    def test_runs_inline(self):
        d = ImmediateDispatcher()
        seen = []
        d.submit(lambda: seen.append(threading.get_ident()))
        assert seen == [threading.get_ident()]
        assert d.is_current()
        assert d.wait_idle()


class TestLoopDispatcher:
    def test_off_loop_calls_are_scheduled(self, loop_thread):
        store = EventStore(name="loop", dispatcher=LoopDispatcher(loop_thread))
        store.info("from main thread")
        assert store.flush(timeout=5)
        assert [e.message for e in store.events] == ["from main thread"]

    def test_on_loop_calls_run_inline(self, loop_thread):
        store = EventStore(name="loop", dispatcher=LoopDispatcher(loop_thread))

        async def log_and_count():
            store.info("inside loop")
            return len(store)

        future = asyncio.run_coroutine_threadsafe(log_and_count(), loop_thread)
        assert future.result(timeout=5) == 1

    def test_is_current_outside_loop(self, loop_thread):
        assert LoopDispatcher(loop_thread).is_current() is False

    def test_closed_loop_drops_work(self, caplog):
        loop = asyncio.new_event_loop()
        loop.close()
        store = EventStore(name="closed-loop", dispatcher=LoopDispatcher(loop))
        store.info("after shutdown")
        assert len(store) == 0
        assert "Event loop is closed" in caplog.text

    def test_wait_idle_on_closed_loop(self):
        loop = asyncio.new_event_loop()
        loop.close()
        assert LoopDispatcher(loop).wait_idle(timeout=1) is False


class TestBuildDispatcher:
    def test_thread(self):
        d = build_dispatcher("thread", name="built")
        assert isinstance(d, CoordinatorThread)
        assert d.name == "built"

    def test_immediate(self):
        assert isinstance(build_dispatcher("immediate"), ImmediateDispatcher)

    def test_unknown_falls_back_to_thread(self, caplog):
        with caplog.at_level(logging.WARNING):
            d = build_dispatcher("fibers")
        assert isinstance(d, CoordinatorThread)
        assert "Unknown dispatcher kind" in caplog.text
