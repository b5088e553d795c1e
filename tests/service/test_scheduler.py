"""Tests for the periodic scheduler and its reentrancy guard."""

import threading
import time

import pytest

from power_position.errors import ConfigurationError, CycleExecutionError
from power_position.service.scheduler import ReportScheduler


class RecordingExecutor:
    """Counts cycles and signals each one."""

    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail
        self.called = threading.Event()
        self._lock = threading.Lock()

    def run_cycle(self):
        with self._lock:
            self.calls += 1
        self.called.set()
        if self.fail:
            raise CycleExecutionError("cycle failed", stage="fetch")


class BlockingExecutor:
    """Keeps a cycle in flight until released."""

    def __init__(self):
        self.calls = 0
        self.entered = threading.Event()
        self.release = threading.Event()

    def run_cycle(self):
        self.calls += 1
        self.entered.set()
        self.release.wait(timeout=10)


def wait_until(predicate, timeout=5.0, step=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


class TestSchedulerConstruction:
    """Test suite for interval validation."""

    @pytest.mark.parametrize("interval", [0, -1, -0.5, True, None, "5"])
    def test_invalid_interval(self, interval):
        with pytest.raises(ConfigurationError):
            ReportScheduler(RecordingExecutor(), interval_minutes=interval)

    def test_valid_interval(self):
        scheduler = ReportScheduler(RecordingExecutor(), interval_minutes=0.5)
        assert scheduler.interval_seconds == 30.0
        assert not scheduler.is_running
        assert not scheduler.is_started

    def test_none_executor(self):
        with pytest.raises(ValueError):
            ReportScheduler(None, interval_minutes=1)


class TestTrigger:
    """Test suite for a single tick."""

    def test_runs_cycle(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=1)

        assert scheduler.trigger() is True
        assert executor.calls == 1
        assert not scheduler.is_running
        assert scheduler.cycles_started == 1

    def test_cycle_failure_is_not_propagated(self):
        """A failed cycle is logged and the flag is cleared."""
        executor = RecordingExecutor(fail=True)
        scheduler = ReportScheduler(executor, interval_minutes=1)

        assert scheduler.trigger() is True
        assert scheduler.cycles_failed == 1
        assert not scheduler.is_running

        assert scheduler.trigger() is True
        assert executor.calls == 2

    def test_unexpected_exception_is_not_propagated(self):
        class Exploding:
            def run_cycle(self):
                raise RuntimeError("unexpected")

        scheduler = ReportScheduler(Exploding(), interval_minutes=1)

        assert scheduler.trigger() is True
        assert scheduler.cycles_failed == 1
        assert not scheduler.is_running

    def test_tick_skipped_while_cycle_in_flight(self):
        """A concurrent tick is dropped, not queued."""
        executor = BlockingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=1)

        worker = threading.Thread(target=scheduler.trigger)
        worker.start()
        assert executor.entered.wait(timeout=5)
        assert scheduler.is_running

        assert scheduler.trigger() is False
        assert executor.calls == 1

        executor.release.set()
        worker.join(timeout=5)

        assert not scheduler.is_running
        assert scheduler.ticks_skipped == 1
        # The skipped tick is never replayed
        assert executor.calls == 1

    def test_concurrent_ticks_run_one_cycle(self):
        """Many simultaneous ticks start exactly one cycle."""
        executor = BlockingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=1)
        barrier = threading.Barrier(8)
        results = []

        def tick():
            barrier.wait()
            results.append(scheduler.trigger())

        threads = [threading.Thread(target=tick) for _ in range(8)]
        for t in threads:
            t.start()

        assert executor.entered.wait(timeout=5)
        assert wait_until(lambda: len(results) == 7)
        executor.release.set()
        for t in threads:
            t.join(timeout=5)

        assert executor.calls == 1
        assert results.count(True) == 1
        assert results.count(False) == 7


class TestTimer:
    """Test suite for periodic firing and shutdown."""

    def test_first_tick_is_immediate(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60)

        scheduler.start()
        try:
            assert executor.called.wait(timeout=2)
        finally:
            assert scheduler.stop() is True

        assert executor.calls == 1

    def test_fires_every_interval(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=0.001)  # 60 ms

        scheduler.start()
        try:
            assert wait_until(lambda: executor.calls >= 3)
        finally:
            scheduler.stop()

    def test_no_ticks_after_stop(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=0.001)

        scheduler.start()
        assert wait_until(lambda: executor.calls >= 1)
        assert scheduler.stop() is True
        assert not scheduler.is_running
        calls = executor.calls

        time.sleep(0.3)
        assert executor.calls == calls
        assert not scheduler.is_started

    def test_trigger_after_stop_is_skipped(self):
        """A worker that reaches trigger after stop never starts a cycle."""
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60)

        assert scheduler.stop() is True

        assert scheduler.trigger() is False
        assert executor.calls == 0
        assert scheduler.cycles_started == 0
        assert scheduler.ticks_skipped == 1
        assert not scheduler.is_running

    def test_restart_after_stop_runs_cycles(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60)
        scheduler.stop()

        scheduler.start()
        try:
            assert executor.called.wait(timeout=2)
        finally:
            assert scheduler.stop() is True
        assert executor.calls == 1

    def test_start_twice_keeps_one_timer(self):
        executor = RecordingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60)

        scheduler.start()
        scheduler.start()
        try:
            assert executor.called.wait(timeout=2)
            time.sleep(0.1)
            assert executor.calls == 1
        finally:
            scheduler.stop()

    def test_stop_waits_for_in_flight_cycle(self):
        executor = BlockingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60,
                                    shutdown_timeout_seconds=5,
                                    shutdown_poll_seconds=0.01)
        scheduler.start()
        assert executor.entered.wait(timeout=2)

        threading.Timer(0.2, executor.release.set).start()

        assert scheduler.stop() is True
        assert not scheduler.is_running

    def test_stop_gives_up_after_timeout(self):
        executor = BlockingExecutor()
        scheduler = ReportScheduler(executor, interval_minutes=60,
                                    shutdown_timeout_seconds=0.2,
                                    shutdown_poll_seconds=0.01)
        scheduler.start()
        assert executor.entered.wait(timeout=2)

        started = time.monotonic()
        try:
            assert scheduler.stop() is False
            assert time.monotonic() - started < 2
            assert scheduler.is_running
        finally:
            executor.release.set()

        assert wait_until(lambda: not scheduler.is_running)

    def test_stop_without_start(self):
        scheduler = ReportScheduler(RecordingExecutor(), interval_minutes=1)
        assert scheduler.stop() is True
