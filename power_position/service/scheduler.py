"""
Periodic scheduler with a skip-don't-queue reentrancy guard.

A timer thread fires immediately and then once per interval. Each tick runs
on its own worker thread and attempts to take the ``running`` flag; a tick
that finds a cycle already in flight is dropped and never replayed.
"""

import threading
import time
from typing import Optional

from ..errors import ConfigurationError
from ..logging.config import get_cycle_logger
from .cycle import CycleExecutor

logger = get_cycle_logger(__name__)


class ReportScheduler:
    """Drives CycleExecutor on a fixed interval, one cycle at a time."""

    def __init__(
        self,
        executor: CycleExecutor,
        interval_minutes: float,
        shutdown_timeout_seconds: float = 30.0,
        shutdown_poll_seconds: float = 0.1,
    ) -> None:
        if executor is None:
            raise ValueError("executor must not be None")
        if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, (int, float)) \
                or interval_minutes <= 0:
            raise ConfigurationError(
                f"Extract interval must be greater than zero, got {interval_minutes!r}"
            )

        self.executor = executor
        self.interval_minutes = interval_minutes
        self.interval_seconds = float(interval_minutes) * 60.0
        self.shutdown_timeout_seconds = shutdown_timeout_seconds
        self.shutdown_poll_seconds = shutdown_poll_seconds

        self._lock = threading.Lock()
        self._running = False
        self._stop_event = threading.Event()
        self._timer_thread: Optional[threading.Thread] = None

        self.cycles_started = 0
        self.cycles_failed = 0
        self.ticks_skipped = 0

    @property
    def is_running(self) -> bool:
        """True while a cycle is in flight."""
        return self._running

    @property
    def is_started(self) -> bool:
        """True while the timer is active."""
        return self._timer_thread is not None and self._timer_thread.is_alive()

    def start(self) -> None:
        """Start the timer. The first tick fires immediately."""
        if self.is_started:
            logger.warning("Scheduler already started")
            return

        self._stop_event.clear()
        self._timer_thread = threading.Thread(
            target=self._timer_loop,
            name="power-position-timer",
            daemon=True,
        )
        self._timer_thread.start()
        logger.info("Power position scheduler started",
                    interval_minutes=self.interval_minutes)

    def _timer_loop(self) -> None:
        while not self._stop_event.is_set():
            worker = threading.Thread(
                target=self.trigger,
                name="power-position-cycle",
                daemon=True,
            )
            worker.start()
            if self._stop_event.wait(self.interval_seconds):
                break

    def trigger(self) -> bool:
        """
        Run one cycle unless another is already in flight.

        Cycle failures are logged and never propagate.

        Returns:
            True if a cycle ran, False if the tick was skipped because a
            cycle is in flight or the scheduler is stopping
        """
        if self._running:
            logger.debug("Previous execution is still running. Skipping this interval.")
            self._record_skip()
            return False

        with self._lock:
            if self._stop_event.is_set():
                logger.debug("Scheduler is stopping. Skipping this interval.")
                self.ticks_skipped += 1
                return False
            if self._running:
                logger.debug("Previous execution is still running (double-checked). "
                             "Skipping this interval.")
                self.ticks_skipped += 1
                return False
            self._running = True
            self.cycles_started += 1

        try:
            self.executor.run_cycle()
        except Exception as e:
            with self._lock:
                self.cycles_failed += 1
            logger.error("Power position cycle failed, retrying on next tick",
                         error=str(e),
                         stage=getattr(e, "stage", None))
        finally:
            with self._lock:
                self._running = False

        return True

    def _record_skip(self) -> None:
        with self._lock:
            self.ticks_skipped += 1

    def stop(self) -> bool:
        """
        Stop the timer and wait, bounded, for an in-flight cycle.

        Returns:
            True if no cycle was left running, False on timeout
        """
        logger.info("Stopping power position scheduler...")

        self._stop_event.set()
        timer = self._timer_thread
        if timer is not None and timer is not threading.current_thread():
            timer.join(timeout=self.shutdown_poll_seconds * 10)
        self._timer_thread = None

        # A trigger past its stop check has already set the flag
        with self._lock:
            in_flight = self._running

        if in_flight:
            logger.info("Waiting for current operation to complete...")
            deadline = time.monotonic() + self.shutdown_timeout_seconds
            while self._running and time.monotonic() < deadline:
                time.sleep(self.shutdown_poll_seconds)

            if self._running:
                logger.warning("Timed out waiting for operation to complete",
                               timeout_seconds=self.shutdown_timeout_seconds)
                return False

        logger.info("Power position scheduler stopped",
                    cycles_started=self.cycles_started,
                    cycles_failed=self.cycles_failed,
                    ticks_skipped=self.ticks_skipped)
        return True
