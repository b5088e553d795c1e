"""Integration tests for the complete scheduled pipeline."""

import threading
import time

from power_position.reporting.writer import CSV_HEADER, read_report
from power_position.service.cycle import CycleExecutor
from power_position.service.scheduler import ReportScheduler
from power_position.sources import RecordTradeSource

from conftest import REPORT_DATE, BlockingTradeSource, make_trade


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestFullPipeline:
    """Scheduler → executor → source → aggregation → report."""

    def test_scheduled_cycle_writes_report(self, tmp_path):
        records = [
            {"periods": [{"period": 1, "volume": 10.0}, {"period": 2, "volume": 5.0}]},
            {"periods": [{"period": 1, "volume": 2.505}]},
        ]
        source = RecordTradeSource(lambda d: records)
        executor = CycleExecutor(source, tmp_path, today=lambda: REPORT_DATE)
        scheduler = ReportScheduler(executor, interval_minutes=60)

        scheduler.start()
        try:
            assert wait_until(lambda: list(tmp_path.glob("PowerPosition_*.csv"))
                              and not scheduler.is_running)
        finally:
            scheduler.stop()

        report_path = next(tmp_path.glob("PowerPosition_*.csv"))
        lines = report_path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert len(lines) == 25
        assert "23:00,12.50" in lines
        assert "00:00,5.00" in lines
        assert lines[1] == "00:00,5.00"
        assert lines[-1] == "23:00,12.50"

    def test_shutdown_during_cycle_leaves_no_partial_report(self, tmp_path):
        """The report is either complete or absent after a timed-out stop."""
        source = BlockingTradeSource([make_trade({i: 1.0 for i in range(1, 25)})])
        executor = CycleExecutor(source, tmp_path, today=lambda: REPORT_DATE)
        scheduler = ReportScheduler(executor, interval_minutes=60,
                                    shutdown_timeout_seconds=0.1,
                                    shutdown_poll_seconds=0.01)

        scheduler.start()
        assert source.entered.wait(timeout=5)

        assert scheduler.stop() is False
        assert list(tmp_path.iterdir()) == []

        source.release.set()
        assert wait_until(lambda: not scheduler.is_running)

        reports = list(tmp_path.iterdir())
        assert len(reports) == 1
        assert len(read_report(reports[0])) == 24

    def test_reentrant_tick_is_skipped_end_to_end(self, tmp_path):
        source = BlockingTradeSource([])
        executor = CycleExecutor(source, tmp_path, today=lambda: REPORT_DATE)
        scheduler = ReportScheduler(executor, interval_minutes=60)

        worker = threading.Thread(target=scheduler.trigger)
        worker.start()
        assert source.entered.wait(timeout=5)

        assert scheduler.trigger() is False

        source.release.set()
        worker.join(timeout=5)

        assert source.calls == 1
        assert len(list(tmp_path.glob("PowerPosition_*.csv"))) == 1
