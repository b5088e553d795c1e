"""
Single extraction cycle: fetch, aggregate, persist.

Orchestrates one run of the pipeline:
Trade Source → Aggregation → Time Mapping → Report Writer
"""

import asyncio
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Union

from ..data.models import Trade
from ..errors import CycleExecutionError, TradeSourceError
from ..logging.config import get_cycle_logger
from ..positions.aggregation import calculate_aggregated_volumes
from ..reporting.writer import allocate_report_path, write_report
from ..sources.base import TradeSource
from ..utils.time import utc_today

logger = get_cycle_logger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Outcome of a successful extraction cycle."""
    report_date: date
    trade_count: int
    output_path: Path
    duration_seconds: float


class CycleExecutor:
    """
    Runs one extraction cycle for the current UTC date.

    Any failure is logged and re-raised as CycleExecutionError naming the
    stage that failed. The executor holds no state between cycles.
    """

    def __init__(
        self,
        source: TradeSource,
        output_dir: Union[str, os.PathLike],
        source_timeout_seconds: float = 60.0,
        today: Callable[[], date] = utc_today,
    ) -> None:
        if source is None:
            raise ValueError("source must not be None")
        if output_dir is None or not str(output_dir).strip():
            raise ValueError("output_dir must not be blank")
        if source_timeout_seconds <= 0:
            raise ValueError("source_timeout_seconds must be greater than zero")

        self.source = source
        self.output_dir = Path(output_dir)
        self.source_timeout_seconds = source_timeout_seconds
        self._today = today

    def run_cycle(self) -> CycleResult:
        """
        Extract, aggregate and write the report for today.

        Returns:
            Summary of the written report

        Raises:
            CycleExecutionError: If any stage fails
        """
        started = time.monotonic()
        report_date = self._today()
        stage = "fetch"

        try:
            logger.info("Starting power position report generation",
                        report_date=str(report_date))

            logger.debug("Retrieving power trades", report_date=str(report_date),
                         source=self.source.name)
            trades = self._fetch_trades(report_date)
            logger.info("Retrieved power trades", report_date=str(report_date),
                        trade_count=len(trades))

            stage = "aggregate"
            volumes = calculate_aggregated_volumes(trades)

            stage = "allocate"
            output_path = allocate_report_path(self.output_dir)

            stage = "write"
            logger.info("Writing aggregated positions", output_path=str(output_path))
            write_report(output_path, volumes)

        except Exception as e:
            logger.error("Error generating power position report",
                         report_date=str(report_date), stage=stage,
                         error=str(e), exc_info=True)
            raise CycleExecutionError(
                f"Power position cycle failed during {stage}: {e}",
                stage=stage,
                report_date=report_date
            ) from e

        result = CycleResult(
            report_date=report_date,
            trade_count=len(trades),
            output_path=output_path,
            duration_seconds=time.monotonic() - started,
        )
        logger.info("Successfully generated power position report",
                    output_path=str(output_path),
                    duration_seconds=round(result.duration_seconds, 3))
        return result

    def _fetch_trades(self, report_date: date) -> list[Trade]:
        # The fetch runs on a daemon thread; on timeout it is left behind
        loop = asyncio.new_event_loop()
        try:
            trades = loop.run_until_complete(asyncio.wait_for(
                self.source.get_trades_async(report_date),
                timeout=self.source_timeout_seconds,
            ))
        except asyncio.TimeoutError as e:
            raise TradeSourceError(
                f"Trade source did not respond within {self.source_timeout_seconds}s",
                source_name=self.source.name,
                report_date=report_date
            ) from e
        finally:
            loop.close()

        if trades is None:
            raise TradeSourceError(
                "Trade source returned no trade collection",
                source_name=self.source.name,
                report_date=report_date
            )
        return list(trades)
