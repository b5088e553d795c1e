"""
Process bootstrap for the power position service.

Loads and validates settings, configures logging, wires the trade source,
cycle executor and scheduler, then runs until SIGINT/SIGTERM.
"""

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import AppSettings
from .config.loader import ConfigLoader
from .errors import ConfigurationError, CycleExecutionError
from .logging.config import configure_logging
from .service.cycle import CycleExecutor
from .service.scheduler import ReportScheduler
from .sources import create_trade_source

APP_NAME = "PowerPositionService"

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="power-position",
        description="Generate intraday power position reports on a fixed interval.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to settings.yaml")
    parser.add_argument("--output-dir", default=None,
                        help="Directory receiving the CSV reports")
    parser.add_argument("--interval", type=float, default=None,
                        help="Minutes between extraction cycles")
    parser.add_argument("--source", default=None,
                        help="Registered trade source name")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--json-logs", action="store_true",
                        help="Emit JSON log lines")
    parser.add_argument("--once", action="store_true",
                        help="Run a single cycle and exit")
    return parser


def cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed arguments into a configuration override mapping."""
    overrides: dict[str, Any] = {}
    if args.output_dir is not None:
        overrides.setdefault("output", {})["output_dir"] = args.output_dir
    if args.interval is not None:
        overrides.setdefault("scheduler", {})["interval_minutes"] = args.interval
    if args.source is not None:
        overrides.setdefault("source", {})["name"] = args.source
    if args.log_level is not None:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.json_logs:
        overrides.setdefault("logging", {})["format_json"] = True
    return overrides


def build_scheduler(settings: AppSettings) -> ReportScheduler:
    """Wire source, executor and scheduler from validated settings."""
    source = create_trade_source(settings.source.name, **settings.source.options)
    executor = CycleExecutor(
        source=source,
        output_dir=settings.output.output_dir,
        source_timeout_seconds=settings.source.timeout_seconds,
    )
    return ReportScheduler(
        executor=executor,
        interval_minutes=settings.scheduler.interval_minutes,
        shutdown_timeout_seconds=settings.scheduler.shutdown_timeout_seconds,
        shutdown_poll_seconds=settings.scheduler.shutdown_poll_seconds,
    )


def run_service(scheduler: ReportScheduler, stop_requested: threading.Event) -> None:
    """Run the scheduler until ``stop_requested`` is set, then shut down."""
    scheduler.start()
    try:
        # Short waits keep the main thread responsive to signals
        while not stop_requested.wait(1.0):
            pass
    finally:
        scheduler.stop()
        scheduler.executor.source.close()


def _install_signal_handlers(stop_requested: threading.Event) -> None:
    def _handle(signum: int, _frame: Any) -> None:
        logger.info("Stop signal received", signal=signal.Signals(signum).name)
        stop_requested.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: Optional[list[str]] = None) -> int:
    """Service entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigLoader.create(args.config).load(cli_overrides(args))
    except ConfigurationError as e:
        configure_logging(level="INFO")
        logger.critical("Invalid configuration, service not started", error=str(e))
        return 1

    configure_logging(
        level=settings.logging.level,
        format_json=settings.logging.format_json,
        include_timestamp=settings.logging.include_timestamp,
        include_caller=settings.logging.include_caller,
    )
    logger.info(f"===== {APP_NAME} Starting =====")

    try:
        scheduler = build_scheduler(settings)
    except ConfigurationError as e:
        logger.critical("Invalid configuration, service not started", error=str(e))
        logger.info(f"===== {APP_NAME} Stopped =====")
        return 1

    logger.info("Application configured",
                output_dir=settings.output.output_dir,
                interval_minutes=settings.scheduler.interval_minutes,
                source=settings.source.name)

    try:
        if args.once:
            try:
                scheduler.executor.run_cycle()
            except CycleExecutionError:
                return 1
            finally:
                scheduler.executor.source.close()
            return 0

        stop_requested = threading.Event()
        _install_signal_handlers(stop_requested)
        run_service(scheduler, stop_requested)
        return 0
    finally:
        logger.info(f"===== {APP_NAME} Stopped =====")


if __name__ == "__main__":
    sys.exit(main())
