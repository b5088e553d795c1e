"""
Mapping of trading periods onto local wall-clock labels.

The trading day starts at 23:00 local time: period 1 covers 23:00-00:00,
period 2 covers 00:00-01:00 and so on up to period 24 at 22:00. The day is
always 24 periods long; clock-change days are not special-cased.
"""

from collections.abc import Mapping
from datetime import timedelta

import structlog

logger = structlog.get_logger(__name__)

HOURS_IN_DAY = 24
START_HOUR = 23  # Trading day starts at 23:00
ONE_HOUR = timedelta(hours=1)


def _format_clock(clock: timedelta) -> str:
    hours, remainder = divmod(int(clock.total_seconds()), 3600)
    return f"{hours:02d}:{remainder // 60:02d}"


def map_to_local_time(positions: Mapping[int, float]) -> dict[str, float]:
    """
    Map aggregated per-period positions onto local time labels.

    The result always holds 24 entries, generated in trading-day order
    (23:00, 00:00, ..., 22:00). Periods absent from ``positions`` map to 0.0
    and indices outside 1..24 are ignored.

    Args:
        positions: Aggregated volume keyed by period index

    Returns:
        Volume keyed by ``HH:MM`` label, in generation order

    Raises:
        ValueError: If ``positions`` is None
    """
    if positions is None:
        raise ValueError("positions must not be None")

    logger.debug("Mapping positions to local time", position_count=len(positions))

    result: dict[str, float] = {}
    clock = timedelta(hours=START_HOUR)

    for index in range(1, HOURS_IN_DAY + 1):
        result[_format_clock(clock)] = float(positions.get(index, 0.0))

        clock += ONE_HOUR
        if clock.days > 0:
            clock = timedelta(0)

    logger.debug("Mapped positions to local time", mapped=result)
    logger.info("Mapped positions to local time", period_count=len(result))
    return result
