"""
Aggregation of trade volumes per trading period.

Rounding rule: each period is summed with ``math.fsum``, which is exactly
rounded and therefore independent of trade order, and then rounded with the
built-in ``round(total, 2)``. That is round-half-to-even on the exact binary
value of the float: 0.125 becomes 0.12 and 0.375 becomes 0.38, while 2.675
becomes 2.67 because the stored double lies below the midpoint. Likewise
10.0 + 2.505 sums to the double just below 12.505 and reports as 12.5.
"""

import math
from collections import defaultdict
from collections.abc import Iterable

import structlog

from ..data.models import Trade
from .time_mapping import map_to_local_time

logger = structlog.get_logger(__name__)

VOLUME_DECIMALS = 2


def round_volume(value: float) -> float:
    """Round a volume to the reported precision."""
    return round(value, VOLUME_DECIMALS)


def calculate_aggregated_positions(trades: Iterable[Trade]) -> dict[int, float]:
    """
    Sum volumes per period index across all trades.

    Args:
        trades: Trades to aggregate, may be empty

    Returns:
        Rounded total volume keyed by period index

    Raises:
        ValueError: If ``trades`` is None
    """
    if trades is None:
        raise ValueError("trades must not be None")

    volumes: dict[int, list[float]] = defaultdict(list)
    trade_count = 0
    for trade in trades:
        trade_count += 1
        for period in trade.periods:
            volumes[period.index].append(period.volume)

    result = {index: round_volume(math.fsum(values)) for index, values in volumes.items()}

    logger.debug("Aggregated volumes per period",
                 trade_count=trade_count,
                 periods=dict(sorted(result.items())))
    logger.info("Calculated aggregated positions", period_count=len(result))
    return result


def calculate_aggregated_volumes(trades: Iterable[Trade]) -> dict[str, float]:
    """
    Aggregate trades and map the result onto local time labels.

    Args:
        trades: Trades to aggregate

    Returns:
        24 volumes keyed by ``HH:MM`` label

    Raises:
        ValueError: If ``trades`` is None
    """
    if trades is None:
        raise ValueError("trades must not be None")

    positions = calculate_aggregated_positions(trades)
    return map_to_local_time(positions)
