"""
Normalization of raw trade records into canonical Trade models.

Providers hand back either mappings or plain objects. Both shapes are
accepted: a trade exposes ``date`` and ``periods``, a period exposes
``period`` (or ``index``) and ``volume``. A trade whose periods cannot be
read is logged and skipped so one bad record does not fail the whole batch.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, Optional

import structlog

from ..errors import MalformedDataError
from .models import Period, Trade

logger = structlog.get_logger(__name__)

_PERIOD_INDEX_FIELDS = ("period", "index")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _parse_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw[:10])
        except ValueError as e:
            raise MalformedDataError(
                f"Invalid trade date: {raw}",
                raw_data=raw,
                expected_format="YYYY-MM-DD"
            ) from e
    raise MalformedDataError(
        "Trade date is missing or has an unsupported type",
        raw_data=repr(raw),
        expected_format="date, datetime or ISO string"
    )


def normalize_period(record: Any) -> Period:
    """
    Convert a raw period record into a Period.

    Raises:
        MalformedDataError: If the index or volume is missing or not numeric
    """
    index = None
    for name in _PERIOD_INDEX_FIELDS:
        index = _field(record, name)
        if index is not None:
            break

    volume = _field(record, "volume")
    if index is None or volume is None:
        raise MalformedDataError(
            "Period record requires a period index and a volume",
            raw_data=repr(record),
            expected_format="{period: int, volume: float}"
        )

    try:
        return Period(index=int(index), volume=float(volume))
    except (TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Period values are not numeric: {e}",
            raw_data=repr(record),
            expected_format="{period: int, volume: float}"
        ) from e


def normalize_trade(record: Any, default_date: Optional[date] = None) -> Trade:
    """
    Convert a raw trade record into a Trade.

    Args:
        record: Mapping or object exposing ``date`` and ``periods``
        default_date: Date used when the record carries none

    Raises:
        MalformedDataError: If the record cannot be interpreted
    """
    if isinstance(record, Trade):
        return record

    raw_date = _field(record, "date")
    trade_date = default_date if raw_date is None and default_date else _parse_date(raw_date)

    raw_periods = _field(record, "periods")
    if raw_periods is None:
        raw_periods = ()
    if isinstance(raw_periods, (str, bytes)) or not isinstance(raw_periods, Iterable):
        raise MalformedDataError(
            "Trade periods are not a sequence",
            raw_data=repr(raw_periods),
            expected_format="sequence of period records"
        )

    periods = tuple(normalize_period(p) for p in raw_periods)
    return Trade(date=trade_date, periods=periods)


def normalize_trades(records: Optional[Iterable[Any]],
                     default_date: Optional[date] = None) -> list[Trade]:
    """
    Convert raw trade records, skipping the ones that are malformed.

    Args:
        records: Raw trade records, ``None`` is treated as empty
        default_date: Date used for records that carry none

    Returns:
        Normalized trades in input order
    """
    if records is None:
        return []

    trades = []
    skipped = 0
    for position, record in enumerate(records):
        try:
            trades.append(normalize_trade(record, default_date))
        except MalformedDataError as e:
            skipped += 1
            logger.warning(
                "Skipping malformed trade record",
                position=position,
                error=str(e),
                raw_data=e.raw_data
            )

    if skipped:
        logger.info("Trade normalization completed with skipped records",
                    trade_count=len(trades), skipped=skipped)

    return trades
