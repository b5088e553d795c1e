"""
Time helpers for report dates and report file names.

The trade source is queried by UTC calendar date while report files are
named after local wall-clock time, so both clocks are read here.
"""

from datetime import date, datetime, timezone
from typing import Optional

REPORT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M"


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def local_now() -> datetime:
    """Current local wall-clock time (naive)."""
    return datetime.now()


def format_report_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment for use in a report file name.

    Args:
        moment: Time to format, defaults to local wall-clock now

    Returns:
        Timestamp string such as ``20240101_2359``
    """
    if moment is None:
        moment = local_now()

    return moment.strftime(REPORT_TIMESTAMP_FORMAT)
