"""
Canonical data models for power trades.

Trades are immutable once received from the trade source and are owned by a
single extraction cycle.
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Period:
    """Volume traded in one trading period."""
    index: int         # Trading period, 1..24 on a regular day (not clamped)
    volume: float      # Traded volume, may be negative for sell trades


@dataclass(frozen=True)
class Trade:
    """A power trade with its per-period volumes."""
    date: date
    periods: tuple[Period, ...] = field(default_factory=tuple)
