"""Pytest configuration and shared fixtures."""

import threading
from datetime import date
from typing import List

import pytest

from power_position.data.models import Period, Trade
from power_position.sources.base import TradeSource

REPORT_DATE = date(2024, 3, 15)


def make_trade(volumes: dict, trade_date: date = REPORT_DATE) -> Trade:
    """Build a trade from a ``{period_index: volume}`` mapping."""
    return Trade(
        date=trade_date,
        periods=tuple(Period(index=i, volume=v) for i, v in volumes.items()),
    )


class StaticTradeSource(TradeSource):
    """Returns the same trades on every call and records the dates asked for."""

    name = "static"

    def __init__(self, trades: List[Trade]):
        self.trades = list(trades)
        self.requested_dates: List[date] = []

    def get_trades(self, trade_date: date) -> List[Trade]:
        self.requested_dates.append(trade_date)
        return list(self.trades)


class BlockingTradeSource(TradeSource):
    """Holds each fetch until released, to keep a cycle in flight."""

    name = "blocking"

    def __init__(self, trades: List[Trade]):
        self.trades = list(trades)
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def get_trades(self, trade_date: date) -> List[Trade]:
        self.calls += 1
        self.entered.set()
        self.release.wait(timeout=10)
        return list(self.trades)


@pytest.fixture
def report_date() -> date:
    """Fixed extraction date."""
    return REPORT_DATE


@pytest.fixture
def sample_trades() -> List[Trade]:
    """Two trades covering all 24 periods."""
    return [
        make_trade({i: 100.0 for i in range(1, 25)}),
        make_trade({i: (50.0 if i <= 11 else -20.0) for i in range(1, 25)}),
    ]


@pytest.fixture
def static_source(sample_trades) -> StaticTradeSource:
    """Trade source returning ``sample_trades``."""
    return StaticTradeSource(sample_trades)
