"""
Simulated trade source.

Generates random 24-period trades so the service can run without a real
provider. Failures and latency can be injected to exercise the cycle error
handling and the scheduler's reentrancy guard.
"""

import random
import threading
import time
from datetime import date
from typing import Optional

import structlog

from ..data.models import Period, Trade
from ..errors import TradeSourceError
from .base import TradeSource

logger = structlog.get_logger(__name__)

PERIODS_PER_TRADE = 24


class SimulatedTradeSource(TradeSource):
    """Random trade generator standing in for the trading system."""

    name = "simulated"

    def __init__(
        self,
        trade_count: int = 2,
        seed: Optional[int] = None,
        failure_rate: float = 0.0,
        latency_seconds: float = 0.0,
        max_volume: float = 200.0,
    ):
        if trade_count < 0:
            raise ValueError("trade_count must not be negative")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        if latency_seconds < 0:
            raise ValueError("latency_seconds must not be negative")

        self.trade_count = trade_count
        self.failure_rate = failure_rate
        self.latency_seconds = latency_seconds
        self.max_volume = max_volume
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def get_trades(self, trade_date: date) -> list[Trade]:
        if self.latency_seconds:
            time.sleep(self.latency_seconds)

        with self._lock:
            if self._random.random() < self.failure_rate:
                logger.warning("Simulated trade source failure", trade_date=str(trade_date))
                raise TradeSourceError(
                    "Simulated trading system failure",
                    source_name=self.name,
                    report_date=trade_date
                )

            trades = [self._generate_trade(trade_date) for _ in range(self.trade_count)]

        logger.debug("Generated simulated trades", trade_date=str(trade_date),
                     trade_count=len(trades))
        return trades

    def _generate_trade(self, trade_date: date) -> Trade:
        periods = tuple(
            Period(
                index=index,
                volume=round(self._random.uniform(-self.max_volume, self.max_volume), 3)
            )
            for index in range(1, PERIODS_PER_TRADE + 1)
        )
        return Trade(date=trade_date, periods=periods)
