"""
Trade source adapting a provider callable that returns raw records.

The callable may return mappings or plain objects; they are normalized into
Trade models and malformed trades are skipped.
"""

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

import structlog

from ..data.models import Trade
from ..data.normalizer import normalize_trades
from ..errors import TradeSourceError
from .base import TradeSource

logger = structlog.get_logger(__name__)


class RecordTradeSource(TradeSource):
    """Wraps ``fetch(date) -> iterable of raw trade records``."""

    name = "records"

    def __init__(self, fetch: Callable[[date], Iterable[Any]], name: str = "records"):
        if fetch is None:
            raise ValueError("fetch callable must not be None")
        self._fetch = fetch
        self.name = name

    def get_trades(self, trade_date: date) -> list[Trade]:
        try:
            records = self._fetch(trade_date)
        except TradeSourceError:
            raise
        except Exception as e:
            logger.error("Error getting trades", source=self.name,
                         trade_date=str(trade_date), error=str(e))
            raise TradeSourceError(
                f"Error getting trades: {e}",
                source_name=self.name,
                report_date=trade_date
            ) from e

        return normalize_trades(records, default_date=trade_date)
