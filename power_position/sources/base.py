"""Base class for trade sources."""

import asyncio
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from datetime import date

from ..data.models import Trade


class TradeSource(ABC):
    """Provider of the trades booked for a calendar date."""

    name: str = "trade_source"

    @abstractmethod
    def get_trades(self, trade_date: date) -> list[Trade]:
        """
        Fetch all trades for a date.

        Args:
            trade_date: Calendar date to extract

        Returns:
            Trades for the date, possibly empty

        Raises:
            TradeSourceError: If the provider cannot be reached
        """
        pass

    async def get_trades_async(self, trade_date: date) -> list[Trade]:
        """
        Non-blocking variant of ``get_trades``.

        The call runs on a daemon thread, so a provider that never returns
        is abandoned when the caller gives up and never holds the process
        open at exit.
        """
        future: Future = Future()

        def fetch() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                trades = self.get_trades(trade_date)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(trades)

        threading.Thread(
            target=fetch,
            name=f"{self.name}-fetch",
            daemon=True,
        ).start()
        return await asyncio.wrap_future(future)

    def close(self) -> None:
        """Release provider resources."""
        pass
