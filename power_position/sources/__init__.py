"""
Trade source implementations and the startup registry.

The source used by the service is selected by name from configuration.
"""

from collections.abc import Callable
from typing import Any

from ..errors import ConfigurationError
from .base import TradeSource
from .records import RecordTradeSource
from .simulated import SimulatedTradeSource

TRADE_SOURCES: dict[str, Callable[..., TradeSource]] = {
    SimulatedTradeSource.name: SimulatedTradeSource,
}


def create_trade_source(name: str, **options: Any) -> TradeSource:
    """
    Instantiate a registered trade source.

    Raises:
        ConfigurationError: If the name is unknown or the options are rejected
    """
    factory = TRADE_SOURCES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown trade source '{name}'",
            errors=[f"available: {', '.join(sorted(TRADE_SOURCES))}"]
        )

    try:
        return factory(**options)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid options for trade source '{name}': {e}") from e


__all__ = [
    "TRADE_SOURCES",
    "TradeSource",
    "RecordTradeSource",
    "SimulatedTradeSource",
    "create_trade_source",
]
