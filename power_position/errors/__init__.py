"""
Error classification system for the power position service.

Configuration errors are fatal at startup. Every other error is scoped to a
single extraction cycle: it is logged and the next scheduled tick retries.
"""

from .configuration import ConfigurationError
from .data_quality import (
    DataQualityError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    TradeSourceError,
    PersistenceError,
    CycleExecutionError,
)

__all__ = [
    # Configuration
    "ConfigurationError",
    # Data Quality Errors
    "DataQualityError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "TradeSourceError",
    "PersistenceError",
    "CycleExecutionError",
]
