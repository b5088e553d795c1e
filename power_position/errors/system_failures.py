"""
System failure error classifications.

Each of these fails the current extraction cycle only. The scheduler logs
them and the next tick acts as the retry.
"""

from datetime import date
from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for failures of an external system or resource."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TradeSourceError(SystemFailureError):
    """Trade source unreachable, raised, or did not answer in time."""

    def __init__(self, message: str, source_name: Optional[str] = None,
                 report_date: Optional[date] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source_name = source_name
        self.report_date = report_date


class PersistenceError(SystemFailureError):
    """Directory or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class CycleExecutionError(SystemFailureError):
    """One extraction cycle failed at the given stage."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 report_date: Optional[date] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.stage = stage
        self.report_date = report_date
