"""
Extraction cycle orchestration and periodic scheduling.
"""

from .cycle import CycleExecutor, CycleResult
from .scheduler import ReportScheduler

__all__ = ["CycleExecutor", "CycleResult", "ReportScheduler"]
