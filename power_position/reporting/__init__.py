"""
Atomic CSV report persistence.
"""

from .writer import (
    CSV_HEADER,
    allocate_report_path,
    read_report,
    write_report,
)

__all__ = ["CSV_HEADER", "allocate_report_path", "read_report", "write_report"]
