"""
Power Position Service - Scheduled Intraday Power Position Reports

Periodically extracts the current day's power trades, aggregates traded
volume per trading period, maps periods onto local wall-clock time and
writes the result as a CSV report.
"""

__version__ = "0.1.0"
__author__ = "Power Position Team"
