#!/usr/bin/env python3
"""
Basic Usage Example - Power Position Reports

This script runs one extraction cycle against an in-memory trade source and
prints the resulting CSV report. It shows how to:
- Adapt raw provider records with RecordTradeSource
- Run a cycle with CycleExecutor
- Read the report back

Run: python examples/basic_usage.py
"""

import tempfile
from datetime import date
from typing import Any, Dict, List

from power_position.logging.config import configure_logging
from power_position.reporting.writer import read_report
from power_position.service.cycle import CycleExecutor
from power_position.sources import RecordTradeSource


def fetch_trades(trade_date: date) -> List[Dict[str, Any]]:
    """Raw trades as a provider would return them."""
    return [
        {
            "date": trade_date.isoformat(),
            "periods": [{"period": p, "volume": 100.0} for p in range(1, 25)],
        },
        {
            "date": trade_date.isoformat(),
            "periods": [{"period": p, "volume": 50.0 if p <= 11 else -20.0}
                        for p in range(1, 25)],
        },
    ]


def main() -> None:
    configure_logging(level="WARNING")

    with tempfile.TemporaryDirectory() as output_dir:
        executor = CycleExecutor(RecordTradeSource(fetch_trades), output_dir)
        result = executor.run_cycle()

        print(f"📄 Report written to {result.output_path.name} "
              f"({result.trade_count} trades for {result.report_date})")
        print(result.output_path.read_text(encoding="utf-8"))

        totals = read_report(result.output_path)
        print(f"📊 Day total: {sum(totals.values()):.2f}")


if __name__ == "__main__":
    main()
