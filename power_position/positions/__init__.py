"""
Position aggregation and trading-day time mapping.
"""

from .aggregation import calculate_aggregated_positions, calculate_aggregated_volumes
from .time_mapping import map_to_local_time

__all__ = [
    "calculate_aggregated_positions",
    "calculate_aggregated_volumes",
    "map_to_local_time",
]
