"""
Analytics module for PierWatch.

Turns filtered, deduplicated flights into the aggregate views the
dashboard charts: per-pier utilization, per-aircraft-type delay and
volume, and hourly density per pier. Arithmetic uses NumPy.
"""

from pierwatch.analytics.aggregation import aggregate
from pierwatch.analytics.aircraft_stats import compute_aircraft_statistics
from pierwatch.analytics.delay import calculate_delay_minutes
from pierwatch.analytics.pier_stats import (
    compute_hourly_density,
    compute_pier_statistics,
    derive_pier_key,
    peak_hour,
)

__all__ = [
    'aggregate',
    'compute_aircraft_statistics',
    'calculate_delay_minutes',
    'compute_hourly_density',
    'compute_pier_statistics',
    'derive_pier_key',
    'peak_hour',
]
