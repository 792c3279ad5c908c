"""
Data models for PierWatch.

Plain dataclasses: the pipeline is stateless and keeps nothing in a
database.
"""

from pierwatch.models.flight import (
    AircraftType,
    FlightDirection,
    FlightRecord,
    parse_timestamp,
)
from pierwatch.models.statistics import (
    AircraftCategory,
    AircraftStatistic,
    FlightAggregates,
    HourlyBucket,
    PierStatistic,
    PierStatus,
    ResultStatus,
    SchengenType,
    StatsResult,
)

__all__ = [
    'AircraftType',
    'FlightDirection',
    'FlightRecord',
    'parse_timestamp',
    'AircraftCategory',
    'AircraftStatistic',
    'FlightAggregates',
    'HourlyBucket',
    'PierStatistic',
    'PierStatus',
    'ResultStatus',
    'SchengenType',
    'StatsResult',
]
