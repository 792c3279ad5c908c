"""
Derived statistics produced by the aggregation stage.

Every value here is recomputed in full on each aggregation pass; nothing
is updated incrementally. Numeric fields are Optional because the
placeholder set served during an upstream outage has no numbers at all
(rendered as "n/v" by the dashboard).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict


class PierStatus(str, Enum):
    """Utilization tier of a pier."""
    LOW = 'Low'
    MEDIUM = 'Medium'
    HIGH = 'High'


class SchengenType(str, Enum):
    SCHENGEN = 'Schengen'
    NON_SCHENGEN = 'Non-Schengen'


class AircraftCategory(str, Enum):
    NARROW_BODY = 'Narrow-body'
    WIDE_BODY = 'Wide-body'
    REGIONAL = 'Regional'
    UNKNOWN = 'Unknown'


class ResultStatus(str, Enum):
    """
    Outcome of a fetch-and-aggregate call.

    DEGRADED means the upstream failed and placeholder statistics were
    served instead; SUCCESS with zero flights means there simply was no data.
    """
    SUCCESS = 'success'
    DEGRADED = 'degraded'
    FAILURE = 'failure'


@dataclass
class PierStatistic:
    """Flight counts and utilization for one pier (or D sub-pier)."""
    pier: str
    flights: Optional[int]
    arrivals: Optional[int]
    departures: Optional[int]
    utilization: Optional[int]
    status: PierStatus
    type: SchengenType
    purpose: str = 'Mixed operations'

    def to_dict(self) -> dict:
        return {
            'pier': self.pier,
            'flights': self.flights,
            'arrivals': self.arrivals,
            'departures': self.departures,
            'utilization': self.utilization,
            'status': self.status.value,
            'type': self.type.value,
            'purpose': self.purpose,
        }


@dataclass
class AircraftStatistic:
    """Volume and delay for one aircraft type code."""
    type_code: str
    flights: Optional[int]
    average_delay: Optional[float]
    category: AircraftCategory
    manufacturer: str
    capacity: Optional[int]
    description: Optional[str] = None
    destinations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'type': self.type_code,
            'description': self.description,
            'flights': self.flights,
            'average_delay': self.average_delay,
            'category': self.category.value,
            'manufacturer': self.manufacturer,
            'capacity': self.capacity,
            'destinations': list(self.destinations),
        }


@dataclass
class HourlyBucket:
    """Flight count for one hour slot; intensity is count / busiest slot."""
    hour: str
    flights: int
    intensity: float

    def to_dict(self) -> dict:
        return {
            'hour': self.hour,
            'flights': self.flights,
            'intensity': self.intensity,
        }


@dataclass
class FlightAggregates:
    """Everything the dashboard charts need from one aggregation pass."""
    pier_stats: List[PierStatistic] = field(default_factory=list)
    aircraft_stats: List[AircraftStatistic] = field(default_factory=list)
    hourly_density: Dict[str, List[HourlyBucket]] = field(default_factory=dict)
    total_flights: Optional[int] = 0

    def to_dict(self) -> dict:
        return {
            'piers': [p.to_dict() for p in self.pier_stats],
            'aircraft': [a.to_dict() for a in self.aircraft_stats],
            'hourly_density': {
                pier: [b.to_dict() for b in buckets]
                for pier, buckets in self.hourly_density.items()
            },
            'total_flights': self.total_flights,
        }


@dataclass
class StatsResult:
    """Explicit success / degraded / failure result of the dashboard service."""
    status: ResultStatus
    aggregates: Optional[FlightAggregates] = None
    error: Optional[str] = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def is_degraded(self) -> bool:
        return self.status is ResultStatus.DEGRADED
