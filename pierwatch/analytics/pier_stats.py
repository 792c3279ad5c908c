"""
Pier utilization and hourly density.

Pier D is the one multi-purpose pier: its gates 59-87 serve Schengen
flights and gates 1-57 serve non-Schengen flights, so D flights are split
into two synthetic sub-piers by gate number. Gates outside both ranges
(or without digits) stay on plain "D", classified Schengen. A D flight
with no gate at all is not split and, like any pier off the Schengen
list, is classified non-Schengen.

Every other pier is Schengen if it is on the fixed Schengen list.
"""

import logging
import math
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from pierwatch.config import AirportConfig, config
from pierwatch.models import FlightDirection, FlightRecord, HourlyBucket, PierStatistic, PierStatus, SchengenType

logger = logging.getLogger(__name__)

# Hour slots shown on the hourly chart (06:00 - 23:00 inclusive)
FIRST_HOUR = 6
LAST_HOUR = 23

_NON_DIGITS = re.compile(r'\D')


def gate_number(gate: str) -> Optional[int]:
    """All digits of the gate id as one number ('D62' -> 62), or None."""
    digits = _NON_DIGITS.sub('', gate or '')
    return int(digits) if digits else None


def derive_pier_key(
    pier: str,
    gate: str,
    airport: Optional[AirportConfig] = None,
) -> Tuple[Optional[str], SchengenType]:
    """
    Grouping key and Schengen classification for a flight's pier.

    Returns (None, ...) when the flight has no pier.
    """
    airport = airport or config.airport
    if not pier:
        return None, SchengenType.NON_SCHENGEN

    if pier == airport.multi_purpose_pier and gate:
        number = gate_number(gate)
        if number is not None:
            low, high = airport.schengen_gates
            if low <= number <= high:
                return f'{pier}-Schengen', SchengenType.SCHENGEN
            low, high = airport.non_schengen_gates
            if low <= number <= high:
                return f'{pier}-NonSchengen', SchengenType.NON_SCHENGEN
        return pier, SchengenType.SCHENGEN

    if pier in airport.schengen_piers:
        return pier, SchengenType.SCHENGEN
    return pier, SchengenType.NON_SCHENGEN


def utilization_percent(flights: int, total: int) -> int:
    """Share of all flights, as a whole percentage rounded half up."""
    if total <= 0:
        return 0
    return int(math.floor(flights / total * 100 + 0.5))


def utilization_status(utilization: int) -> PierStatus:
    if utilization > 20:
        return PierStatus.HIGH
    if utilization > 10:
        return PierStatus.MEDIUM
    return PierStatus.LOW


def compute_pier_statistics(
    flights: Sequence[FlightRecord],
    airport: Optional[AirportConfig] = None,
) -> List[PierStatistic]:
    """
    Count flights per pier key and derive utilization.

    The denominator is every flight passed in, including flights without
    a pier. Result is sorted by flight count, busiest first.
    """
    total = len(flights)
    counts: Dict[str, Dict[str, int]] = {}
    types: Dict[str, SchengenType] = {}

    for flight in flights:
        key, schengen_type = derive_pier_key(flight.pier, flight.gate, airport)
        if key is None:
            continue
        if key not in counts:
            counts[key] = {'flights': 0, 'arrivals': 0, 'departures': 0}
            types[key] = schengen_type

        counts[key]['flights'] += 1
        if flight.direction == FlightDirection.ARRIVAL:
            counts[key]['arrivals'] += 1
        else:
            counts[key]['departures'] += 1

    stats = []
    for key, c in counts.items():
        utilization = utilization_percent(c['flights'], total)
        stats.append(PierStatistic(
            pier=key,
            flights=c['flights'],
            arrivals=c['arrivals'],
            departures=c['departures'],
            utilization=utilization,
            status=utilization_status(utilization),
            type=types[key],
        ))

    stats.sort(key=lambda s: s.flights, reverse=True)
    return stats


def compute_hourly_density(
    flights: Iterable[FlightRecord],
    pier_key: str,
    airport: Optional[AirportConfig] = None,
) -> List[HourlyBucket]:
    """
    Bucket one pier's flights into hour slots 06-23.

    Hours are taken from the scheduled time in the airport timezone.
    Flights with an unparseable time are skipped and logged; hours outside
    the chart are ignored.
    """
    airport = airport or config.airport
    tz = airport.tzinfo
    hours = []

    for flight in flights:
        key, _ = derive_pier_key(flight.pier, flight.gate, airport)
        if key != pier_key:
            continue
        scheduled = flight.scheduled_at
        if scheduled is None:
            logger.warning(f'Invalid date format for {flight.flight_name}: {flight.schedule_datetime!r}')
            continue
        hour = scheduled.astimezone(tz).hour
        if FIRST_HOUR <= hour <= LAST_HOUR:
            hours.append(hour - FIRST_HOUR)

    slots = LAST_HOUR - FIRST_HOUR + 1
    counts = np.bincount(np.array(hours, dtype=np.int64), minlength=slots)
    peak = counts.max()
    intensities = counts / peak if peak > 0 else np.zeros(slots)

    return [
        HourlyBucket(
            hour=f'{FIRST_HOUR + i:02d}:00',
            flights=int(counts[i]),
            intensity=float(intensities[i]),
        )
        for i in range(slots)
    ]


def peak_hour(buckets: Sequence[HourlyBucket]) -> Optional[HourlyBucket]:
    """Busiest bucket (earliest on ties), or None if no flights at all."""
    busiest = max(buckets, key=lambda b: b.flights, default=None)
    if busiest is None or busiest.flights == 0:
        return None
    return busiest
