"""
Per aircraft type volume and delay statistics.

Reference data (category, manufacturer, capacity) comes from the static
tables in ingestion.aircraft_db; this module only groups and averages.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np

from pierwatch.analytics.delay import calculate_delay_minutes
from pierwatch.ingestion.aircraft_db import resolve_aircraft
from pierwatch.models import AircraftStatistic, FlightRecord

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = 'Unknown'


def compute_aircraft_statistics(flights: Sequence[FlightRecord]) -> List[AircraftStatistic]:
    """
    Group flights by aircraft type code.

    Average delay is the mean of (actual-or-estimated off block - scheduled)
    over the group, in minutes. Sorted by flight count, busiest first.
    """
    groups: Dict[str, List[FlightRecord]] = {}
    for flight in flights:
        groups.setdefault(flight.type_code or UNKNOWN_TYPE, []).append(flight)

    stats = []
    for type_code, members in groups.items():
        delays = np.array([
            calculate_delay_minutes(f.schedule_datetime, f.off_block_time)
            for f in members
        ], dtype=np.float64)

        # dict preserves first-seen order
        destinations = list(dict.fromkeys(d for f in members for d in f.destinations))

        profile = resolve_aircraft(None if type_code == UNKNOWN_TYPE else type_code)
        stats.append(AircraftStatistic(
            type_code=type_code,
            flights=len(members),
            average_delay=round(float(np.mean(delays)), 1),
            category=profile.category,
            manufacturer=profile.manufacturer,
            capacity=profile.capacity,
            description=profile.description,
            destinations=destinations,
        ))

    stats.sort(key=lambda s: s.flights, reverse=True)
    logger.debug(f'Computed statistics for {len(stats)} aircraft types')
    return stats
