"""
Aggregation stage: normalized flights -> dashboard statistics.

Pure and recomputed from scratch on every call.
"""

import logging
from typing import Optional, Sequence

from pierwatch.analytics.aircraft_stats import compute_aircraft_statistics
from pierwatch.analytics.pier_stats import compute_hourly_density, compute_pier_statistics
from pierwatch.config import AirportConfig
from pierwatch.models import FlightAggregates, FlightRecord

logger = logging.getLogger(__name__)


def aggregate(
    flights: Sequence[FlightRecord],
    airport: Optional[AirportConfig] = None,
) -> FlightAggregates:
    """Compute pier statistics, aircraft statistics and hourly density per pier."""
    flights = list(flights)
    pier_stats = compute_pier_statistics(flights, airport)
    hourly_density = {
        stat.pier: compute_hourly_density(flights, stat.pier, airport)
        for stat in pier_stats
    }

    result = FlightAggregates(
        pier_stats=pier_stats,
        aircraft_stats=compute_aircraft_statistics(flights),
        hourly_density=hourly_density,
        total_flights=len(flights),
    )
    logger.info(
        f'Aggregated {len(flights)} flights into {len(pier_stats)} piers '
        f'and {len(result.aircraft_stats)} aircraft types'
    )
    return result
