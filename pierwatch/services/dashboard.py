"""
Dashboard service - the fetch-and-aggregate entry point.

Chains the whole pipeline:
    SchipholClient (cache read-through) -> normalize -> filter -> dedup
    -> aggregate

Upstream failures never reach the presentation layer as exceptions.
get_statistics() returns an explicit StatsResult: SUCCESS with real
numbers (possibly zero flights), DEGRADED with the fixed placeholder set,
or FAILURE when the caller asked for no placeholder.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from pierwatch.analytics import aggregate
from pierwatch.config import AirportConfig, config
from pierwatch.ingestion import FlightDataError, FlightFilters, FlightQuery, SchipholClient, prepare_flights
from pierwatch.models import (
    FlightAggregates,
    FlightDirection,
    FlightRecord,
    PierStatistic,
    PierStatus,
    ResultStatus,
    SchengenType,
    StatsResult,
)

logger = logging.getLogger(__name__)


# Served when the upstream is unavailable; numbers render as "n/v"
PLACEHOLDER_PIER_STATS = (
    PierStatistic(
        pier='D', flights=None, arrivals=None, departures=None, utilization=None,
        status=PierStatus.MEDIUM, type=SchengenType.SCHENGEN, purpose='Mixed operations',
    ),
    PierStatistic(
        pier='B', flights=None, arrivals=None, departures=None, utilization=None,
        status=PierStatus.LOW, type=SchengenType.SCHENGEN, purpose='Mixed operations',
    ),
    PierStatistic(
        pier='E', flights=None, arrivals=None, departures=None, utilization=None,
        status=PierStatus.HIGH, type=SchengenType.NON_SCHENGEN, purpose='Long-haul operations',
    ),
)


def placeholder_aggregates() -> FlightAggregates:
    """Fresh copy of the placeholder statistic set."""
    return FlightAggregates(
        pier_stats=[replace(p) for p in PLACEHOLDER_PIER_STATS],
        aircraft_stats=[],
        hourly_density={},
        total_flights=None,
    )


class DashboardService:
    """
    Service computing dashboard statistics from the live flight feed.

    The client and airport layout are injectable for testing; by default
    they come from application configuration.
    """

    def __init__(
        self,
        client: Optional[SchipholClient] = None,
        airport: Optional[AirportConfig] = None,
    ):
        self.client = client or SchipholClient.from_config()
        self.airport = airport or config.airport

    def default_filters(self) -> FlightFilters:
        """Today's operational flights of the dashboard carrier."""
        today = datetime.now(self.airport.tzinfo).date()
        return FlightFilters(
            direction=FlightDirection.parse(config.dashboard.direction),
            schedule_date=today,
            carrier=config.dashboard.carrier,
            operational_only=True,
        )

    def _query_for(self, filters: FlightFilters) -> FlightQuery:
        return FlightQuery(
            direction=filters.direction.value if filters.direction else None,
            airline=filters.carrier.upper() if filters.carrier else None,
            schedule_date=filters.date_string,
            fetch_all_pages=True,
        )

    def get_flights(self, filters: Optional[FlightFilters] = None) -> List[FlightRecord]:
        """
        Fetch and prepare flights matching the filters.

        Raises:
            FlightDataError if the upstream fetch fails
        """
        filters = filters or self.default_filters()
        response = self.client.fetch(self._query_for(filters))
        return prepare_flights(response.flights, filters)

    def get_statistics(
        self,
        filters: Optional[FlightFilters] = None,
        allow_placeholder: bool = True,
    ) -> StatsResult:
        """Fetch, prepare and aggregate; degrade to placeholders on failure."""
        try:
            flights = self.get_flights(filters)
        except FlightDataError as e:
            if allow_placeholder:
                logger.error(f'Flight fetch failed, serving placeholder statistics: {e}')
                return StatsResult(
                    status=ResultStatus.DEGRADED,
                    aggregates=placeholder_aggregates(),
                    error=str(e),
                )
            logger.error(f'Flight fetch failed: {e}')
            return StatsResult(status=ResultStatus.FAILURE, error=str(e))

        return StatsResult(
            status=ResultStatus.SUCCESS,
            aggregates=aggregate(flights, self.airport),
        )
