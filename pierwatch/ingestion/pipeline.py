"""
Ingestion pipeline - turns a raw flights payload into clean records.

Pipeline stages:
1. Normalize: map raw dicts into FlightRecords with defaults
2. Filter: direction, operating carrier, date, operational status
3. Dedup: one record per flight number, latest update wins

Fetching happens before this (SchipholClient) and aggregation after it
(analytics.aggregate). Everything here is pure.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from pierwatch.ingestion.filters import FlightFilters, filter_flights, remove_duplicate_flights
from pierwatch.ingestion.normalizer import normalize_flights
from pierwatch.models import FlightRecord

logger = logging.getLogger(__name__)


def prepare_flights(
    raw_flights: Iterable[Any],
    filters: FlightFilters,
    now: Optional[datetime] = None,
) -> List[FlightRecord]:
    """Normalize, filter and deduplicate a batch of raw flights."""
    records = normalize_flights(raw_flights, now=now)
    filtered = filter_flights(records, filters)
    flights = remove_duplicate_flights(filtered)

    logger.info(f'Prepared {len(flights)} flights from {len(records)} raw records')
    return flights
