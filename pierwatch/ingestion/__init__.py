"""
Data ingestion module for PierWatch.

Handles fetching the Schiphol flight feed, normalizing records, and
filtering / deduplicating them before aggregation.
"""

from pierwatch.ingestion.schiphol_client import (
    FlightDataError,
    FlightQuery,
    FlightsResponse,
    ForbiddenError,
    ParseError,
    RateLimitedError,
    SchipholClient,
    TransportError,
    UnauthorizedError,
    UpstreamError,
    UpstreamTimeoutError,
)
from pierwatch.ingestion.filters import FlightFilters, filter_flights, remove_duplicate_flights
from pierwatch.ingestion.normalizer import normalize_flight, normalize_flights
from pierwatch.ingestion.pipeline import prepare_flights

__all__ = [
    'FlightDataError',
    'FlightQuery',
    'FlightsResponse',
    'ForbiddenError',
    'ParseError',
    'RateLimitedError',
    'SchipholClient',
    'TransportError',
    'UnauthorizedError',
    'UpstreamError',
    'UpstreamTimeoutError',
    'FlightFilters',
    'filter_flights',
    'remove_duplicate_flights',
    'normalize_flight',
    'normalize_flights',
    'prepare_flights',
]
