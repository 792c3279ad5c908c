"""
PierWatch Backend Package.

Live pier and aircraft statistics for one airline at Schiphol, built with
Flask, Requests and NumPy.

Modules:
    api/         REST endpoints for flights, statistics and cache status
    models/      Dataclasses for flight records and derived statistics
    ingestion/   Schiphol API client, normalizer, filters and dedup
    analytics/   Pier, hourly density and aircraft type aggregation
    services/    Fetch-and-aggregate entry point with placeholder fallback
    cache.py     Thread-safe time-bounded cache for API responses
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
