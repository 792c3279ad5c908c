"""
Metrics API endpoints.

Provides endpoints for:
- GET /api/metrics/piers - Pier utilization statistics
- GET /api/metrics/aircraft - Aircraft type volume and delay statistics
- GET /api/metrics/hourly/<pier> - Hourly flight density for one pier
- GET /api/metrics/cache - Response cache statistics
- POST /api/metrics/cache/clear - Drop all cached responses

Statistics endpoints accept the same filter parameters as /api/flights.
When the flight feed is down they still answer 200 with placeholder data
and status "degraded".
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from pierwatch.analytics import peak_hour
from pierwatch.api.flights import InvalidFilters, parse_filters
from pierwatch.config import config

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__, url_prefix='/api/metrics')


def _statistics():
    """
    Run the dashboard service for the request's filters.

    Returns (result, None) or (None, error_response).
    """
    try:
        filters = parse_filters(request.args)
    except InvalidFilters as e:
        return None, (jsonify({'error': str(e)}), 400)

    result = current_app.config['DASHBOARD_SERVICE'].get_statistics(filters)
    if result.aggregates is None:
        return None, (jsonify({'status': result.status.value, 'error': result.error}), 502)
    return result, None


def _envelope(result, start_time: float, **payload):
    query_time_ms = (time.perf_counter() - start_time) * 1000
    return jsonify({
        'status': result.status.value,
        'error': result.error,
        **payload,
        'timestamp': result.fetched_at.isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@metrics_bp.route('/piers', methods=['GET'])
def get_pier_metrics():
    """
    Get per-pier flight counts and utilization.

    Returns piers sorted busiest first. Pier D is split into
    D-Schengen / D-NonSchengen by gate number.
    """
    start_time = time.perf_counter()
    result, error = _statistics()
    if error:
        return error

    aggregates = result.aggregates
    return _envelope(
        result, start_time,
        piers=[p.to_dict() for p in aggregates.pier_stats],
        total_flights=aggregates.total_flights,
    )


@metrics_bp.route('/aircraft', methods=['GET'])
def get_aircraft_metrics():
    """Get per-aircraft-type flight counts and average delay."""
    start_time = time.perf_counter()
    result, error = _statistics()
    if error:
        return error

    aggregates = result.aggregates
    return _envelope(
        result, start_time,
        aircraft=[a.to_dict() for a in aggregates.aircraft_stats],
        total_flights=aggregates.total_flights,
    )


@metrics_bp.route('/hourly/<pier>', methods=['GET'])
def get_hourly_density(pier: str):
    """
    Get the hourly flight distribution (06:00-23:00) for one pier.

    Includes the peak hour and the pier's total for the day.
    """
    start_time = time.perf_counter()
    result, error = _statistics()
    if error:
        return error

    buckets = result.aggregates.hourly_density.get(pier)
    if buckets is None:
        if result.is_degraded:
            buckets = []
        else:
            return jsonify({'error': f'Unknown pier: {pier}'}), 404

    peak = peak_hour(buckets)
    return _envelope(
        result, start_time,
        pier=pier,
        hours=[b.to_dict() for b in buckets],
        peak_hour=peak.hour if peak else None,
        total_flights=sum(b.flights for b in buckets),
    )


@metrics_bp.route('/cache', methods=['GET'])
def get_cache_stats():
    """Get response cache statistics and client request counters."""
    service = current_app.config['DASHBOARD_SERVICE']
    cache = service.client.cache

    return jsonify({
        'cache': cache.stats,
        'client': service.client.stats,
        'config': {
            'cache_duration_seconds': config.cache.duration_seconds,
            'cache_expiry_seconds': config.cache.expiry_seconds,
            'schiphol_configured': config.schiphol.is_configured,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@metrics_bp.route('/cache/clear', methods=['POST'])
def clear_cache():
    """Drop all cached responses so the next request refetches."""
    service = current_app.config['DASHBOARD_SERVICE']
    cleared = service.client.cache.clear()

    logger.info(f'Cache cleared via API ({cleared} entries)')
    return jsonify({
        'success': True,
        'message': 'Cache cleared successfully',
        'cleared_entries': cleared,
    })
