"""
Flight data API endpoints.

Provides endpoints for:
- GET /api/flights - Filtered, deduplicated flights for the dashboard

Filters can be passed the way the dashboard front end sends them, as one
JSON-encoded `filters` parameter:
    ?filters={"flightDirection":"D","scheduleDate":"2025-06-01",
              "isOperationalFlight":true,"prefixicao":"KL"}
or as plain parameters: direction, date, carrier, operational.
"""

import json
import logging
import time
from datetime import date, datetime, timezone
from typing import Mapping

from flask import Blueprint, current_app, jsonify, request

from pierwatch.ingestion import FlightDataError, FlightFilters
from pierwatch.models import FlightDirection

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


class InvalidFilters(ValueError):
    """Query parameters could not be turned into FlightFilters."""


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes')


def parse_filters(args: Mapping[str, str]) -> FlightFilters:
    """
    Build FlightFilters from request arguments.

    Without any filter arguments the dashboard defaults apply.

    Raises:
        InvalidFilters on malformed input
    """
    raw = args.get('filters')
    if raw:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise InvalidFilters(f'filters is not valid JSON: {e}') from e
        if not isinstance(data, dict):
            raise InvalidFilters('filters must be a JSON object')
        direction = data.get('flightDirection')
        schedule_date = data.get('scheduleDate')
        carrier = data.get('prefixicao') or data.get('airline')
        operational = data.get('isOperationalFlight', False)
    elif any(k in args for k in ('direction', 'date', 'carrier', 'operational')):
        direction = args.get('direction')
        schedule_date = args.get('date')
        carrier = args.get('carrier')
        operational = args.get('operational', 'false')
    else:
        return current_app.config['DASHBOARD_SERVICE'].default_filters()

    parsed_direction = None
    if direction:
        parsed_direction = FlightDirection.parse(direction)
        if parsed_direction is None:
            raise InvalidFilters(f'Invalid flight direction: {direction}')

    parsed_date = None
    if schedule_date:
        try:
            parsed_date = date.fromisoformat(str(schedule_date)[:10])
        except ValueError as e:
            raise InvalidFilters(f'Invalid schedule date: {schedule_date}') from e

    return FlightFilters(
        direction=parsed_direction,
        schedule_date=parsed_date,
        carrier=str(carrier).strip().upper() if carrier else None,
        operational_only=_as_bool(operational),
    )


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    List flights matching the filters.

    Response includes query timing for latency awareness.
    """
    start_time = time.perf_counter()

    try:
        filters = parse_filters(request.args)
    except InvalidFilters as e:
        return jsonify({'error': str(e)}), 400

    service = current_app.config['DASHBOARD_SERVICE']
    try:
        flights = service.get_flights(filters)
    except FlightDataError as e:
        logger.error(f'Failed to fetch flights: {e}')
        return jsonify({'error': str(e)}), 502

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'flights': [f.to_dict() for f in flights],
        'count': len(flights),
        'filters': {
            'flightDirection': filters.direction.value if filters.direction else None,
            'scheduleDate': filters.date_string,
            'carrier': filters.carrier,
            'isOperationalFlight': filters.operational_only,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
