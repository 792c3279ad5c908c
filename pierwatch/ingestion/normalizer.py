"""
Record normalizer: raw Schiphol flight dicts -> FlightRecord.

normalize_flight never fails on a mapping. Every field has a default, and
alternate field names seen across API versions are tried in order.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from pierwatch.models import AircraftType, FlightDirection, FlightRecord

logger = logging.getLogger(__name__)

# Fallback order for each field
SCHEDULED_TIME_FIELDS = ('scheduleDateTime', 'scheduledDateTime', 'scheduleDate')
ESTIMATED_TIME_FIELDS = ('publicEstimatedOffBlockTime', 'estimatedOffBlockTime')
LAST_UPDATED_FIELDS = ('lastUpdatedAt', 'updatedAt')


def _first(raw: Mapping[str, Any], names) -> str:
    for name in names:
        value = raw.get(name)
        if value and isinstance(value, str):
            return value
    return ''


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''


def _optional_text(value: Any) -> Optional[str]:
    return _text(value) or None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def _flight_number(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _aircraft_type(value: Any) -> AircraftType:
    """Unify the structured {iataMain, iataSub} shape and bare strings."""
    if isinstance(value, Mapping):
        return AircraftType(main=_text(value.get('iataMain')), sub=_text(value.get('iataSub')))
    if isinstance(value, str):
        code = value.strip()
        return AircraftType(main=code, sub=code)
    return AircraftType()


def _nested(raw: Mapping[str, Any], outer: str, inner: str) -> Any:
    block = raw.get(outer)
    if isinstance(block, Mapping):
        return block.get(inner)
    return None


def normalize_flight(raw: Mapping[str, Any], now: Optional[datetime] = None) -> FlightRecord:
    """
    Map one raw flight into the canonical shape.

    A record without any update timestamp is stamped with the fetch time.
    """
    scheduled = _first(raw, SCHEDULED_TIME_FIELDS)
    schedule_date = _text(raw.get('scheduleDate')) or scheduled.split('T')[0]

    states = _string_list(_nested(raw, 'publicFlightState', 'flightStates')) \
        or _string_list(raw.get('flightStates'))
    destinations = _string_list(_nested(raw, 'route', 'destinations')) \
        or _string_list(raw.get('destinations'))

    last_updated = _first(raw, LAST_UPDATED_FIELDS)
    if not last_updated:
        last_updated = (now or datetime.now(timezone.utc)).isoformat()

    return FlightRecord(
        flight_name=_text(raw.get('flightName')),
        flight_number=_flight_number(raw.get('flightNumber')),
        direction=FlightDirection.parse(raw.get('flightDirection')) or FlightDirection.DEPARTURE,
        states=states,
        schedule_datetime=scheduled,
        schedule_date=schedule_date,
        estimated_off_block=_first(raw, ESTIMATED_TIME_FIELDS) or scheduled,
        actual_off_block=_text(raw.get('actualOffBlockTime')),
        last_updated_at=last_updated,
        aircraft_type=_aircraft_type(raw.get('aircraftType')),
        gate=_text(raw.get('gate')),
        pier=_text(raw.get('pier')),
        destinations=destinations,
        main_flight=_optional_text(raw.get('mainFlight')),
        prefix_iata=_optional_text(raw.get('prefixIATA')),
        prefix_icao=_optional_text(raw.get('prefixICAO')),
    )


def normalize_flights(raw_flights: Iterable[Any], now: Optional[datetime] = None) -> List[FlightRecord]:
    """
    Normalize a batch of raw flights.

    Items that are not JSON objects are skipped and logged; the rest of the
    batch is still processed.
    """
    now = now or datetime.now(timezone.utc)
    records = []
    skipped = 0

    for index, raw in enumerate(raw_flights):
        if not isinstance(raw, Mapping):
            skipped += 1
            logger.warning(f'Skipping malformed flight record at index {index}: {type(raw).__name__}')
            continue
        records.append(normalize_flight(raw, now=now))

    if skipped:
        logger.warning(f'Skipped {skipped} malformed flight records')
    logger.debug(f'Normalized {len(records)} flight records')
    return records
