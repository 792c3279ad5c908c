"""
Filter and dedup stage.

Pure functions over normalized FlightRecords; no I/O.

Filters compose by logical AND. Deduplication keeps one record per flight
number: the one with the latest lastUpdatedAt. Ties (equal or unparseable
timestamps) keep the record seen first, and input order is the order pages
were fetched in, so the result is deterministic.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from pierwatch.config import config
from pierwatch.models import FlightDirection, FlightRecord

logger = logging.getLogger(__name__)


class FlightStatus(str, Enum):
    """Canonical public flight states."""
    SCHEDULED = 'Scheduled'
    BOARDING = 'Boarding'
    ON_TIME = 'OnTime'
    DELAYED = 'Delayed'
    DEPARTED = 'Departed'
    CANCELLED = 'Cancelled'
    DIVERTED = 'Diverted'
    TOMORROW = 'Tomorrow'


# Provider codes and spelled-out variants -> canonical state
STATE_ALIASES: Dict[str, FlightStatus] = {
    'SCH': FlightStatus.SCHEDULED,
    'SCHEDULED': FlightStatus.SCHEDULED,
    'BRD': FlightStatus.BOARDING,
    'BOARDING': FlightStatus.BOARDING,
    'ONTIME': FlightStatus.ON_TIME,
    'ON_TIME': FlightStatus.ON_TIME,
    'DEL': FlightStatus.DELAYED,
    'DELAYED': FlightStatus.DELAYED,
    'DEP': FlightStatus.DEPARTED,
    'DEPARTED': FlightStatus.DEPARTED,
    'CNX': FlightStatus.CANCELLED,
    'CANCELLED': FlightStatus.CANCELLED,
    'CANCELED': FlightStatus.CANCELLED,
    'DIV': FlightStatus.DIVERTED,
    'DIVERTED': FlightStatus.DIVERTED,
    'TOM': FlightStatus.TOMORROW,
    'TOMORROW': FlightStatus.TOMORROW,
}

ACTIVE_STATES = frozenset({
    FlightStatus.SCHEDULED,
    FlightStatus.BOARDING,
    FlightStatus.ON_TIME,
    FlightStatus.DELAYED,
    FlightStatus.DEPARTED,
})

TERMINAL_STATES = frozenset({
    FlightStatus.CANCELLED,
    FlightStatus.DIVERTED,
    FlightStatus.TOMORROW,
})


def canonical_state(tag: str) -> Optional[FlightStatus]:
    """Map a raw state tag to its canonical state, or None if unrecognized."""
    if not tag:
        return None
    return STATE_ALIASES.get(tag.strip().upper().replace(' ', '_'))


@dataclass
class FlightFilters:
    """
    Filter criteria. None / False disables a predicate.

    carrier is an IATA prefix matched against the operating flight, so
    codeshares operated by partners are excluded. schedule_date may be a
    date, a datetime or a YYYY-MM-DD string; an empty string disables the
    date filter.

    Raises:
        ValueError on construction if schedule_date is a malformed string
    """
    direction: Optional[FlightDirection] = None
    schedule_date: Optional[Union[date, str]] = None
    carrier: Optional[str] = None
    operational_only: bool = False

    def __post_init__(self):
        if isinstance(self.schedule_date, str):
            value = self.schedule_date.strip()
            if not value:
                self.schedule_date = None
                return
            try:
                self.schedule_date = date.fromisoformat(value[:10])
            except ValueError as e:
                raise ValueError(f'Invalid schedule date: {value!r}') from e

    @property
    def target_date(self) -> Optional[date]:
        if self.schedule_date is None:
            return None
        if isinstance(self.schedule_date, datetime):
            return self.schedule_date.date()
        return self.schedule_date

    @property
    def date_string(self) -> Optional[str]:
        target = self.target_date
        return target.isoformat() if target else None


def is_operational_flight(flight: FlightRecord) -> bool:
    """
    True unless the record explicitly says it will not operate.

    Records with no recognizable state are treated as active.
    """
    recognized = {s for s in map(canonical_state, flight.states) if s is not None}
    if recognized & ACTIVE_STATES:
        return True
    return not (recognized & TERMINAL_STATES)


def flight_local_date(flight: FlightRecord) -> Optional[date]:
    """Calendar day of the scheduled time in the airport timezone."""
    scheduled = flight.scheduled_at
    if scheduled is not None:
        return scheduled.astimezone(config.airport.tzinfo).date()
    if flight.schedule_date:
        try:
            return date.fromisoformat(flight.schedule_date[:10])
        except ValueError:
            return None
    return None


def is_operated_by(flight: FlightRecord, carrier: str) -> bool:
    return flight.operating_flight.upper().startswith(carrier.strip().upper())


def filter_flights(flights: Iterable[FlightRecord], filters: FlightFilters) -> List[FlightRecord]:
    """Apply every enabled predicate, logging how many records each removes."""
    filtered = list(flights)
    initial_count = len(filtered)

    if filters.direction is not None:
        before = len(filtered)
        filtered = [f for f in filtered if f.direction == filters.direction]
        logger.debug(f'Direction filter: {before} -> {len(filtered)} flights')

    if filters.carrier:
        before = len(filtered)
        filtered = [f for f in filtered if is_operated_by(f, filters.carrier)]
        logger.info(
            f'{filters.carrier.upper()} operating-carrier filter: {before} -> {len(filtered)} flights '
            f'(removed {before - len(filtered)} codeshares)'
        )

    target = filters.target_date
    if target is not None:
        before = len(filtered)
        filtered = [f for f in filtered if flight_local_date(f) == target]
        logger.info(
            f'Date filter ({target.isoformat()}): {before} -> {len(filtered)} flights '
            f'(removed {before - len(filtered)} date mismatches)'
        )

    if filters.operational_only:
        before = len(filtered)
        filtered = [f for f in filtered if is_operational_flight(f)]
        logger.info(
            f'Operational filter: {before} -> {len(filtered)} flights '
            f'(removed {before - len(filtered)} non-operational)'
        )

    logger.info(f'Total filtering: {initial_count} -> {len(filtered)} flights')
    return filtered


# Ranks below every parseable timestamp
_NEVER = datetime.min.replace(tzinfo=timezone.utc)


def remove_duplicate_flights(flights: Iterable[FlightRecord]) -> List[FlightRecord]:
    """
    Keep the most recently updated record for each flight number.

    Only a strictly later timestamp replaces the current winner, so ties go
    to the first-seen record. Output keeps first-appearance order of each
    flight number.
    """
    latest: Dict[int, FlightRecord] = {}
    latest_at: Dict[int, datetime] = {}
    initial_count = 0

    for flight in flights:
        initial_count += 1
        updated = flight.last_updated or _NEVER
        current = latest_at.get(flight.flight_number)
        if current is None or updated > current:
            latest[flight.flight_number] = flight
            latest_at[flight.flight_number] = updated

    logger.info(
        f'Deduplication: {initial_count} -> {len(latest)} flights '
        f'(removed {initial_count - len(latest)} duplicates)'
    )
    return list(latest.values())
