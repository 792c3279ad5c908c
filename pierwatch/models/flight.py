"""
Canonical flight record.

The Schiphol feed is inconsistently shaped: field names vary between API
versions and optional blocks are often missing entirely. Records are
normalized into this shape once (see ingestion.normalizer) so the filter
and aggregation stages never have to guess.

Timestamps are kept as the ISO 8601 strings the provider publishes and
parsed on demand, so a record round-trips to JSON unchanged.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional, List

from pierwatch.config import config


class FlightDirection(str, Enum):
    """Direction of a flight relative to the airport (API codes)."""
    DEPARTURE = 'D'
    ARRIVAL = 'A'

    @property
    def label(self) -> str:
        return 'Departure' if self is FlightDirection.DEPARTURE else 'Arrival'

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['FlightDirection']:
        """Accept API codes ('D'/'A') or full names; None if unrecognized."""
        if not value or not isinstance(value, str):
            return None
        value = value.strip().upper()
        if value in ('D', 'DEPARTURE'):
            return cls.DEPARTURE
        if value in ('A', 'ARRIVAL'):
            return cls.ARRIVAL
        return None


def parse_timestamp(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing 'Z'. Naive values are assumed to be in the airport
    timezone. Returns None for empty or invalid input.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or config.airport.tzinfo)
    return parsed


@dataclass
class AircraftType:
    """IATA aircraft type as published: main type and sub type."""
    main: str = ''
    sub: str = ''

    @property
    def code(self) -> str:
        """Most specific code available, or empty string."""
        return self.sub or self.main


@dataclass
class FlightRecord:
    """
    Normalized flight record.

    flight_number is the dedup key: the provider republishes a flight
    every time it changes, so the same number appears once per update.
    """
    # Identity
    flight_name: str
    flight_number: int

    # Operational
    direction: FlightDirection
    states: List[str] = field(default_factory=list)

    # Temporal (ISO 8601 strings)
    schedule_datetime: str = ''
    schedule_date: str = ''
    estimated_off_block: str = ''
    actual_off_block: str = ''
    last_updated_at: str = ''

    # Physical
    aircraft_type: AircraftType = field(default_factory=AircraftType)
    gate: str = ''
    pier: str = ''
    destinations: List[str] = field(default_factory=list)

    # Operating carrier information
    main_flight: Optional[str] = None
    prefix_iata: Optional[str] = None
    prefix_icao: Optional[str] = None

    @property
    def operating_flight(self) -> str:
        """
        Flight name of the operating carrier.

        For codeshares mainFlight names the partner that actually flies the
        aircraft (e.g. KL1234 marketed, HV5678 operated).
        """
        return self.main_flight or self.flight_name

    @property
    def operating_carrier(self) -> str:
        return self.operating_flight[:2].upper()

    @property
    def type_code(self) -> str:
        return self.aircraft_type.code

    @property
    def scheduled_at(self) -> Optional[datetime]:
        return parse_timestamp(self.schedule_datetime)

    @property
    def last_updated(self) -> Optional[datetime]:
        return parse_timestamp(self.last_updated_at)

    @property
    def off_block_time(self) -> str:
        """Actual off-block time if known, else the estimate."""
        return self.actual_off_block or self.estimated_off_block

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict using the provider's field names."""
        return {
            'flightName': self.flight_name,
            'flightNumber': self.flight_number,
            'flightDirection': self.direction.value,
            'scheduleDateTime': self.schedule_datetime,
            'scheduleDate': self.schedule_date,
            'publicEstimatedOffBlockTime': self.estimated_off_block,
            'actualOffBlockTime': self.actual_off_block or None,
            'publicFlightState': {'flightStates': list(self.states)},
            'aircraftType': {
                'iataMain': self.aircraft_type.main,
                'iataSub': self.aircraft_type.sub,
            },
            'gate': self.gate,
            'pier': self.pier,
            'route': {'destinations': list(self.destinations)},
            'lastUpdatedAt': self.last_updated_at,
            'mainFlight': self.main_flight,
            'prefixIATA': self.prefix_iata,
            'prefixICAO': self.prefix_icao,
        }
